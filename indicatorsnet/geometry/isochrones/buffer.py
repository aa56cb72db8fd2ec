import numpy as np
import geopandas as gpd
from loguru import logger
from .base import IsochroneService, LOCATION_INDEX_COLUMN
from ...enums import TravelProfile


class BufferIsochrones(IsochroneService):
    """Offline isochrones approximated by Euclidean buffers.

    Points must be in a projected CRS measured in metres. The travel profile is ignored.
    """

    def __init__(self, quad_segs: int = 16):
        self.quad_segs = quad_segs

    async def isochrones(self, points: gpd.GeoSeries, profile: TravelProfile, distance: float) -> gpd.GeoDataFrame:
        if points.crs is not None and not points.crs.is_projected:
            logger.warning("Buffer isochrones are built in a geographic CRS. Distance is treated as degrees")
        polygons = points.buffer(distance, quad_segs=self.quad_segs)
        return gpd.GeoDataFrame(
            {LOCATION_INDEX_COLUMN: np.arange(len(points))}, geometry=polygons.values, crs=points.crs
        )
