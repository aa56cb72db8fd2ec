from abc import ABC, abstractmethod
import geopandas as gpd
from ...enums import TravelProfile

LOCATION_INDEX_COLUMN = "location_index"


class IsochroneService(ABC):
    """Asynchronous provider of isochrones by travel distance."""

    max_locations: int | None = None
    """Maximal number of locations accepted per call, ``None`` when unlimited."""

    @abstractmethod
    async def isochrones(self, points: gpd.GeoSeries, profile: TravelProfile, distance: float) -> gpd.GeoDataFrame:
        """Isochrones around *points*.

        Parameters
        ----------
        points : geopandas.GeoSeries
            Start locations with a CRS.
        profile : TravelProfile
            Travel mode.
        distance : float
            Maximal travel distance in metres.

        Returns
        -------
        geopandas.GeoDataFrame
            One polygon per point with ``location_index`` holding the position
            of the point within *points*. Any CRS.
        """
