import numpy as np
import pandas as pd
import geopandas as gpd
import shapely
from loguru import logger
from .schemas import ReachabilityParameters, BuildingsSchema
from ..base import BaseIndicator
from ..registry import register_indicator
from ...enums import AggregationType, MatchingMethod, ReachMethod
from ...geometry import calculate_isochrones
from ...spatial_units.aggregation.matching import match_features, UNMATCHED

REACHABILITY_INDICATOR = "reachability"
OWNER_COLUMN = "owner"
AREA_COLUMN = "area"
COVERED_AREA_COLUMN = "covered_area"


def filter_facilities(facilities_gdf: gpd.GeoDataFrame, attribute: str | None, value: str | None) -> gpd.GeoDataFrame:
    """Facilities whose *attribute* contains *value*, case-insensitive."""
    if attribute is None or value is None:
        return facilities_gdf
    if attribute not in facilities_gdf.columns:
        raise ValueError(f"Facilities do not have the {attribute} attribute")
    mask = facilities_gdf[attribute].astype(str).str.contains(value, case=False, regex=False, na=False)
    logger.info(f"{mask.sum()} of {len(facilities_gdf)} facilities match {attribute} containing {value!r}")
    return facilities_gdf[mask]


@register_indicator(REACHABILITY_INDICATOR)
class ReachabilityIndicator(BaseIndicator):
    """Share of residential building area within reach of facilities.

    Buildings are located at their centroids and count for the first target
    feature containing them. A target without buildings gets NoData.

    Parameters
    ----------
    facilities : str
        Id or name of the facilities georesource.
    buildings : str
        Id or name of the residential buildings georesource.
    **kwargs
        Passed to :class:`BaseIndicator`. An ``isochrone_service`` is needed
        for the isochrone method.
    """

    parameters_schema = ReachabilityParameters
    aggregation_type = AggregationType.AVERAGE

    def __init__(self, facilities: str, buildings: str, **kwargs):
        super().__init__(**kwargs)
        self.facilities = facilities
        self.buildings = buildings

    async def _reach_area(self, facilities_gdf: gpd.GeoDataFrame, parameters: ReachabilityParameters):
        if len(facilities_gdf) == 0:
            logger.warning("No facilities found. Nothing is reachable")
            return shapely.Polygon()
        if parameters.method == ReachMethod.BUFFER:
            logger.info(f"Buffering {len(facilities_gdf)} facilities by {parameters.max_distance}")
            areas = self.geometry_service.buffer(facilities_gdf.geometry, parameters.max_distance)
        else:
            if self.isochrone_service is None:
                raise ValueError("Isochrone service must be provided for the isochrone method")
            points = self.geometry_service.interior_point(facilities_gdf.geometry)
            isochrones_gdf = await calculate_isochrones(
                points, self.isochrone_service, parameters.profile, parameters.max_distance
            )
            areas = isochrones_gdf.geometry
        return shapely.union_all(areas.values)

    async def compute(self, date, targets_gdf: gpd.GeoDataFrame, base_indicators, georesources, parameters):
        facilities_gdf = filter_facilities(
            georesources[self.facilities], parameters.filter_attribute, parameters.filter_value
        )
        buildings_gdf = BuildingsSchema(georesources[self.buildings], allow_empty=True)
        reach_area = await self._reach_area(facilities_gdf, parameters)

        centroids = buildings_gdf.geometry.centroid
        owners = match_features(
            targets_gdf, gpd.GeoDataFrame(geometry=centroids), MatchingMethod.INTERIOR_POINT, self.geometry_service
        )
        df = pd.DataFrame(
            {
                OWNER_COLUMN: owners,
                AREA_COLUMN: self.geometry_service.area(buildings_gdf.geometry).to_numpy(),
                COVERED_AREA_COLUMN: 0.0,
            }
        )
        covered = self.geometry_service.within(centroids, reach_area).to_numpy(dtype=bool)
        df.loc[covered, COVERED_AREA_COLUMN] = df.loc[covered, AREA_COLUMN]
        n_outside = int((owners == UNMATCHED).sum())
        if n_outside > 0:
            logger.warning(f"{n_outside} buildings are outside of all target features and are ignored")

        sums = df[df[OWNER_COLUMN] != UNMATCHED].groupby(OWNER_COLUMN)[[AREA_COLUMN, COVERED_AREA_COLUMN]].sum()
        sums = sums.reindex(range(len(targets_gdf)), fill_value=0.0)
        total = sums[AREA_COLUMN].to_numpy()
        covered_total = sums[COVERED_AREA_COLUMN].to_numpy()
        with np.errstate(divide="ignore", invalid="ignore"):
            values = np.where(total > 0, covered_total / total, np.nan)
        values = pd.Series(values, index=targets_gdf.index)
        weights = pd.Series(total, index=targets_gdf.index)
        return values, weights
