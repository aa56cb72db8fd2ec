import pandas as pd
import geopandas as gpd
from loguru import logger
from .schemas import OverlayAccumulationParameters
from ..base import BaseIndicator
from ..registry import register_indicator
from ...common.values import parse_date
from ...enums import AggregationType, MatchingMethod, TimeWeighting
from ...spatial_units.aggregation.matching import match_features, UNMATCHED

OVERLAY_ACCUMULATION_INDICATOR = "overlay_accumulation"
OWNER_COLUMN = "owner"
VALUE_COLUMN = "value"


def activation_years(series: pd.Series) -> pd.Series:
    """Activation year of every point, given as a year number or a date."""
    years = pd.to_numeric(series, errors="coerce")
    dates = pd.to_datetime(series.where(years.isna()), errors="coerce")
    return years.fillna(dates.dt.year)


def time_weights(years_active: pd.Series, time_weighting: TimeWeighting, decay_rate: float) -> pd.Series:
    """Weight of a value by the number of years it has been active."""
    if time_weighting == TimeWeighting.ACCUMULATED:
        return 1 + years_active
    return (1 - decay_rate) ** years_active


@register_indicator(OVERLAY_ACCUMULATION_INDICATOR)
class OverlayAccumulationIndicator(BaseIndicator):
    """Time weighted accumulation of point values within target features.

    Points active in the target year (activation year not after it) add
    their weighted value to the first target feature containing them.
    Features without points get 0.

    Parameters
    ----------
    georesource : str
        Id or name of the points georesource.
    value_attribute : str
        Attribute holding the value of a point.
    activation_attribute : str
        Attribute holding the activation year or date of a point.
    **kwargs
        Passed to :class:`BaseIndicator`.
    """

    parameters_schema = OverlayAccumulationParameters
    aggregation_type = AggregationType.SUM

    def __init__(self, georesource: str, value_attribute: str, activation_attribute: str, **kwargs):
        super().__init__(**kwargs)
        self.georesource = georesource
        self.value_attribute = value_attribute
        self.activation_attribute = activation_attribute

    def _eligible_points(self, points_gdf: gpd.GeoDataFrame, target_year: int) -> gpd.GeoDataFrame:
        for column in [self.value_attribute, self.activation_attribute]:
            if column not in points_gdf.columns:
                raise ValueError(f"Georesource {self.georesource} does not have the {column} attribute")
        points_gdf = points_gdf.assign(
            **{
                VALUE_COLUMN: pd.to_numeric(points_gdf[self.value_attribute], errors="coerce"),
                "activation_year": activation_years(points_gdf[self.activation_attribute]),
            }
        )
        invalid = points_gdf[VALUE_COLUMN].isna() | points_gdf["activation_year"].isna()
        if invalid.any():
            logger.warning(f"{invalid.sum()} points without valid value or activation are ignored")
        points_gdf = points_gdf[~invalid]
        return points_gdf[points_gdf["activation_year"] <= target_year]

    def calculate(self, date, targets_gdf: gpd.GeoDataFrame, base_indicators, georesources, parameters):
        target_year = parse_date(date).year
        points_gdf = self._eligible_points(georesources[self.georesource], target_year)
        logger.info(f"{len(points_gdf)} points are active in {target_year}")

        years_active = target_year - points_gdf["activation_year"]
        weighted = points_gdf[VALUE_COLUMN] * time_weights(years_active, parameters.time_weighting, parameters.decay_rate)
        owners = match_features(targets_gdf, points_gdf, MatchingMethod.INTERIOR_POINT, self.geometry_service)
        n_outside = int((owners == UNMATCHED).sum())
        if n_outside > 0:
            logger.warning(f"{n_outside} points are outside of all target features and are ignored")

        df = pd.DataFrame({OWNER_COLUMN: owners, VALUE_COLUMN: weighted.to_numpy()})
        sums = df[df[OWNER_COLUMN] != UNMATCHED].groupby(OWNER_COLUMN)[VALUE_COLUMN].sum()
        values = sums.reindex(range(len(targets_gdf)), fill_value=0.0).to_numpy() * parameters.scale
        return pd.Series(values, index=targets_gdf.index), pd.Series(1.0, index=targets_gdf.index)
