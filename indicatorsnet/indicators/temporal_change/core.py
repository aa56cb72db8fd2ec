import pandas as pd
import geopandas as gpd
from loguru import logger
from .schemas import TemporalChangeParameters
from ..base import BaseIndicator, calculate_per_feature
from ..registry import register_indicator
from ...common.errors import LocalComputeGap
from ...common.values import get_indicator_values, subtract_period
from ...enums import AggregationType, ChangeType

TEMPORAL_CHANGE_INDICATOR = "temporal_change"
CURRENT_COLUMN = "current"
PREVIOUS_COLUMN = "previous"


def _change(feature_id: str, current: float, previous: float, change_type: ChangeType) -> float:
    if pd.isna(current) or pd.isna(previous):
        raise LocalComputeGap(feature_id, "value of one of the compared dates is missing")
    if change_type == ChangeType.ABSOLUTE:
        return current - previous
    if previous == 0:
        raise LocalComputeGap(feature_id, "previous value is 0")
    if change_type == ChangeType.RELATIVE:
        return 100 * (current - previous) / previous
    return current / previous


@register_indicator(TEMPORAL_CHANGE_INDICATOR)
class TemporalChangeIndicator(BaseIndicator):
    """Change of a base indicator between the target date and an earlier date.

    The earlier date is the target date moved back by ``offset`` periods.

    Parameters
    ----------
    base_indicator : str
        Id or name of the base indicator dataset.
    **kwargs
        Passed to :class:`BaseIndicator`.
    """

    parameters_schema = TemporalChangeParameters
    aggregation_type = AggregationType.AVERAGE

    def __init__(self, base_indicator: str, **kwargs):
        super().__init__(**kwargs)
        self.base_indicator = base_indicator

    def calculate(self, date, targets_gdf: gpd.GeoDataFrame, base_indicators, georesources, parameters):
        base_gdf = base_indicators[self.base_indicator]
        previous_date = subtract_period(date, **{parameters.period_unit.value: parameters.offset})
        logger.info(f"Comparing {self.base_indicator} with {previous_date} ({parameters.change_type.value})")

        df = pd.DataFrame(
            {
                CURRENT_COLUMN: get_indicator_values(base_gdf, date),
                PREVIOUS_COLUMN: get_indicator_values(base_gdf, previous_date),
            }
        ).reindex(targets_gdf.index)
        values = calculate_per_feature(
            df, lambda s: _change(s.name, s[CURRENT_COLUMN], s[PREVIOUS_COLUMN], parameters.change_type)
        )
        return values, self.feature_areas(targets_gdf)
