import pandas as pd
import geopandas as gpd
from loguru import logger
from .schemas import ShareParameters
from ..base import BaseIndicator
from ..registry import register_indicator
from ...common.values import get_indicator_values
from ...enums import AggregationType

SHARE_INDICATOR = "share"


@register_indicator(SHARE_INDICATOR)
class ShareIndicator(BaseIndicator):
    """Ratio of summed numerator base indicators to summed denominator base indicators.

    Parameters
    ----------
    numerators : list of str
        Ids or names of the base indicators summed as numerator.
    denominators : list of str
        Ids or names of the base indicators summed as denominator.
    **kwargs
        Passed to :class:`BaseIndicator`.
    """

    parameters_schema = ShareParameters
    aggregation_type = AggregationType.AVERAGE

    def __init__(self, numerators: list[str], denominators: list[str], **kwargs):
        super().__init__(**kwargs)
        if len(numerators) == 0 or len(denominators) == 0:
            raise ValueError("Numerators and denominators must not be empty")
        self.numerators = list(numerators)
        self.denominators = list(denominators)

    def _sum(self, keys: list[str], date, targets_gdf: gpd.GeoDataFrame, base_indicators) -> pd.Series:
        values = [get_indicator_values(base_indicators[key], date).reindex(targets_gdf.index) for key in keys]
        return pd.concat(values, axis=1).sum(axis=1, min_count=len(values))

    def calculate(self, date, targets_gdf: gpd.GeoDataFrame, base_indicators, georesources, parameters):
        numerator = self._sum(self.numerators, date, targets_gdf, base_indicators)
        denominator = self._sum(self.denominators, date, targets_gdf, base_indicators)
        n_zero = int((denominator == 0).sum())
        if n_zero > 0:
            logger.warning(f"{n_zero} features have a zero denominator")
        values = parameters.factor * numerator / denominator.where(denominator != 0)
        return values, denominator.fillna(0).clip(lower=0)
