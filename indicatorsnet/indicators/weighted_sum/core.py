import math
import numpy as np
import pandas as pd
import geopandas as gpd
from loguru import logger
from .schemas import weights_parameters
from ..base import BaseIndicator
from ..registry import register_indicator
from ...common.values import get_indicator_values
from ...enums import AggregationType

WEIGHTED_SUM_INDICATOR = "weighted_sum"


@register_indicator(WEIGHTED_SUM_INDICATOR)
class WeightedSumIndicator(BaseIndicator):
    """Weighted sum of base indicators, normalized by the sum of weights.

    Parameters
    ----------
    components : dict of str to str
        Base indicator id or name mapped to the name of the process parameter
        holding its weight.
    **kwargs
        Passed to :class:`BaseIndicator`.

    Examples
    --------
    >>> indicator = WeightedSumIndicator({"playgrounds": "weight_playgrounds", "parks": "weight_parks"})
    """

    aggregation_type = AggregationType.AVERAGE

    def __init__(self, components: dict[str, str], **kwargs):
        super().__init__(**kwargs)
        if len(components) == 0:
            raise ValueError("At least one component must be provided")
        self.components = dict(components)
        self.parameters_schema = weights_parameters(list(self.components.values()))

    def _weights(self, parameters) -> list[float]:
        return [getattr(parameters, f"weight_{i}") for i in range(len(self.components))]

    def calculate(self, date, targets_gdf: gpd.GeoDataFrame, base_indicators, georesources, parameters):
        weights = self._weights(parameters)
        weights_sum = sum(weights)
        if not math.isclose(weights_sum, 1.0):
            logger.warning(f"Sum of weights is {weights_sum} instead of 1. Values are normalized by it")

        weighted = pd.Series(0.0, index=targets_gdf.index)
        for (key, _), weight in zip(self.components.items(), weights):
            values = get_indicator_values(base_indicators[key], date).reindex(targets_gdf.index)
            n_missing = int(values.isna().sum())
            if n_missing > 0:
                logger.warning(f"{n_missing} features have no value of {key}")
            weighted = weighted + weight * values

        if weights_sum == 0:
            logger.warning("Sum of weights is 0. All values are set to NoData")
            values = pd.Series(np.nan, index=targets_gdf.index)
        else:
            values = weighted / weights_sum
        return values, self.feature_areas(targets_gdf)
