import numpy as np
import pandas as pd
import geopandas as gpd
from loguru import logger
from .schemas import CompositeScoreParameters
from ..base import BaseIndicator
from ..registry import register_indicator
from ...common.values import get_indicator_values
from ...enums import AggregationType

COMPOSITE_SCORE_INDICATOR = "composite_score"


def z_scores(values: pd.Series) -> pd.Series:
    """Population z-scores of values. All NaN when the standard deviation is 0."""
    std = values.std(ddof=0)
    if not std > 0:
        return pd.Series(np.nan, index=values.index)
    return (values - values.mean()) / std


@register_indicator(COMPOSITE_SCORE_INDICATOR)
class CompositeScoreIndicator(BaseIndicator):
    """Average of standardized base indicators.

    Every base indicator is turned into population z-scores over the target
    features. Inverted components enter with the opposite sign, so a higher
    score always means the same direction.

    Parameters
    ----------
    components : list of str
        Ids or names of the base indicators.
    inverted : list of str, optional
        Components entering with the opposite sign.
    weight_indicator : str, optional
        Base indicator used as aggregation weight, e.g. population. Feature
        area when not provided.
    **kwargs
        Passed to :class:`BaseIndicator`.
    """

    parameters_schema = CompositeScoreParameters
    aggregation_type = AggregationType.AVERAGE

    def __init__(
        self, components: list[str], inverted: list[str] | None = None, weight_indicator: str | None = None, **kwargs
    ):
        super().__init__(**kwargs)
        if len(components) == 0:
            raise ValueError("At least one component must be provided")
        inverted = inverted or []
        unknown = set(inverted) - set(components)
        if len(unknown) > 0:
            raise ValueError(f"Inverted components must be among components: {sorted(unknown)}")
        self.components = list(components)
        self.inverted = set(inverted)
        self.weight_indicator = weight_indicator

    def calculate(self, date, targets_gdf: gpd.GeoDataFrame, base_indicators, georesources, parameters):
        scores = []
        for key in self.components:
            values = get_indicator_values(base_indicators[key], date).reindex(targets_gdf.index)
            score = z_scores(values)
            if score.isna().all():
                logger.warning(f"{key} has no variance across features. Scores are NoData")
            scores.append(-score if key in self.inverted else score)
        values = pd.concat(scores, axis=1).mean(axis=1, skipna=False)

        if self.weight_indicator is None:
            weights = self.feature_areas(targets_gdf)
        else:
            weights = get_indicator_values(base_indicators[self.weight_indicator], date).reindex(targets_gdf.index)
        return values, weights
