from .core import WeightedSumIndicator, WEIGHTED_SUM_INDICATOR
