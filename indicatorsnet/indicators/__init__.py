from .base import BaseIndicator, calculate_per_feature
from .registry import register_indicator, get_indicator, available_indicators
from .compute import compute_indicator, acompute_indicator, aggregate_indicator, disaggregate_indicator
from .weighted_sum import WeightedSumIndicator, WEIGHTED_SUM_INDICATOR
from .temporal_change import TemporalChangeIndicator, TEMPORAL_CHANGE_INDICATOR
from .reachability import ReachabilityIndicator, REACHABILITY_INDICATOR
from .overlay import OverlayAccumulationIndicator, OVERLAY_ACCUMULATION_INDICATOR
from .share import ShareIndicator, SHARE_INDICATOR
from .composite_score import CompositeScoreIndicator, COMPOSITE_SCORE_INDICATOR
