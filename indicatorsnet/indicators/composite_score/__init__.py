from .core import CompositeScoreIndicator, COMPOSITE_SCORE_INDICATOR
