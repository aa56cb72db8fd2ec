from .core import TemporalChangeIndicator, TEMPORAL_CHANGE_INDICATOR
