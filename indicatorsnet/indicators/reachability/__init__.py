from .core import ReachabilityIndicator, REACHABILITY_INDICATOR, filter_facilities
