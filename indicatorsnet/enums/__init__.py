from .aggregation_type import AggregationType
from .matching_method import MatchingMethod
from .travel_profile import TravelProfile
from .change_type import ChangeType, PeriodUnit
from .reach_method import ReachMethod, TimeWeighting
