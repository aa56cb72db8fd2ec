from .aggregation import aggregate, match_features
from .disaggregation import disaggregate
