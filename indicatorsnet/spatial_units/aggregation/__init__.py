from .core import aggregate
from .matching import match_features
