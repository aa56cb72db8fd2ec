"""
This package computes spatial indicators for spatial unit features and aggregates them onto coarser spatial units.
"""

__author__ = ""
__email__ = ""
__credits__ = []
__license__ = "BSD-3"

from indicatorsnet.config import *
from indicatorsnet.common import *
from indicatorsnet.enums import *
from indicatorsnet.models import *
from indicatorsnet.geometry import *
from indicatorsnet.spatial_units import *
from indicatorsnet.indicators import *
from indicatorsnet.pipeline import *
