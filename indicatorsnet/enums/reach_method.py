from enum import Enum


class ReachMethod(Enum):
    """How reachability areas around facilities are built."""

    BUFFER = "buffer"
    """Euclidean buffer of the facility geometry."""
    ISOCHRONE = "isochrone"
    """Network distance isochrone around the facility location."""


class TimeWeighting(Enum):
    """Weighting of a point value by the number of years it has been active."""

    ACCUMULATED = "accumulated"
    """``1 + years_active``"""
    DECAYED = "decayed"
    """``(1 - decay_rate) ** years_active``"""
