from enum import Enum


class MatchingMethod(Enum):
    """Predicate deciding whether an indicator feature lies inside a target feature."""

    BBOX_OVERLAP = "bbox_overlap"
    """Legacy: bounding boxes overlap for at least the configured share."""
    INTERIOR_POINT = "interior_point"
    """Interior point of the indicator feature lies within the target."""
