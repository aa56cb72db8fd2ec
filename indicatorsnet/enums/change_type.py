from enum import Enum


class ChangeType(Enum):
    """Way of comparing an indicator value with an earlier one."""

    ABSOLUTE = "absolute"
    """``value - previous``"""
    RELATIVE = "relative"
    """``100 * (value - previous) / previous``"""
    RATIO = "ratio"
    """``value / previous``"""


class PeriodUnit(Enum):
    """Unit of the offset between compared dates."""

    YEARS = "years"
    MONTHS = "months"
    DAYS = "days"
