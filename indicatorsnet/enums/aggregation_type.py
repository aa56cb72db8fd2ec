from enum import Enum
from loguru import logger


class AggregationType(Enum):
    """Rule used to combine indicator values of finer spatial units."""

    SUM = "SUM"
    AVERAGE = "AVERAGE"

    @classmethod
    def parse(cls, value: "AggregationType | str | None") -> "AggregationType":
        """Read an aggregation type from configuration.

        Unknown values fall back to :attr:`AVERAGE` with a warning.

        Parameters
        ----------
        value : AggregationType or str or None
            Configured aggregation type, case-insensitive when a string.

        Returns
        -------
        AggregationType
            Parsed aggregation type.
        """

        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        logger.warning(
            f"Unknown aggregation type {value!r}. Allowed values are {[t.value for t in cls]}. Falling back to AVERAGE"
        )
        return cls.AVERAGE
