"""Errors raised by the indicator engine.

Fatal errors abort only the current (date, spatial unit) run. ``LocalComputeGap``
is the only non-fatal one: it is caught per feature and turned into NoData.
"""

from typing import Iterable

MAX_IDS_IN_MESSAGE = 10


def _format_ids(ids: list[str]) -> str:
    ids_str = ", ".join(ids[:MAX_IDS_IN_MESSAGE])
    if len(ids) > MAX_IDS_IN_MESSAGE:
        ids_str += ", ..."
    return ids_str


class IndicatorsNetError(Exception):
    """Base class for errors raised by IndicatorsNet."""


class LocalComputeGap(IndicatorsNetError):
    """A single feature value cannot be derived. Resolves to NoData."""

    def __init__(self, feature_id: str, reason: str):
        self.feature_id = feature_id
        self.reason = reason
        super().__init__(f"Value of feature {feature_id!r} cannot be computed: {reason}")


class ParameterMissing(IndicatorsNetError):
    """Required process parameters were not supplied."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(f"Missing required process parameters: {', '.join(self.names)}")


class ParameterInvalid(IndicatorsNetError):
    """A process parameter value cannot be parsed to its expected type."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid value {value!r} of process parameter {name!r}: {reason}")


class DatasetNotFound(IndicatorsNetError):
    """No dataset is registered under the requested id or name."""

    def __init__(self, key: str, available: Iterable[str] = ()):
        self.key = key
        self.available = list(available)
        super().__init__(f"Dataset {key!r} not found. Available: {self.available}")


class AggregationIncomplete(IndicatorsNetError):
    """Indicator features remain unmatched after an aggregation pass."""

    def __init__(self, ids: Iterable[str]):
        self.ids = list(ids)
        self.count = len(self.ids)
        super().__init__(
            f"Spatial aggregation failed for a total number of {self.count} indicator features: {_format_ids(self.ids)}"
        )


class CollaboratorFailure(IndicatorsNetError):
    """An external geometry or isochrone service failed or returned malformed data."""


class NotSupported(IndicatorsNetError, NotImplementedError):
    """Operation is part of the contract but has no implementation."""
