from pydantic import Field, field_validator
from ...enums import TimeWeighting
from ...models import BaseParameters


class OverlayAccumulationParameters(BaseParameters):
    time_weighting: TimeWeighting = TimeWeighting.ACCUMULATED
    decay_rate: float = Field(0.0, ge=0, lt=1)
    """Yearly loss of value for the decayed weighting."""
    scale: float = 1.0
    """Factor applied to accumulated values, e.g. unit conversion."""

    @field_validator("time_weighting", mode="before")
    @classmethod
    def _lower(cls, value):
        return value.strip().lower() if isinstance(value, str) else value
