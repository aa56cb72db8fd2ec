from pydantic import Field, field_validator
from ...enums import ChangeType, PeriodUnit
from ...models import BaseParameters


class TemporalChangeParameters(BaseParameters):
    offset: int = Field(ge=1)
    """Number of periods between the compared dates."""
    change_type: ChangeType = ChangeType.ABSOLUTE
    period_unit: PeriodUnit = PeriodUnit.YEARS

    @field_validator("change_type", "period_unit", mode="before")
    @classmethod
    def _lower(cls, value):
        return value.strip().lower() if isinstance(value, str) else value
