import shapely
from pydantic import Field, field_validator
from ...enums import ReachMethod, TravelProfile
from ...models import BaseParameters
from ...utils.validation import FeatureSchema


class ReachabilityParameters(BaseParameters):
    max_distance: float = Field(gt=0)
    """Maximal distance to a facility in metres."""
    method: ReachMethod = ReachMethod.BUFFER
    profile: TravelProfile = TravelProfile.PEDESTRIAN
    filter_attribute: str | None = None
    """Facility attribute the filter value is searched in."""
    filter_value: str | None = None
    """Case-insensitive substring a facility attribute must contain."""

    @field_validator("method", mode="before")
    @classmethod
    def _lower(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("profile", mode="before")
    @classmethod
    def _upper(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class BuildingsSchema(FeatureSchema):
    """Residential buildings whose area approximates population."""

    @classmethod
    def _geometry_types(cls):
        return {shapely.Polygon, shapely.MultiPolygon}
