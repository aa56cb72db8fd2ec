from pydantic import Field
from ...models import BaseParameters


class ShareParameters(BaseParameters):
    factor: float = Field(100.0, gt=0)
    """Multiplier of the ratio, 100 for percent."""
