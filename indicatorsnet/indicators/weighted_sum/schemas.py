from pydantic import Field, create_model
from ...models import BaseParameters


def weights_parameters(weight_names: list[str]) -> type[BaseParameters]:
    """Parameters model with one required numeric field per weight parameter name.

    Fields are addressed by position (``weight_0``, ``weight_1``, ...) and
    read from process parameters by their own names.
    """

    fields = {f"weight_{i}": (float, Field(alias=name)) for i, name in enumerate(weight_names)}
    return create_model("WeightedSumParameters", __base__=BaseParameters, **fields)
