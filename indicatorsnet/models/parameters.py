from typing import Any, Iterable, Mapping
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError
from ..common.errors import ParameterMissing, ParameterInvalid

ParameterValue = str | int | float | bool | None


class ProcessParameter(BaseModel):
    """Process parameter as submitted with a computation request."""

    name: str
    value: ParameterValue = None


ParametersLike = Iterable[ProcessParameter | Mapping[str, Any]] | Mapping[str, ParameterValue] | None


def _to_mapping(parameters: ParametersLike) -> dict[str, ParameterValue]:
    if parameters is None:
        return {}
    if isinstance(parameters, Mapping):
        return dict(parameters)
    values = {}
    for parameter in parameters:
        if not isinstance(parameter, ProcessParameter):
            parameter = ProcessParameter.model_validate(parameter)
        if parameter.name in values:
            logger.warning(f"Process parameter {parameter.name} is given more than once. Using the first value")
            continue
        values[parameter.name] = parameter.value
    return values


class BaseParameters(BaseModel):
    """Typed process parameters of an indicator.

    Subclasses declare one field per parameter. String values are parsed to
    the declared types, so ``"500"`` is accepted for a numeric parameter and
    ``"true"`` for a boolean one.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def from_process_parameters(cls, parameters: ParametersLike = None) -> "BaseParameters":
        """Resolve submitted process parameters once per run.

        Parameters
        ----------
        parameters : list of ProcessParameter or dict, optional
            ``[{name, value}]`` records or a ``{name: value}`` mapping.

        Returns
        -------
        BaseParameters
            Validated parameters.

        Raises
        ------
        ParameterMissing
            If required parameters are not supplied. All missing names are reported.
        ParameterInvalid
            If a supplied value cannot be parsed to its declared type.
        """

        values = _to_mapping(parameters)
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            errors = e.errors()
            missing = [_error_name(error) for error in errors if error["type"] == "missing"]
            if len(missing) > 0:
                raise ParameterMissing(missing) from None
            error = errors[0]
            name = _error_name(error)
            raise ParameterInvalid(name, values.get(name, error.get("input")), error["msg"]) from None


def _error_name(error: Mapping[str, Any]) -> str:
    loc = error.get("loc") or ("<parameters>",)
    return str(loc[0])


class EmptyParameters(BaseParameters):
    pass
