from loguru import logger
from .base import BaseIndicator

_INDICATORS: dict[str, type[BaseIndicator]] = {}


def register_indicator(indicator_id: str):
    """Class decorator registering an indicator strategy under *indicator_id*.

    Raises
    ------
    ValueError
        If another class is already registered with the same id.
    """

    def decorator(cls: type[BaseIndicator]) -> type[BaseIndicator]:
        registered = _INDICATORS.get(indicator_id)
        if registered is not None and registered is not cls:
            raise ValueError(f"Indicator {indicator_id!r} is already registered by {registered.__name__}")
        cls.id = indicator_id
        _INDICATORS[indicator_id] = cls
        logger.trace(f"Registered indicator {indicator_id}")
        return cls

    return decorator


def get_indicator(indicator_id: str, *args, **kwargs) -> BaseIndicator:
    """Instantiate the strategy registered under *indicator_id*.

    Extra arguments are passed to the strategy constructor.

    Raises
    ------
    ValueError
        If no strategy is registered under *indicator_id*.
    """

    if indicator_id not in _INDICATORS:
        raise ValueError(f"Unknown indicator {indicator_id!r}. Available: {sorted(_INDICATORS)}")
    return _INDICATORS[indicator_id](*args, **kwargs)


def available_indicators() -> list[str]:
    return sorted(_INDICATORS)
