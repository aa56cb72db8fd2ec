from .core import disaggregate
