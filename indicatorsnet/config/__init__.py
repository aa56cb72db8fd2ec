"""Global configuration of logging and of the indicator engine."""

from .log import log_config, LogConfig
from .engine import engine_config, EngineConfig
