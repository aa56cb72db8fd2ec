from .config import LogConfig, log_config, LOGGER_LEVELS
