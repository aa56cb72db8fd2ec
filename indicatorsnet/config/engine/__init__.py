from .config import EngineConfig, engine_config
