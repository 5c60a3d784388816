from .config import (
    Config,
    MatcherConfig,
    MonitoringConfig,
    RenderConfig,
    StorageConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "Config",
    "MatcherConfig",
    "MonitoringConfig",
    "RenderConfig",
    "StorageConfig",
    "find_config_file",
    "load_config",
]
