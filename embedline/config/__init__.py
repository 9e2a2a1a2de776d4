from embedline.config.loader import DEFAULT_CONFIG_PATH, load_config
from embedline.config.schema import (
    EmbedlineConfig,
    HttpConfig,
    LoggingConfig,
    ModelConfig,
    RetryConfig,
    StoreConfig,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "EmbedlineConfig",
    "HttpConfig",
    "LoggingConfig",
    "ModelConfig",
    "RetryConfig",
    "StoreConfig",
    "load_config",
]
