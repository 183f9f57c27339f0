"""Configuration management module."""

from mayerprism.core.config.settings import (
    ConfigManager,
    LoggingConfig,
    MayerPrismConfig,
    PipelineConfig,
    SentimentConfig,
    SourceConfig,
    StorageConfig,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "MayerPrismConfig",
    "SourceConfig",
    "SentimentConfig",
    "PipelineConfig",
    "StorageConfig",
    "LoggingConfig",
    "load_config_from_env",
]
