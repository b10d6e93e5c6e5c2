"""Configuration management module."""

from chartfeed.core.config.settings import (
    ChartBackendConfig,
    ChartfeedConfig,
    ConfigManager,
    LoggingConfig,
    PipelineConfig,
    QuoteSourceConfig,
    load_config_from_env,
    parse_symbols,
)

__all__ = [
    "ChartfeedConfig",
    "ConfigManager",
    "QuoteSourceConfig",
    "ChartBackendConfig",
    "PipelineConfig",
    "LoggingConfig",
    "load_config_from_env",
    "parse_symbols",
]
