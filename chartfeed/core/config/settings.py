"""Configuration management for chartfeed runs."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from chartfeed.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path.home() / ".chartfeed" / "config.toml"


@dataclass
class QuoteSourceConfig:
    """Settings for the stock quote source."""

    api_key: str | None = None
    base_url: str = "https://www.alphavantage.co"
    query_path: str = "/query"
    function: str = "TIME_SERIES_DAILY"
    interval: str = "1min"
    datatype: str = "json"
    series_key: str = "Time Series (1min)"
    close_field: str = "4. close"
    timeout: float | None = None


@dataclass
class ChartBackendConfig:
    """Settings for the chart publishing backend."""

    token: str | None = None
    base_url: str = "https://api.datawrapper.de/v3"
    timeout: float | None = None


@dataclass
class PipelineConfig:
    """Chart, symbols and deadlines for one publish run."""

    chart_id: str | None = None
    symbols: list[str] = field(default_factory=list)
    fetch_timeout: float | None = None
    stage_timeout: float | None = None
    dry_run: bool = False
    notes_prefix: str = "Actualizado"
    notes_timezone: str = "Europe/Madrid"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: str | None = None
    serialize: bool = False


@dataclass
class ChartfeedConfig:
    """Top level chartfeed configuration."""

    quotes: QuoteSourceConfig = field(default_factory=QuoteSourceConfig)
    backend: ChartBackendConfig = field(default_factory=ChartBackendConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ChartfeedConfig":
        """Build a configuration from nested dictionaries."""
        return cls(
            quotes=QuoteSourceConfig(**config_dict.get("quotes", {})),
            backend=ChartBackendConfig(**config_dict.get("backend", {})),
            pipeline=PipelineConfig(**config_dict.get("pipeline", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "quotes": asdict(self.quotes),
            "backend": asdict(self.backend),
            "pipeline": asdict(self.pipeline),
            "logging": asdict(self.logging),
        }

    def missing_settings(self, *, need_quotes: bool = True, need_backend: bool = True) -> list[str]:
        """Names of required settings that are unset."""
        missing: list[str] = []
        if need_quotes:
            if not self.quotes.api_key:
                missing.append("quotes.api_key")
            if not self.pipeline.symbols:
                missing.append("pipeline.symbols")
        if need_backend:
            if not self.backend.token:
                missing.append("backend.token")
            if not self.pipeline.chart_id:
                missing.append("pipeline.chart_id")
        return missing

    def validate(self, *, need_quotes: bool = True, need_backend: bool = True) -> None:
        """Raise :class:`ConfigurationError` when required settings are absent."""
        missing = self.missing_settings(need_quotes=need_quotes, need_backend=need_backend)
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}", missing=missing)


class ConfigManager:
    """Loads configuration from a TOML file layered with environment overrides."""

    def __init__(self, config_path: Path | None = None, environ: dict[str, str] | None = None):
        """Initialise the manager.

        Args:
            config_path: TOML file to read, defaults to ``~/.chartfeed/config.toml``
            environ: mapping used instead of ``os.environ`` (handy in tests)
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.environ = environ
        self.config = self._load_config()

    def _load_config(self) -> ChartfeedConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                config_dict = {}

        deep_update(config_dict, load_config_from_env(self.environ))
        return ChartfeedConfig.from_dict(config_dict)

    def get_config(self) -> ChartfeedConfig:
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested overrides, ignoring ``None`` values."""
        config_dict = self.config.to_dict()
        deep_update(config_dict, _drop_none(updates))
        self.config = ChartfeedConfig.from_dict(config_dict)


def deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, dict):
            nested = _drop_none(value)
            if nested:
                cleaned[key] = nested
        elif value is not None:
            cleaned[key] = value
    return cleaned


def parse_symbols(raw: str) -> list[str]:
    """Split a comma separated symbol list, keeping order and dropping blanks."""
    return [candidate.strip() for candidate in raw.split(",") if candidate.strip()]


def load_config_from_env(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Read configuration overrides from environment variables."""
    env = os.environ if environ is None else environ
    config: dict[str, Any] = {}

    quotes: dict[str, Any] = {}
    if env.get("ALPHA_VANTAGE_API"):
        quotes["api_key"] = env["ALPHA_VANTAGE_API"]
    if env.get("CHARTFEED_SERIES_KEY"):
        quotes["series_key"] = env["CHARTFEED_SERIES_KEY"]
    if quotes:
        config["quotes"] = quotes

    backend: dict[str, Any] = {}
    if env.get("DW_TOKEN"):
        backend["token"] = env["DW_TOKEN"]
    if backend:
        config["backend"] = backend

    pipeline: dict[str, Any] = {}
    if env.get("CHARTFEED_CHART_ID"):
        pipeline["chart_id"] = env["CHARTFEED_CHART_ID"]
    if env.get("CHARTFEED_SYMBOLS"):
        pipeline["symbols"] = parse_symbols(env["CHARTFEED_SYMBOLS"])
    if env.get("CHARTFEED_FETCH_TIMEOUT"):
        pipeline["fetch_timeout"] = float(env["CHARTFEED_FETCH_TIMEOUT"])
    if env.get("CHARTFEED_STAGE_TIMEOUT"):
        pipeline["stage_timeout"] = float(env["CHARTFEED_STAGE_TIMEOUT"])
    if env.get("CHARTFEED_DRY_RUN"):
        pipeline["dry_run"] = env["CHARTFEED_DRY_RUN"].lower() == "true"
    if pipeline:
        config["pipeline"] = pipeline

    logging_config: dict[str, Any] = {}
    if env.get("CHARTFEED_LOG_LEVEL"):
        logging_config["level"] = env["CHARTFEED_LOG_LEVEL"]
    if env.get("CHARTFEED_LOG_FILE"):
        logging_config["file"] = env["CHARTFEED_LOG_FILE"]
    if logging_config:
        config["logging"] = logging_config

    return config
