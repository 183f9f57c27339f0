"""配置管理模块 - 处理mayerprism流水线的配置"""

import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from datetime import date
from pathlib import Path
from typing import Any

from loguru import logger

from mayerprism.core.exceptions import ConfigurationError

DEFAULT_HOME = Path.home() / ".mayerprism"

YAHOO_HISTORY_URL = "https://finance.yahoo.com/quote/{symbol}/history/?period1={period1}&period2={period2}"
FEAR_GREED_URL = "https://api.alternative.me/fng/?limit=0&format=json"


@dataclass
class SourceConfig:
    """价格页面配置"""

    symbol: str = "BTC-USD"
    history_start: str = "2018-01-01"
    url_template: str = YAHOO_HISTORY_URL
    table_selector: str = "table.yf-1jecxey.noDl.hideOnPrint"
    navigation_timeout: float = 60.0
    selector_timeout: float = 10.0
    renderer: str = "playwright"
    headless: bool = True
    executable_path: str | None = None
    block_resources: bool = False


@dataclass
class SentimentConfig:
    """情绪指数配置"""

    url: str = FEAR_GREED_URL
    timeout: float = 10.0


@dataclass
class PipelineConfig:
    """流水线配置"""

    window: int = 200
    cutoff: str = "2020-01-01"
    cache_ttl: int = 600
    cache_key: str = "bitcoin-data"
    concurrent_fetch: bool = False


@dataclass
class StorageConfig:
    """存储配置"""

    enabled: bool = True
    path: str = str(DEFAULT_HOME / "snapshots.duckdb")
    retention_days: int | None = 30


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class MayerPrismConfig:
    """mayerprism主配置"""

    source: SourceConfig = field(default_factory=SourceConfig)
    sentiment: SentimentConfig = field(default_factory=SentimentConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Reject values the pipeline cannot run with."""
        if self.source.renderer not in {"playwright", "static"}:
            raise ConfigurationError(
                f"Unknown renderer '{self.source.renderer}', expected 'playwright' or 'static'",
                field="source.renderer",
            )
        for name in ("navigation_timeout", "selector_timeout"):
            if getattr(self.source, name) <= 0:
                raise ConfigurationError(f"{name} must be positive", field=f"source.{name}")
        if self.sentiment.timeout <= 0:
            raise ConfigurationError("timeout must be positive", field="sentiment.timeout")
        if self.pipeline.window < 1:
            raise ConfigurationError("window must be at least 1", field="pipeline.window")
        if self.pipeline.cache_ttl < 0:
            raise ConfigurationError("cache_ttl must be non-negative", field="pipeline.cache_ttl")
        dates = (("source.history_start", self.source.history_start), ("pipeline.cutoff", self.pipeline.cutoff))
        for name, value in dates:
            try:
                date.fromisoformat(value)
            except ValueError as exc:
                raise ConfigurationError(f"{value!r} is not an ISO date", field=name) from exc

    @property
    def cutoff_date(self) -> date:
        return date.fromisoformat(self.pipeline.cutoff)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "MayerPrismConfig":
        """从字典创建配置"""
        try:
            return cls(
                source=SourceConfig(**config_dict.get("source", {})),
                sentiment=SentimentConfig(**config_dict.get("sentiment", {})),
                pipeline=PipelineConfig(**config_dict.get("pipeline", {})),
                storage=StorageConfig(**config_dict.get("storage", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "source": asdict(self.source),
            "sentiment": asdict(self.sentiment),
            "pipeline": asdict(self.pipeline),
            "storage": asdict(self.storage),
            "logging": asdict(self.logging),
        }


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, environ: dict[str, str] | None = None):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            environ: 环境变量映射，默认使用 os.environ
        """
        self.config_path = config_path or DEFAULT_HOME / "config.toml"
        self.environ = os.environ if environ is None else environ
        self.config = self._load_config()

    def _load_config(self) -> MayerPrismConfig:
        """加载配置"""
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            logger.debug(f"Loaded configuration from {self.config_path}")

        _deep_update(config_dict, load_config_from_env(self.environ))
        return MayerPrismConfig.from_dict(config_dict)

    def get_config(self) -> MayerPrismConfig:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置"""
        config_dict = self.config.to_dict()
        _deep_update(config_dict, updates)
        self.config = MayerPrismConfig.from_dict(config_dict)


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    """深度更新字典"""
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


# (section, key) -> environment variable
_ENV_VARS: dict[tuple[str, str], str] = {
    ("source", "symbol"): "MAYERPRISM_SYMBOL",
    ("source", "history_start"): "MAYERPRISM_HISTORY_START",
    ("source", "table_selector"): "MAYERPRISM_TABLE_SELECTOR",
    ("source", "navigation_timeout"): "MAYERPRISM_NAVIGATION_TIMEOUT",
    ("source", "selector_timeout"): "MAYERPRISM_SELECTOR_TIMEOUT",
    ("source", "renderer"): "MAYERPRISM_RENDERER",
    ("source", "headless"): "MAYERPRISM_HEADLESS",
    ("source", "executable_path"): "MAYERPRISM_BROWSER_EXECUTABLE",
    ("source", "block_resources"): "MAYERPRISM_BLOCK_RESOURCES",
    ("sentiment", "url"): "MAYERPRISM_SENTIMENT_URL",
    ("sentiment", "timeout"): "MAYERPRISM_SENTIMENT_TIMEOUT",
    ("pipeline", "cutoff"): "MAYERPRISM_CUTOFF",
    ("pipeline", "cache_ttl"): "MAYERPRISM_CACHE_TTL",
    ("pipeline", "concurrent_fetch"): "MAYERPRISM_CONCURRENT_FETCH",
    ("storage", "enabled"): "MAYERPRISM_STORAGE_ENABLED",
    ("storage", "path"): "MAYERPRISM_STORAGE_PATH",
    ("logging", "level"): "MAYERPRISM_LOGGING_LEVEL",
    ("logging", "file"): "MAYERPRISM_LOGGING_FILE",
}

_SECTIONS = {
    "source": SourceConfig,
    "sentiment": SentimentConfig,
    "pipeline": PipelineConfig,
    "storage": StorageConfig,
    "logging": LoggingConfig,
}


def _coerce(section: str, key: str, raw: str) -> Any:
    field_type = next(f.type for f in fields(_SECTIONS[section]) if f.name == key)
    type_name = field_type if isinstance(field_type, str) else getattr(field_type, "__name__", str(field_type))
    try:
        if type_name.startswith("bool"):
            return raw.strip().lower() in {"1", "true", "yes", "on"}
        if type_name.startswith("int"):
            return int(raw)
        if type_name.startswith("float"):
            return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid value {raw!r} for {section}.{key}", field=f"{section}.{key}") from exc
    return raw


def load_config_from_env(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """从环境变量加载配置"""
    env = os.environ if environ is None else environ
    config: dict[str, Any] = {}
    for (section, key), variable in _ENV_VARS.items():
        raw = env.get(variable)
        if raw is None:
            continue
        config.setdefault(section, {})[key] = _coerce(section, key, raw)
    return config
