"""
Configuration management for crossmarket.

Loads config/default.yaml as base, merges config/local.yaml if it exists,
and provides typed access via dataclasses.

The matching core never reads this module: callers turn the loaded
settings into an explicit MatchConfig and pass it to each matcher.

Usage:
    from crossmarket.config import load_settings
    settings = load_settings()
    matcher = MarketMatcher(settings.matching.to_match_config())
    print(settings.arbitrage.min_spread)
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError
from .models import MatchConfig


# Config file paths relative to project root
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_CONFIG = _PROJECT_ROOT / "config" / "default.yaml"
_LOCAL_CONFIG = _PROJECT_ROOT / "config" / "local.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file, returning empty dict if not found."""
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base dict."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# =============================================================================
# TYPED SETTINGS DATACLASSES
# =============================================================================

@dataclass
class MatchingSettings:
    min_similarity: float = 0.7
    question_weight: float = 0.6
    category_weight: float = 0.2
    close_date_weight: float = 0.2
    max_close_date_diff_days: float = 7.0

    def to_match_config(self) -> MatchConfig:
        return MatchConfig(
            min_similarity=self.min_similarity,
            question_weight=self.question_weight,
            category_weight=self.category_weight,
            close_date_weight=self.close_date_weight,
            max_close_date_diff_days=self.max_close_date_diff_days,
        )


@dataclass
class ClusteringSettings:
    min_cluster_size: int = 2


@dataclass
class ArbitrageSettings:
    min_spread: float = 0.02
    position_size: float = 100.0


@dataclass
class ScanSettings:
    limit: int = 5  # rows shown per match in single-market lookups
    max_rows: int = 50  # rows printed in table output


@dataclass
class TaxonomySettings:
    """Exact raw-label -> category name overrides."""
    overrides: Dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Dict[str, Any] = field(default_factory=lambda: {
        "enabled": False,
        "path": "logs/crossmarket.log",
        "max_bytes": 10485760,
        "backup_count": 5,
    })


@dataclass
class Settings:
    """
    Main settings class with typed access to all configuration sections.

    Example:
        settings = load_settings()
        print(settings.matching.min_similarity)
        print(settings.arbitrage.position_size)
    """
    matching: MatchingSettings = field(default_factory=MatchingSettings)
    clustering: ClusteringSettings = field(default_factory=ClusteringSettings)
    arbitrage: ArbitrageSettings = field(default_factory=ArbitrageSettings)
    scan: ScanSettings = field(default_factory=ScanSettings)
    taxonomy: TaxonomySettings = field(default_factory=TaxonomySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Raw config dict for advanced access
    _raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return the raw configuration dict."""
        return self._raw


def _default_of(f) -> Any:
    if f.default is not MISSING:
        return f.default
    if f.default_factory is not MISSING:
        return f.default_factory()
    return None


def _check_type(section: str, key: str, value: Any, default: Any) -> Any:
    """Coerce ints to floats where a float is expected; reject other mismatches."""
    if default is None:
        return value
    if isinstance(default, bool):
        ok = isinstance(value, bool)
    elif isinstance(default, float):
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        value = float(value) if ok else value
    elif isinstance(default, int):
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, type(default))
    if not ok:
        raise ConfigError(
            f"{section}.{key}: expected {type(default).__name__}, "
            f"got {type(value).__name__} ({value!r})"
        )
    return value


def _populate_dataclass(dc_class: type, data: Any, section: str = "") -> Any:
    """Create a dataclass instance from a dict, ignoring unknown keys."""
    if not data:
        return dc_class()
    if not isinstance(data, dict):
        raise ConfigError(f"Section '{section}' must be a mapping, got {type(data).__name__}")

    known = {f.name: f for f in fields(dc_class)}
    kwargs = {}

    for key, value in data.items():
        if key not in known:
            continue
        kwargs[key] = _check_type(section, key, value, _default_of(known[key]))

    return dc_class(**kwargs)


def _build_settings(config: Dict[str, Any]) -> Settings:
    """Build a Settings instance from a config dict."""
    return Settings(
        matching=_populate_dataclass(MatchingSettings, config.get("matching", {}), "matching"),
        clustering=_populate_dataclass(ClusteringSettings, config.get("clustering", {}), "clustering"),
        arbitrage=_populate_dataclass(ArbitrageSettings, config.get("arbitrage", {}), "arbitrage"),
        scan=_populate_dataclass(ScanSettings, config.get("scan", {}), "scan"),
        taxonomy=_populate_dataclass(TaxonomySettings, config.get("taxonomy", {}), "taxonomy"),
        logging=_populate_dataclass(LoggingSettings, config.get("logging", {}), "logging"),
        _raw=config,
    )


def load_config(
    default_path: Optional[Path] = None,
    local_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Load and merge configuration files.

    Args:
        default_path: Path to default config (defaults to config/default.yaml)
        local_path: Path to local overrides (defaults to config/local.yaml)

    Returns:
        Merged configuration dict

    Raises:
        ConfigError: If default_path is given explicitly and does not exist.
    """
    if default_path is not None and not Path(default_path).exists():
        raise ConfigError(f"Config file not found: {default_path}")

    default_path = Path(default_path) if default_path else _DEFAULT_CONFIG
    local_path = Path(local_path) if local_path else _LOCAL_CONFIG

    config = _load_yaml(default_path)

    if local_path.exists():
        local_config = _load_yaml(local_path)
        config = _deep_merge(config, local_config)

    return config


def load_settings(
    default_path: Optional[Path] = None,
    local_path: Optional[Path] = None,
) -> Settings:
    """
    Load configuration files into a fresh Settings instance.

    Raises:
        ConfigError: If an explicit default_path is missing, or a file is not
            valid YAML, is not a mapping, or holds a value of the wrong type.
    """
    return _build_settings(load_config(default_path, local_path))


__all__ = [
    "load_config",
    "load_settings",
    "Settings",
    "MatchingSettings",
    "ClusteringSettings",
    "ArbitrageSettings",
    "ScanSettings",
    "TaxonomySettings",
    "LoggingSettings",
]
