"""
Configuration Management for SeedSight

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables
- Command line arguments

Configuration precedence (highest to lowest):
1. Command line arguments
2. Environment variables (SEEDSIGHT_*, MCSR_API_BASE, MCSR_API_KEY)
3. Configuration file
4. Default values
"""

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from seedsight.core.constants import (
    DEFAULT_FETCH_CONCURRENCY,
    DETAIL_CACHE_TTL_SECONDS,
    MatchType,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class ApiConfig:
    """Upstream ranked API settings."""

    base_url: str = "https://api.mcsrranked.com"
    api_key: str | None = None
    timeout_seconds: float = 10.0
    # Matches requested from the user matches endpoint
    match_count: int = 100


@dataclass
class FetchConfig:
    """Detail fetch coordinator settings."""

    concurrency_limit: int = DEFAULT_FETCH_CONCURRENCY
    cache_ttl_seconds: float = DETAIL_CACHE_TTL_SECONDS


@dataclass
class FilterDefaults:
    """Filters applied when the caller specifies none."""

    types: list[int] = field(default_factory=lambda: [int(MatchType.RANKED)])
    hide_decayed: bool = False
    hide_forfeits: bool = False


@dataclass
class ExportConfig:
    """Configuration for data export."""

    default_format: str = "json"
    json_indent: int = 2
    csv_delimiter: str = ","


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class SeedSightConfig:
    """Main configuration container."""

    api: ApiConfig = field(default_factory=ApiConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    filters: FilterDefaults = field(default_factory=FilterDefaults)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_version: str = "1.0"


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """Get the default paths to search for configuration files."""
    home = Path.home()
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    return [
        Path.cwd() / "seedsight.yaml",
        Path.cwd() / "seedsight.toml",
        Path.cwd() / "seedsight.json",
        Path.cwd() / ".seedsight.yaml",
        Path(xdg_config) / "seedsight" / "config.yaml",
        Path(xdg_config) / "seedsight" / "config.toml",
        home / ".seedsight.yaml",
    ]


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(path) as f:
        return json.load(f)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return load_yaml_config(path)
    elif suffix == ".toml":
        return load_toml_config(path)
    elif suffix == ".json":
        return load_json_config(path)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


ENV_MAPPINGS: dict[str, tuple[str, str]] = {
    "MCSR_API_BASE": ("api", "base_url"),
    "MCSR_API_KEY": ("api", "api_key"),
    "SEEDSIGHT_API_TIMEOUT": ("api", "timeout_seconds"),
    "SEEDSIGHT_MATCH_COUNT": ("api", "match_count"),
    "SEEDSIGHT_FETCH_CONCURRENCY": ("fetch", "concurrency_limit"),
    "SEEDSIGHT_CACHE_TTL": ("fetch", "cache_ttl_seconds"),
    "SEEDSIGHT_EXPORT_FORMAT": ("export", "default_format"),
    "SEEDSIGHT_LOG_LEVEL": ("logging", "level"),
    "SEEDSIGHT_LOG_FILE": ("logging", "file"),
}

# Values that must stay strings even when they look numeric
_STRING_KEYS = {("api", "api_key"), ("api", "base_url"), ("logging", "file")}


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    for env_var, (section, key) in ENV_MAPPINGS.items():
        value: Any = os.environ.get(env_var)
        if value is None:
            continue
        config.setdefault(section, {})

        if (section, key) not in _STRING_KEYS:
            if value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)
            else:
                try:
                    value = float(value)
                except ValueError:
                    pass

        config[section][key] = value

    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def dict_to_config(data: dict[str, Any]) -> SeedSightConfig:
    """Convert a dictionary to SeedSightConfig, ignoring unknown keys."""
    config = SeedSightConfig()

    for section in ("api", "fetch", "filters", "export", "logging"):
        values = data.get(section)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section)
        for key, value in values.items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                logger.debug(f"Ignoring unknown config key: {section}.{key}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> SeedSightConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged SeedSightConfig
    """
    config_data: dict[str, Any] = {}

    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    if include_env:
        config_data = merge_configs(config_data, load_env_config())

    return dict_to_config(config_data)


# ============================================================================
# Configuration Saving
# ============================================================================


def config_to_dict(config: SeedSightConfig) -> dict[str, Any]:
    """Convert SeedSightConfig to a dictionary."""
    return asdict(config)


def save_config(config: SeedSightConfig, path: Path) -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration to save
        path: Path to save to (YAML or JSON, detected from extension)
    """
    data = config_to_dict(config)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    else:
        raise ValueError(f"Unsupported config format for saving: {suffix}")

    logger.info(f"Saved config to: {path}")


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: SeedSightConfig | None = None


def get_config() -> SeedSightConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: SeedSightConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _global_config
    _global_config = None


# ============================================================================
# Configuration Templates
# ============================================================================

DEFAULT_CONFIG_YAML = """# SeedSight Configuration

# Upstream ranked API
api:
  base_url: https://api.mcsrranked.com
  # api_key: your-key  # or set MCSR_API_KEY
  timeout_seconds: 10.0
  match_count: 100

# Match detail fetching
fetch:
  concurrency_limit: 5
  cache_ttl_seconds: 300

# Default filters (2 = Ranked)
filters:
  types: [2]
  hide_decayed: false
  hide_forfeits: false

# Export settings
export:
  default_format: json
  json_indent: 2
  csv_delimiter: ","

# Logging settings
logging:
  level: INFO
  # file: /path/to/seedsight.log
"""


def generate_default_config(path: Path) -> None:
    """Generate a default configuration file."""
    if path.suffix.lower() in (".yaml", ".yml"):
        path.write_text(DEFAULT_CONFIG_YAML)
    else:
        save_config(SeedSightConfig(), path)

    logger.info(f"Generated default config at: {path}")
