"""Configuration for Project Insights.

Settings resolve in this order, later sources winning:

1. Built-in defaults
2. JSON config file (config.json unless --config says otherwise)
3. INSIGHTS_* environment variables
4. Command-line flags, when explicitly set
"""
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from insights.debug_logger import get_logger
from insights.errors import ConfigError

DEFAULT_CONFIG_FILE = "config.json"

# Config key -> environment variable
ENV_VARS = {
    "jsonl_path": "INSIGHTS_JSONL",
    "port": "INSIGHTS_PORT",
    "timezone": "INSIGHTS_TZ",
    "poll_interval_hours": "INSIGHTS_POLL_HOURS",
    "frontend_dir": "INSIGHTS_FRONTEND",
}


@dataclass
class Config:
    """Resolved settings for the server, summary and dashboard."""

    jsonl_path: str = ""
    port: int = 8080
    timezone: str = "Australia/Sydney"
    poll_interval_hours: float = 1
    frontend_dir: str = "./frontend/dist"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def read_config_file(path: Path, explicit: bool = False) -> Dict[str, Any]:
    """Read a JSON config file.

    Args:
        path: File to read
        explicit: True if the user named this file. A missing or broken
            explicit file raises; the default file is optional.

    Returns:
        Parsed settings, or {} when the default file is absent or unusable.

    Raises:
        ConfigError: explicit is True and the file can't be used
    """
    if not path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {path}")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        if explicit:
            raise ConfigError(f"cannot read config {path}: {e}") from e
        get_logger().config_error(str(path), str(e))
        return {}

    if not isinstance(data, dict):
        if explicit:
            raise ConfigError(f"config {path} must contain a JSON object")
        get_logger().config_error(str(path), "not a JSON object")
        return {}
    return data


def get_setting(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Get a setting value by dot-notation key.

    Args:
        data: Parsed config
        key: Dot-notation key like "server.port"
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def get_int_setting(data: Mapping[str, Any], key: str, default: int = 0) -> int:
    """Get an integer setting.

    Returns:
        Integer value or default if conversion fails.
    """
    value = get_setting(data, key, default)
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_float_setting(data: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    """Get a numeric setting as a float, or default if conversion fails."""
    value = get_setting(data, key, default)
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def get_str_setting(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = get_setting(data, key, default)
    return value if isinstance(value, str) else default


def _apply(cfg: Config, data: Mapping[str, Any]) -> Config:
    return Config(
        jsonl_path=get_str_setting(data, "jsonl_path", cfg.jsonl_path),
        port=get_int_setting(data, "port", cfg.port),
        timezone=get_str_setting(data, "timezone", cfg.timezone),
        poll_interval_hours=get_float_setting(data, "poll_interval_hours", cfg.poll_interval_hours),
        frontend_dir=get_str_setting(data, "frontend_dir", cfg.frontend_dir),
    )


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    return {key: environ[var] for key, var in ENV_VARS.items() if environ.get(var)}


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Resolve the effective configuration.

    Args:
        config_path: Config file named by the user, or None for config.json
        overrides: Command-line values. Empty strings, zeros and None mean
            "not given" and leave the lower layers alone.
        environ: Environment mapping (defaults to os.environ)

    Raises:
        ConfigError: config_path was given and can't be used
    """
    environ = os.environ if environ is None else environ
    explicit = config_path is not None
    path = Path(config_path if explicit else DEFAULT_CONFIG_FILE)

    cfg = Config()
    cfg = _apply(cfg, read_config_file(path, explicit=explicit))
    cfg = _apply(cfg, _from_env(environ))
    if overrides:
        cfg = _apply(cfg, {k: v for k, v in overrides.items() if v})
    return cfg
