"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Every section is optional; an empty file yields the defaults.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from addressimport.config.settings import (
    DatabaseConfig,
    DisplayConfig,
    ImportConfig,
    LoadConfig,
    LoggingConfig,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def _section(merged: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config section, treating a missing or null section as empty."""
    value = merged.get(name) or {}
    if not isinstance(value, dict):
        msg = f"Config section '{name}' must be a mapping, got {type(value).__name__}"
        raise ValueError(msg)
    return value


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> ImportConfig:
    """
    Load import configuration from YAML file(s).

    Recognised sections: load, database, logging, display. Values are
    validated by the pydantic models; env vars arrive as strings and are
    coerced (e.g. "500" -> 500, "true" -> True).

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated ImportConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        if potential_base.exists() and potential_base.resolve() != config_path.resolve():
            base_data = load_yaml(potential_base)
        else:
            base_data = {}

    merged = _deep_merge(base_data, load_yaml(config_path))

    return ImportConfig(
        load=LoadConfig(**_section(merged, "load")),
        database=DatabaseConfig(**_section(merged, "database")),
        logging=LoggingConfig(**_section(merged, "logging")),
        display=DisplayConfig(**_section(merged, "display")),
    )
