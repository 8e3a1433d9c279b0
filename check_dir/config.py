"""Settings resolution for check_dir.

Each setting resolves with the following precedence (highest to lowest):
1. CLI argument
2. Environment variable (CHECK_DIR_<KEY>)
3. YAML config file (--config, or the CHECK_DIR_CONFIG environment variable)
4. Built-in default

Config file example:

    dirs:
      - /var/spool/postfix/deferred
      - /var/spool/postfix/active
    warning: "100"
    critical: "500"
    recursive: true

Usage:
    from check_dir.config import resolve_settings

    settings = resolve_settings({"warning": "10"}, config_path=Path("check_dir.yaml"))
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from check_dir.errors import ConfigInvalidStructureError, ConfigParseError, MissingSettingError

logger = logging.getLogger(__name__)

# Settings in resolution order for display
KNOWN_SETTINGS: tuple[str, ...] = ("dirs", "warning", "critical", "recursive", "detect_cycles")

BOOLEAN_SETTINGS: frozenset[str] = frozenset({"recursive", "detect_cycles"})

REQUIRED_SETTINGS: frozenset[str] = frozenset({"dirs", "warning", "critical"})

DEFAULTS: dict[str, Any] = {"recursive": False, "detect_cycles": False}

# Environment variable naming the config file
CONFIG_ENV_VAR = "CHECK_DIR_CONFIG"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class Settings:
    """Fully resolved settings for one run."""

    dirs: tuple[Path, ...]
    warning: str
    critical: str
    recursive: bool = False
    detect_cycles: bool = False


def _get_env_var_name(key: str) -> str:
    """Convert a setting key to environment variable name.

    Args:
        key: Setting key (e.g., "detect_cycles")

    Returns:
        Environment variable name (e.g., "CHECK_DIR_DETECT_CYCLES")
    """
    return f"CHECK_DIR_{key.upper()}"


def get_config_path(cli_value: Path | None = None) -> Path | None:
    """Resolve which config file to read, if any."""
    if cli_value is not None:
        return cli_value
    env_value = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_value) if env_value else None


def load_config(config_path: Path | None) -> dict[str, Any]:
    """Load settings from a YAML config file.

    Args:
        config_path: Config file, or None for no file.

    Returns:
        Config dictionary. Returns empty dict if config_path is None or the
        file is empty.

    Raises:
        ConfigParseError: If the file is missing or is not valid YAML.
        ConfigInvalidStructureError: If the top level is not a mapping.
    """
    if config_path is None:
        return {}

    try:
        content = config_path.read_text()
    except OSError as e:
        raise ConfigParseError(str(config_path), e.strerror or str(e)) from e

    if not content.strip():
        return {}

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParseError(str(config_path), str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigInvalidStructureError(str(config_path), "top level must be a mapping")
    return data


def _parse_bool(source: str, key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConfigInvalidStructureError(source, f"'{key}' must be a boolean, got {value!r}")


def _coerce(source: str, key: str, value: Any) -> Any:
    """Normalize a raw env or config-file value for key."""
    if key in BOOLEAN_SETTINGS:
        return _parse_bool(source, key, value)

    if key == "dirs":
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list) and all(isinstance(p, str) for p in value):
            return tuple(Path(p) for p in value if p)
        raise ConfigInvalidStructureError(source, "'dirs' must be a path or a list of paths")

    # warning/critical may be written as bare YAML numbers
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigInvalidStructureError(source, f"'{key}' must be a range string")
    return str(value)


def _lookup(
    key: str,
    cli_value: Any | None,
    config: Mapping[str, Any],
    config_path: Path | None,
) -> tuple[Any, str]:
    """Resolve key and report where the value came from."""
    # 1. CLI argument takes highest precedence
    if cli_value is not None:
        return cli_value, "cli"

    # 2. Environment variable
    env_var = _get_env_var_name(key)
    env_value = os.environ.get(env_var)
    if env_value is not None:
        # Several directories are separated like PATH
        raw: Any = env_value.split(os.pathsep) if key == "dirs" else env_value
        return _coerce(f"${env_var}", key, raw), "env"

    # 3. Config file
    if key in config:
        return _coerce(str(config_path), key, config[key]), "config"

    # 4. Default
    return DEFAULTS.get(key), "default"


def list_settings(
    cli_values: Mapping[str, Any] | None = None,
    config_path: Path | None = None,
) -> dict[str, dict[str, Any]]:
    """List all known settings with their resolved values and sources.

    Returns:
        Dict mapping setting keys to {"value": ..., "source": ...} where
        source is one of cli, env, config or default.
    """
    cli_values = cli_values or {}
    config = load_config(config_path)
    result: dict[str, dict[str, Any]] = {}
    for key in KNOWN_SETTINGS:
        value, source = _lookup(key, cli_values.get(key), config, config_path)
        result[key] = {"value": value, "source": source}
    return result


def resolve_settings(
    cli_values: Mapping[str, Any],
    config_path: Path | None = None,
) -> Settings:
    """Resolve every setting for a run.

    Args:
        cli_values: Values given on the command line; None means not given.
        config_path: YAML config file to consult.

    Returns:
        Settings with all required values present.

    Raises:
        MissingSettingError: If dirs, warning or critical is not given anywhere.
        ConfigError: If the config file or an environment value is invalid.
    """
    resolved = list_settings(cli_values, config_path)
    for key, entry in resolved.items():
        logger.debug("Setting %s=%r (from %s)", key, entry["value"], entry["source"])
        # Empty range strings count as given; Threshold.from_strings rejects them
        missing = not entry["value"] if key == "dirs" else entry["value"] is None
        if key in REQUIRED_SETTINGS and missing:
            raise MissingSettingError(key)

    return Settings(
        dirs=tuple(resolved["dirs"]["value"]),
        warning=resolved["warning"]["value"],
        critical=resolved["critical"]["value"],
        recursive=resolved["recursive"]["value"],
        detect_cycles=resolved["detect_cycles"]["value"],
    )
