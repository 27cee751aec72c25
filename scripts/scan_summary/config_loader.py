"""
Configuration Loader for the scan summary engine.

Implements a layered configuration system:
    hardcoded defaults < YAML file < env vars < explicit overrides

Usage:
    from scan_summary.config_loader import build_config, configure_logging
    config = build_config(config_path=".scan-summary.yml")
    configure_logging(config)

Score weights and grade thresholds are fixed constants in
:mod:`scan_summary.scoring` and are not configurable.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from scan_summary.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".scan-summary.yml"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ---------------------------------------------------------------------------
# Default configuration
# ---------------------------------------------------------------------------


def get_default_config() -> Dict[str, Any]:
    """Return every configuration key with its default.

    This is the lowest-priority layer. Every configurable key must appear
    here so that downstream code never needs to guard against missing keys.
    """
    return {
        "hot_spot_limit": 5,
        "temp_roots": ["/tmp"],
        "min_candidate_length": 2,
        "log_level": "INFO",
    }


# ---------------------------------------------------------------------------
# YAML file layer
# ---------------------------------------------------------------------------


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML config file.

    The file may hold the keys at the top level or under a ``scan_summary``
    section. Unknown keys are ignored with a warning.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or is not a YAML mapping.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    section = raw.get("scan_summary", raw)
    if not isinstance(section, dict):
        raise ConfigurationError(f"'scan_summary' section in {path} must be a mapping")

    known = get_default_config()
    loaded: Dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            logger.warning("Ignoring unknown config key '%s' in %s", key, path)
            continue
        if value is not None:
            loaded[key] = value

    logger.info("Loaded configuration from %s", path)
    return loaded


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

# Mapping: (env_var_name, ...) -> (config_key, type)
# Types: "str", "int", "list"
_ENV_MAPPINGS: List[tuple] = [
    (("SCAN_SUMMARY_HOT_SPOT_LIMIT",),       "hot_spot_limit",       "int"),
    (("SCAN_SUMMARY_TEMP_ROOTS",),           "temp_roots",           "list"),
    (("SCAN_SUMMARY_MIN_CANDIDATE_LENGTH",), "min_candidate_length", "int"),
    (("SCAN_SUMMARY_LOG_LEVEL", "LOG_LEVEL"), "log_level",           "str"),
]


def _coerce(raw: str, type_tag: str) -> Any:
    """Convert a raw env-var string to the appropriate Python type."""
    if type_tag == "int":
        return int(raw)
    if type_tag == "list":
        return [part.strip() for part in raw.split(",") if part.strip()]
    return raw


def load_env_overrides() -> Dict[str, Any]:
    """Load configuration values from explicitly-set environment variables.

    Only variables present in ``os.environ`` are returned. The first name
    found wins (left-to-right in the mapping tuple).
    """
    overrides: Dict[str, Any] = {}

    for env_names, config_key, type_tag in _ENV_MAPPINGS:
        for env_name in env_names:
            if env_name in os.environ:
                try:
                    overrides[config_key] = _coerce(os.environ[env_name], type_tag)
                except (ValueError, TypeError) as exc:
                    logger.warning(
                        "Ignoring env var %s: could not convert %r to %s (%s)",
                        env_name, os.environ[env_name], type_tag, exc,
                    )
                break  # first match wins

    return overrides


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check value types and ranges; return the config unchanged.

    Raises
    ------
    ConfigurationError
        On the first invalid value.
    """
    limit = config.get("hot_spot_limit")
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ConfigurationError(f"hot_spot_limit must be a non-negative integer, got {limit!r}")

    min_length = config.get("min_candidate_length")
    if isinstance(min_length, bool) or not isinstance(min_length, int) or min_length < 1:
        raise ConfigurationError(f"min_candidate_length must be a positive integer, got {min_length!r}")

    roots = config.get("temp_roots")
    if isinstance(roots, str):
        raise ConfigurationError("temp_roots must be a list of paths, not a string")
    if not isinstance(roots, (list, tuple)) or not all(isinstance(r, str) and r for r in roots):
        raise ConfigurationError(f"temp_roots must be a list of non-empty strings, got {roots!r}")

    level = config.get("log_level")
    if not isinstance(level, str) or level.upper() not in _VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}, got {level!r}"
        )

    return config


# ---------------------------------------------------------------------------
# Full merge chain
# ---------------------------------------------------------------------------


def build_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    use_env: bool = True,
) -> Dict[str, Any]:
    """Build the effective configuration.

    Layers, lowest priority first: defaults, YAML file (*config_path*, or
    ``.scan-summary.yml`` in the working directory when present),
    environment variables, then *overrides*. ``None`` override values are
    skipped so they never shadow earlier layers.
    """
    config = get_default_config()

    if config_path is not None:
        config.update(load_config_file(config_path))
    elif Path(DEFAULT_CONFIG_FILENAME).is_file():
        config.update(load_config_file(DEFAULT_CONFIG_FILENAME))

    if use_env:
        config.update(load_env_overrides())

    if overrides:
        config.update({key: value for key, value in overrides.items() if value is not None})

    return validate_config(config)


def configure_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """Apply the configured log level to the root logger"""
    level = (config or get_default_config()).get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "build_config",
    "configure_logging",
    "get_default_config",
    "load_config_file",
    "load_env_overrides",
    "validate_config",
]
