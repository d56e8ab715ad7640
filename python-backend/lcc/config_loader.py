"""Configuration loader for the Localization Content Comparer."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ConfigurationError, ErrorCategory, ErrorInfo, ErrorSeverity

_CONFIG_PATH = Path(__file__).resolve().parent / "config.yml"
CONFIG_ENV_VAR = "LCC_CONFIG_PATH"


def config_path() -> Path:
    """Return the YAML file in effect, honouring ``LCC_CONFIG_PATH``."""

    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else _CONFIG_PATH


@lru_cache(maxsize=1)
def load_config() -> Dict[str, Any]:
    """Load the YAML configuration for the comparer.

    The function caches the parsed YAML so repeated calls are inexpensive.
    Call ``load_config.cache_clear()`` after changing ``LCC_CONFIG_PATH``.
    """

    path = config_path()
    if not path.exists():
        raise ConfigurationError(
            ErrorInfo(
                category=ErrorCategory.CONFIGURATION,
                severity=ErrorSeverity.CRITICAL,
                user_message="Configuration file is missing.",
                technical_details=f"Config file not found at {path}",
                suggested_action=f"Unset {CONFIG_ENV_VAR} or point it at a YAML file.",
            )
        )
    with path.open("r", encoding="utf-8") as handle:
        data: Dict[str, Any] = yaml.safe_load(handle) or {}
    return data


def get_setting(section: str, key: str, default: Any = None) -> Any:
    """Return ``config[section][key]`` or ``default``."""

    values = load_config().get(section) or {}
    return values.get(key, default)


def get_threshold(name: str, default: float = 0.0) -> float:
    """Convenience accessor for threshold values in the configuration."""

    thresholds = load_config().get("thresholds", {})
    value = thresholds.get(name, default)
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise _bad_value("thresholds", name, value) from None
    if not 0.0 <= value <= 1.0:
        raise _bad_value("thresholds", name, value)
    return value


def _bad_value(section: str, key: str, value: Any) -> ConfigurationError:
    return ConfigurationError(
        ErrorInfo(
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            user_message="A configured threshold is invalid.",
            technical_details=f"{section}.{key} must be a number in [0, 1], got {value!r}",
            suggested_action="Fix the value in the configuration file.",
            context={"section": section, "key": key},
        )
    )
