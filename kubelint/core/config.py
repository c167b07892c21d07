"""Centralized configuration loading for kubelint.

This module provides utilities for loading and accessing configuration from
kubelint.json with support for environment variable fallbacks and default values.

Example kubelint.json::

    {
      "validation": {"strict": false, "workers": 4, "discover_crds": true},
      "logging": {"level": "INFO"}
    }
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_CONFIG_PATH = "kubelint.json"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from JSON file.

    Returns empty dict if file doesn't exist or is invalid.

    Args:
        config_path: Path to the JSON config file (default: "kubelint.json")

    Returns:
        Configuration dictionary, or empty dict if file not found/invalid
    """
    path = Path(config_path)

    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        return {}
    return data if isinstance(data, dict) else {}


def get_config_value(
    keys: List[str], default: Any = None, config: Optional[Dict[str, Any]] = None
) -> Any:
    """Get nested configuration value with fallback to environment variable.

    Supports key paths like ["validation", "strict"]. Also checks environment
    variables as fallback (e.g., VALIDATION_STRICT for validation.strict).

    Args:
        keys: List of keys to traverse (e.g., ["validation", "workers"])
        default: Default value if key not found
        config: Optional config dict (uses load_config() if not provided)

    Returns:
        Configuration value, or default if not found
    """
    if config is None:
        config = load_config()

    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
            if value is None:
                break
        else:
            value = None
            break

    if value is not None:
        return value

    env_key = "_".join(k.upper() for k in keys)
    env_value = os.environ.get(env_key)
    if env_value is not None:
        return env_value

    return default


def as_bool(value: Any) -> bool:
    """Coerce a config or environment value to bool.

    Raises:
        ValueError: If a string value is not a recognised boolean literal
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"not a boolean: {value!r}")
    return bool(value)


def as_int(value: Any) -> int:
    """Coerce a config or environment value to int."""
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    return int(value)
