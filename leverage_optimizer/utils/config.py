"""YAML configuration loading.

Packaged defaults live in ``leverage_optimizer/config/default_params.yaml``.
A user file only needs to contain the keys it overrides.
"""

import copy
from pathlib import Path
from typing import Any, Dict

import yaml

from .error_handling import ConfigurationError
from .logging_config import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default_params.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config root in {path} must be a mapping, got {type(data).__name__}")
    return data


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge overrides into a copy of base.

    Nested mappings are merged key by key; any other value replaces the base value.
    """
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """Load the packaged defaults, optionally overlaid with a user YAML file.

    Args:
        path: Optional path to a user config file

    Returns:
        Configuration dictionary with 'allocation', 'market' and 'output' sections

    Raises:
        ConfigurationError: If a file is missing, unparsable, or not a mapping
    """
    config = _read_yaml(DEFAULT_CONFIG_PATH)

    if path is not None:
        user_path = Path(path)
        logger.info("Loading config overrides from %s", user_path)
        config = merge_config(config, _read_yaml(user_path))

    return config
