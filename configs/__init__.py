"""YAML configuration for flowsim runs."""

import copy
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default.yaml"


def load_config(config_path: str) -> dict:
    """Read one YAML configuration file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Parsed sections; an empty file gives an empty dict
    """
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def merge_configs(base_config: dict, override_config: Optional[dict]) -> dict:
    """Overlay ``override_config`` on ``base_config`` section by section.

    Nested dicts are merged key by key, any other value replaces the base
    one. Neither input is modified.

    Args:
        base_config: Defaults
        override_config: User values, may be None

    Returns:
        Merged configuration
    """
    merged = copy.deepcopy(base_config)
    for key, value in (override_config or {}).items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_with_defaults(config_path: Optional[str] = None) -> dict:
    """Load ``default.yaml`` and overlay an optional user config."""
    config = load_config(str(DEFAULT_CONFIG_PATH))
    if config_path:
        config = merge_configs(config, load_config(config_path))
    return config
