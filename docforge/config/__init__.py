"""Configuration module for docforge.

Provides YAML-based loading for the packaged configuration files
(config.yaml, scenarios.yaml, capabilities.yaml).
"""
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

# Default config directory (relative to this file)
CONFIG_DIR = Path(__file__).parent


def load_yaml_config(filename: str, config_dir: Path = None) -> Dict[str, Any]:
    """Load a YAML configuration file.

    Args:
        filename: Name of the YAML file (e.g., "scenarios.yaml").
        config_dir: Directory to look in. Defaults to the packaged config dir.

    Returns:
        Parsed YAML as dictionary, or empty dict if file not found.

    Raises:
        yaml.YAMLError: If the file exists but cannot be parsed.
    """
    config_path = (config_dir or CONFIG_DIR) / filename
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}")
        return {}

    with open(config_path) as f:
        config = yaml.safe_load(f)
    logger.debug(f"Loaded config from {filename}")
    return config or {}


def load_scenarios_config(filename: str = "scenarios.yaml") -> Dict[str, Any]:
    """Load prompt scenario definitions."""
    return load_yaml_config(filename)


def load_capabilities_config(filename: str = "capabilities.yaml") -> Dict[str, Any]:
    """Load document capability definitions."""
    return load_yaml_config(filename)


__all__ = [
    "load_yaml_config",
    "load_scenarios_config",
    "load_capabilities_config",
    "CONFIG_DIR",
]
