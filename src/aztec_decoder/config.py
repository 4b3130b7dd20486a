# file: src/aztec_decoder/config.py

"""
Configuration loading.

Configuration is a plain dictionary read from YAML. Missing sections fall
back to the values returned by get_default_config().
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "default_config.yaml")


def get_default_config() -> Dict[str, Any]:
    """
    Get hardcoded default configuration.
    
    Returns:
        Default configuration dictionary
    """
    return {
        "decoder": {
            "verbose": False,
        },
        "logging": {
            "level": "WARNING",
            "format": "%(asctime)s [%(levelname)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.
    
    Args:
        config_path: Path to YAML config file. If None, the packaged
                     default_config.yaml is used.
    
    Returns:
        Configuration dictionary, merged over the defaults
    
    Raises:
        ConfigurationError: If the file cannot be parsed or is not a mapping
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    
    if not os.path.exists(config_path):
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return get_default_config()
    
    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {config_path}: {e}") from e
    
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Config root must be a mapping, got {type(loaded).__name__}"
        )
    
    logger.info(f"Loaded configuration from {config_path}")
    return _merge(get_default_config(), loaded)


def setup_logging(config: Optional[Dict[str, Any]] = None, verbose: bool = False) -> None:
    """Configure root logging from the 'logging' config section."""
    log_config = (config or get_default_config()).get("logging", {})
    
    if verbose:
        level = logging.DEBUG
    else:
        level_name = str(log_config.get("level", "WARNING")).upper()
        level = getattr(logging, level_name, None)
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown log level: {level_name}")
    
    logging.basicConfig(
        level=level,
        format=log_config.get("format", "%(asctime)s [%(levelname)s] %(message)s"),
        datefmt=log_config.get("datefmt", "%Y-%m-%d %H:%M:%S")
    )
