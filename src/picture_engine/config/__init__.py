"""Configuration management for picture-engine.

This module provides Hydra-based configuration loading with runtime
overrides and per-section validation.
"""

from .config_manager import ConfigManager, load_config
from .validators import validate_config, ConfigValidationError

__all__ = [
    'ConfigManager',
    'load_config',
    'validate_config',
    'ConfigValidationError'
]
