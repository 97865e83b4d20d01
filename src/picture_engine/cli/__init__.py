"""Command-line interface for picture-engine.

This module provides the CLI that loads images, runs one transformation and
saves the result.
"""

from .main import main_cli
from .commands import transform_command, config_command
from .utils import setup_logging, format_duration

__all__ = [
    'main_cli',
    'transform_command',
    'config_command',
    'setup_logging',
    'format_duration'
]
