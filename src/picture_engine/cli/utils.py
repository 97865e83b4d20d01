"""CLI utility functions."""

import logging
from typing import Optional


def setup_logging(level: int = logging.INFO,
                  format_string: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        level: Logging level
        format_string: Custom format string
    """
    if format_string is None:
        if level <= logging.DEBUG:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Reduce noise from some libraries
    logging.getLogger('PIL').setLevel(logging.WARNING)


def log_level_from_flags(verbose: int, quiet: bool) -> Optional[int]:
    """Map -v/-q flags to a logging level.

    Returns:
        The level, or None when no flag was given
    """
    if quiet:
        return logging.ERROR
    if verbose == 1:
        return logging.INFO
    if verbose >= 2:
        return logging.DEBUG
    return None


def log_level_from_name(name: str, default: int = logging.WARNING) -> int:
    """Resolve a level name such as 'INFO' to its numeric value."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0.001:
        return f"{seconds*1000000:.1f}µs"
    elif seconds < 1:
        return f"{seconds*1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"
