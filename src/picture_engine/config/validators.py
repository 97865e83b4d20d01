"""Configuration validation for picture-engine."""

import logging
from omegaconf import DictConfig
from PIL import Image

logger = logging.getLogger(__name__)

EXTENT_POLICIES = ('smallest', 'largest')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""
    pass


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_engine_config(config.get('engine', {}))
        validate_io_config(config.get('io', {}))
        validate_logging_config(config.get('logging', {}))
    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}") from e

    logger.debug("Configuration validation passed")


def validate_engine_config(engine_config: DictConfig) -> None:
    """Validate engine configuration section.

    Args:
        engine_config: Engine configuration section
    """
    if not engine_config:
        return

    max_time = engine_config.get('max_execution_time', 1.0)
    if isinstance(max_time, bool) or not isinstance(max_time, (int, float)) or max_time <= 0:
        raise ConfigValidationError(
            f"engine.max_execution_time must be positive number, got {max_time}"
        )

    blend_config = engine_config.get('blend', {})
    if blend_config:
        policy = blend_config.get('extent_policy', 'smallest')
        if str(policy).lower() not in EXTENT_POLICIES:
            raise ConfigValidationError(
                f"engine.blend.extent_policy must be one of {EXTENT_POLICIES}, got {policy}"
            )


def validate_io_config(io_config: DictConfig) -> None:
    """Validate io configuration section.

    Args:
        io_config: I/O configuration section
    """
    if not io_config:
        return

    image_format = io_config.get('default_format', 'PNG')
    Image.init()
    if str(image_format).upper() not in Image.SAVE:
        raise ConfigValidationError(
            f"io.default_format must be a format Pillow can write, got {image_format}"
        )

    create_dirs = io_config.get('create_dirs', True)
    if not isinstance(create_dirs, bool):
        raise ConfigValidationError(f"io.create_dirs must be boolean, got {create_dirs}")


def validate_logging_config(logging_config: DictConfig) -> None:
    """Validate logging configuration section.

    Args:
        logging_config: Logging configuration section
    """
    if not logging_config:
        return

    level = logging_config.get('level', 'WARNING')
    if str(level).upper() not in LOG_LEVELS:
        raise ConfigValidationError(
            f"logging.level must be one of {LOG_LEVELS}, got {level}"
        )
