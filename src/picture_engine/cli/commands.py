"""CLI command implementations."""

import logging
import time
from typing import List, Tuple

from omegaconf import OmegaConf

from picture_engine.config import ConfigManager, ConfigValidationError, load_config
from picture_engine.core.exceptions import (
    InvalidParameterError, LoadError, PictureError
)
from picture_engine.integration.io import PictureIO
from picture_engine.process.engine import MULTI_PICTURE, TransformEngine, parse_transformation

from .utils import format_duration, log_level_from_name

logger = logging.getLogger(__name__)


NOT_ENOUGH_ARGS = (
    "You did not give a valid input. Input should be of the form:\n"
    "<transformation> <arguments> <image(s) to load> <image to save>"
)
INCORRECT_ARG = (
    "The argument you supplied was not valid. Possible arguments:\n"
    "rotation: 90 180 270\n"
    "flip: H V\n"
    "mosaic: a positive tile size"
)
SAVE_ERROR = "The transformed image could not be saved."
LOAD_ERROR = "An input image could not be loaded."
TRANSFORM_ERROR = "The transformation could not be applied to the given images."


def _split_arguments(args) -> Tuple[List[str], List[str], str]:
    """Split parsed arguments into (parameters, input paths, output path)."""
    transformation = parse_transformation(args.command)

    parameters: List[str] = []
    if args.command == 'rotate':
        parameters = [args.angle]
    elif args.command == 'flip':
        parameters = [args.direction]
    elif args.command == 'mosaic':
        parameters = [args.tile_size]

    if transformation in MULTI_PICTURE:
        if len(args.pictures) < 2:
            raise ValueError("At least one input and one output image are required")
        return parameters, list(args.pictures[:-1]), args.pictures[-1]

    return parameters, [args.input], args.output


def _load_configuration(args):
    config = load_config(overrides=list(args.config or []))

    # Flags given on the command line win over the configured level
    if not args.quiet and args.verbose == 0:
        level = log_level_from_name(config.get('logging', {}).get('level', 'WARNING'))
        logging.getLogger().setLevel(level)

    return config


def transform_command(args) -> int:
    """Handle a transformation command.

    Loads the input picture(s), runs exactly one transformation and saves the
    result.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        parameters, inputs, output = _split_arguments(args)
    except ValueError:
        print(NOT_ENOUGH_ARGS)
        return 1

    try:
        config = _load_configuration(args)
    except ConfigValidationError as e:
        print(f"Invalid configuration: {e}")
        return 1

    engine = TransformEngine.from_config(config)
    picture_io = PictureIO.from_config(config)

    try:
        operation = engine.parse_operation(args.command, parameters)
    except InvalidParameterError as e:
        logger.debug(f"Rejected arguments: {e}")
        print(INCORRECT_ARG)
        return 1

    start_time = time.perf_counter()
    try:
        pictures = picture_io.load_all(inputs)
    except LoadError as e:
        print(LOAD_ERROR)
        logger.error(str(e))
        return 1

    try:
        result, info = engine.execute(operation, pictures)
    except PictureError as e:
        print(TRANSFORM_ERROR)
        logger.error(f"{operation} failed: {e}")
        return 1

    if not picture_io.save(result, output):
        print(SAVE_ERROR)
        return 1

    elapsed = time.perf_counter() - start_time
    width, height = info['output_size']
    logger.info(f"{operation}: wrote {width}x{height} picture to {output} in {format_duration(elapsed)}")
    return 0


def config_command(args) -> int:
    """Handle config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    overrides = list(args.config or [])

    if args.config_action == 'show':
        config = load_config(overrides=overrides, validate=False)
        print("Current Configuration:")
        print("=" * 50)
        print(OmegaConf.to_yaml(config, resolve=True))
        return 0

    if args.config_action in ('validate', 'save'):
        manager = ConfigManager()
        try:
            manager.load_config(overrides=overrides)
        except ConfigValidationError as e:
            print(f"Configuration validation failed: {e}")
            return 1

        if args.config_action == 'validate':
            print("Configuration is valid")
            return 0

        try:
            path = manager.save_config(args.path)
        except OSError as e:
            print(f"Could not write configuration: {e}")
            return 1
        print(f"Configuration saved to {path}")
        return 0

    print("Unknown config action")
    return 1
