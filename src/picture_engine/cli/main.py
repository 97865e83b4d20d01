"""Main CLI entry point for picture-engine."""

import sys
import argparse
import logging
from typing import List, Optional

from picture_engine.process.engine import Transformation

from . import commands
from .utils import log_level_from_flags, setup_logging


def _add_single_picture_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('input', type=str, help='Image to load')
    parser.add_argument('output', type=str, help='Image to save')


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog='picture-engine',
        description='Picture engine - invert, grayscale, rotate, flip, blur, blend and mosaic images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  picture-engine invert in.png out.png
  picture-engine rotate 90 in.png out.png
  picture-engine flip V in.png out.png
  picture-engine blend a.png b.png out.png
  picture-engine mosaic 10 a.png b.png c.png out.png
  picture-engine -c engine.blend.extent_policy=largest blend a.png b.png out.png
        """
    )

    # Global options
    parser.add_argument(
        '--config', '-c',
        type=str,
        action='append',
        help='Configuration override, may be repeated (e.g., engine.max_execution_time=2.0)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Increase verbosity (use -v or -vv)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress all output except errors'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        metavar='COMMAND'
    )

    for name, help_text in [
        ('invert', 'Invert every colour'),
        ('grayscale', 'Convert to gray using the channel mean'),
        ('blur', 'Apply a 3x3 box blur (border left unchanged)'),
    ]:
        _add_single_picture_arguments(subparsers.add_parser(name, help=help_text))

    rotate_parser = subparsers.add_parser(
        'rotate',
        help='Rotate clockwise by 90, 180 or 270 degrees'
    )
    rotate_parser.add_argument('angle', type=str, help='Rotation angle: 90, 180 or 270')
    _add_single_picture_arguments(rotate_parser)

    flip_parser = subparsers.add_parser(
        'flip',
        help='Flip horizontally (H) or vertically (V)'
    )
    flip_parser.add_argument('direction', type=str, help='Flip direction: H or V')
    _add_single_picture_arguments(flip_parser)

    blend_parser = subparsers.add_parser(
        'blend',
        help='Average several images',
        description='Average several images; the last path is the image to save'
    )
    blend_parser.add_argument('pictures', nargs='+', help='Images to load followed by the image to save')

    mosaic_parser = subparsers.add_parser(
        'mosaic',
        help='Compose square tiles from several images',
        description='Compose square tiles from several images; the last path is the image to save'
    )
    mosaic_parser.add_argument('tile_size', type=str, help='Tile side length in pixels')
    mosaic_parser.add_argument('pictures', nargs='+', help='Images to load followed by the image to save')

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Show, validate or save the configuration'
    )

    config_subparsers = config_parser.add_subparsers(
        dest='config_action',
        help='Configuration actions'
    )
    config_subparsers.add_parser('show', help='Show current configuration')
    config_subparsers.add_parser('validate', help='Validate configuration')
    save_parser = config_subparsers.add_parser(
        'save',
        help='Validate the configuration and write it to a YAML file'
    )
    save_parser.add_argument('path', type=str, help='YAML file to write')

    return parser


def main_cli(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    level = log_level_from_flags(parsed_args.verbose, parsed_args.quiet)
    setup_logging(level if level is not None else logging.WARNING)
    logger = logging.getLogger(__name__)

    try:
        if not parsed_args.command:
            print(commands.NOT_ENOUGH_ARGS)
            parser.print_help()
            return 1

        if parsed_args.command == 'config':
            return commands.config_command(parsed_args)

        if parsed_args.command in {t.value for t in Transformation}:
            return commands.transform_command(parsed_args)

        logger.error(f"Unknown command: {parsed_args.command}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130  # Standard exit code for SIGINT
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def main() -> None:
    """Entry point for console script."""
    sys.exit(main_cli())


if __name__ == '__main__':
    main()
