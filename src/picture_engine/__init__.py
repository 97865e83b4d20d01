"""Picture engine: pixel transformations over RGB pictures.

Geometric and photometric operations (invert, grayscale, rotate, flip, blur,
blend and mosaic) over an in-memory picture grid, plus Pillow-based loading
and saving and a command-line tool.
"""

from .core import (
    BLACK, WHITE, Color, Grid, Picture, Pixel, BoundaryError, InvalidParameterError,
    LengthMismatchError, LoadError, PictureError, SaveError
)
from .process import (
    Angle, Direction, ExtentPolicy, TransformEngine, TransformOperation, Transformation,
    blend, blur, common_extent, flip, grayscale, invert, mosaic, rotate
)
from .integration import load_picture, save_picture

__version__ = "0.1.0"

__all__ = [
    'Color',
    'Grid',
    'Picture',
    'Pixel',
    'BLACK',
    'WHITE',
    'PictureError',
    'BoundaryError',
    'LengthMismatchError',
    'InvalidParameterError',
    'LoadError',
    'SaveError',
    'Angle',
    'Direction',
    'ExtentPolicy',
    'TransformEngine',
    'TransformOperation',
    'Transformation',
    'common_extent',
    'invert',
    'grayscale',
    'rotate',
    'flip',
    'blur',
    'blend',
    'mosaic',
    'load_picture',
    'save_picture'
]
