"""Core data types for the picture engine."""

from .data_models import BLACK, WHITE, Color, Grid, Picture, Pixel
from .exceptions import (
    BoundaryError, InvalidParameterError, LengthMismatchError, LoadError,
    PictureError, SaveError
)

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
    'SaveError'
]
