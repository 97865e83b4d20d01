"""Transformation layer for the picture engine.

This module holds the transformation primitives, the dimension
reconciliation helper and the engine that dispatches between them.
"""

from .engine import (
    TransformEngine, TransformOperation, Transformation, create_transform_engine,
    parse_transformation
)
from .extent import ExtentPolicy, common_extent
from .primitives import (
    Angle, Direction, TransformPrimitive, Invert, Grayscale, Rotate, Flip, Blur,
    Blend, Mosaic, create_all_primitives, invert, grayscale, rotate, flip, blur,
    blend, mosaic
)

__all__ = [
    'TransformEngine',
    'TransformOperation',
    'Transformation',
    'create_transform_engine',
    'parse_transformation',
    'ExtentPolicy',
    'common_extent',
    'Angle',
    'Direction',
    'TransformPrimitive',
    'Invert',
    'Grayscale',
    'Rotate',
    'Flip',
    'Blur',
    'Blend',
    'Mosaic',
    'create_all_primitives',
    'invert',
    'grayscale',
    'rotate',
    'flip',
    'blur',
    'blend',
    'mosaic'
]
