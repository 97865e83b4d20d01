"""Image file integration for the picture engine."""

from .io import (
    PictureIO, load_picture, save_picture, write_picture, picture_from_image,
    picture_to_image
)

__all__ = [
    'PictureIO',
    'load_picture',
    'save_picture',
    'write_picture',
    'picture_from_image',
    'picture_to_image'
]
