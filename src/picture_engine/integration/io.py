"""Loading and saving pictures with Pillow."""

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union
import numpy as np
from PIL import Image, UnidentifiedImageError

from picture_engine.core.data_models import MAX_INTENSITY, Grid
from picture_engine.core.exceptions import LoadError, SaveError

logger = logging.getLogger(__name__)


def picture_from_image(image: Image.Image) -> Grid:
    """Convert a Pillow image into a Grid.

    Any alpha channel or palette is dropped by converting to RGB first.
    """
    rgb = image if image.mode == "RGB" else image.convert("RGB")
    return Grid.from_array(np.asarray(rgb, dtype=np.int64))


def picture_to_image(picture: Grid) -> Image.Image:
    """Convert a Grid into an RGB Pillow image.

    Raises:
        SaveError: If any channel lies outside 0..255
    """
    data = picture.to_array()
    if data.min() < 0 or data.max() > MAX_INTENSITY:
        raise SaveError(
            f"Channel values must lie in 0..{MAX_INTENSITY}, "
            f"got range {data.min()}..{data.max()}"
        )
    return Image.fromarray(data.astype(np.uint8))


class PictureIO:
    """Reads and writes pictures on disk."""

    def __init__(self, default_format: str = "PNG", create_dirs: bool = True):
        """Initialize picture I/O.

        Args:
            default_format: Pillow format used when the destination has no extension
            create_dirs: Whether to create missing parent directories when saving
        """
        self.default_format = default_format
        self.create_dirs = create_dirs

    @classmethod
    def from_config(cls, config: Optional[Any]) -> 'PictureIO':
        """Create an instance from the `io` section of a configuration."""
        io_cfg = config.get('io', {}) if config is not None else {}
        return cls(
            default_format=str(io_cfg.get('default_format', 'PNG')),
            create_dirs=bool(io_cfg.get('create_dirs', True))
        )

    def load(self, file_path: Union[str, Path]) -> Grid:
        """Load a picture from disk.

        Args:
            file_path: Path of the image file

        Returns:
            Grid holding the image's RGB pixels

        Raises:
            LoadError: If the file is missing or cannot be decoded
        """
        path = Path(file_path)
        if not path.is_file():
            raise LoadError(f"Picture file not found: {path}")

        try:
            with Image.open(path) as image:
                picture = picture_from_image(image)
        except UnidentifiedImageError as e:
            raise LoadError(f"Unsupported image format: {path}") from e
        except OSError as e:
            raise LoadError(f"Failed to decode {path}: {e}") from e

        logger.debug(f"Loaded {path} ({picture.width}x{picture.height})")
        return picture

    def load_all(self, file_paths: Sequence[Union[str, Path]]) -> List[Grid]:
        """Load several pictures, failing on the first one that cannot be read."""
        return [self.load(file_path) for file_path in file_paths]

    def write(self, picture: Grid, file_path: Union[str, Path]) -> Path:
        """Save a picture, raising on failure.

        Raises:
            SaveError: If the picture cannot be encoded or written
        """
        path = Path(file_path)
        image = picture_to_image(picture)
        image_format = None if path.suffix else self.default_format

        try:
            if self.create_dirs:
                path.parent.mkdir(parents=True, exist_ok=True)
            image.save(path, format=image_format)
        except (OSError, ValueError, KeyError) as e:
            raise SaveError(f"Failed to save {path}: {e}") from e

        logger.debug(f"Saved {path} ({picture.width}x{picture.height})")
        return path

    def save(self, picture: Grid, file_path: Union[str, Path]) -> bool:
        """Save a picture.

        Returns:
            True on success, False if the picture could not be saved
        """
        try:
            self.write(picture, file_path)
        except SaveError as e:
            logger.error(str(e))
            return False
        return True


_default_io = PictureIO()


def load_picture(file_path: Union[str, Path]) -> Grid:
    """Load a picture using the default settings."""
    return _default_io.load(file_path)


def save_picture(picture: Grid, file_path: Union[str, Path]) -> bool:
    """Save a picture using the default settings; returns success."""
    return _default_io.save(picture, file_path)


def write_picture(picture: Grid, file_path: Union[str, Path]) -> Path:
    """Save a picture using the default settings; raises SaveError on failure."""
    return _default_io.write(picture, file_path)
