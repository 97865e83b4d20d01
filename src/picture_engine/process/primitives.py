"""Transformation primitives for pictures.

This module implements the seven operations the engine can apply: invert,
grayscale, rotate, flip, blur, blend and mosaic. Every primitive reads its
input pictures and builds a new picture; inputs are never modified.
"""

import numpy as np
import logging
from typing import Dict, List, Optional, Sequence, Union
from abc import ABC, abstractmethod
from enum import Enum
from numbers import Integral
import time

from ..core.data_models import MAX_INTENSITY, Grid
from ..core.exceptions import BoundaryError, InvalidParameterError
from .extent import ExtentPolicy, common_extent, parse_extent_policy

logger = logging.getLogger(__name__)


class Angle(Enum):
    """Clockwise rotation angles supported by Rotate."""

    R90 = 90
    R180 = 180
    R270 = 270


class Direction(Enum):
    """Flip axes supported by Flip."""

    HORIZONTAL = "H"
    VERTICAL = "V"


def parse_angle(value: Union[int, str, Angle]) -> Angle:
    """Convert 90/180/270 (as int or string) into an Angle.

    Raises:
        InvalidParameterError: If the value is not a supported angle
    """
    if isinstance(value, Angle):
        return value

    degrees = None
    if isinstance(value, Integral) and not isinstance(value, bool):
        degrees = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        degrees = int(value.strip())

    # Anything else (floats included) is rejected rather than truncated
    for angle in Angle:
        if angle.value == degrees:
            return angle
    raise InvalidParameterError(f"Invalid rotation angle: {value!r} (expected 90, 180 or 270)")


def parse_direction(value: Union[str, Direction]) -> Direction:
    """Convert 'H'/'V' (or 'horizontal'/'vertical') into a Direction.

    Raises:
        InvalidParameterError: If the value is not a supported axis
    """
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        for direction in Direction:
            if key in (direction.value, direction.name):
                return direction
    raise InvalidParameterError(f"Invalid flip direction: {value!r} (expected H or V)")


def _is_valid(parser, value) -> bool:
    try:
        parser(value)
    except InvalidParameterError:
        return False
    return True


class TransformPrimitive(ABC):
    """Abstract base class for all transformation primitives."""

    def __init__(self, name: str, arity: Optional[int] = 1, max_execution_time: float = 1.0):
        """Initialize primitive.

        Args:
            name: Name of the primitive
            arity: Number of input pictures, or None for one or more
            max_execution_time: Execution time in seconds above which a warning is logged
        """
        self.name = name
        self.arity = arity
        self.max_execution_time = max_execution_time

    @abstractmethod
    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        """Execute the primitive.

        Args:
            pictures: Input pictures
            **kwargs: Additional parameters

        Returns:
            Newly allocated output picture
        """
        pass

    def validate_params(self, **kwargs) -> bool:
        """Validate parameters for this primitive.

        The default accepts no parameters at all.
        """
        return not kwargs

    def __call__(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        """Execute primitive with validation and timing."""
        start_time = time.perf_counter()

        if not self.validate_params(**kwargs):
            raise InvalidParameterError(f"Invalid parameters for {self.name}: {kwargs}")

        if not pictures:
            raise InvalidParameterError(f"{self.name} needs at least one picture")
        if self.arity is not None and len(pictures) != self.arity:
            raise InvalidParameterError(
                f"{self.name} takes {self.arity} picture(s), got {len(pictures)}"
            )

        result = self.execute(pictures, **kwargs)

        execution_time = time.perf_counter() - start_time
        if execution_time > self.max_execution_time:
            logger.warning(f"{self.name} took {execution_time*1000:.0f}ms, exceeds {self.max_execution_time*1000:.0f}ms target")

        return result


# Photometric primitives

class Invert(TransformPrimitive):
    """Replace every channel c by 255 - c."""

    def __init__(self):
        super().__init__("invert")

    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        return Grid.from_array(MAX_INTENSITY - pictures[0].to_array())


class Grayscale(TransformPrimitive):
    """Set every channel to the floor mean of the pixel's three channels."""

    def __init__(self):
        super().__init__("grayscale")

    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        data = pictures[0].to_array()
        average = data.sum(axis=2, keepdims=True) // 3
        return Grid.from_array(np.repeat(average, 3, axis=2))


# Geometric primitives

class Rotate(TransformPrimitive):
    """Rotate a picture clockwise by 90, 180 or 270 degrees."""

    # np.rot90 turns counter-clockwise for positive k
    _TURNS = {Angle.R90: -1, Angle.R180: 2, Angle.R270: 1}

    def __init__(self):
        super().__init__("rotate")

    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        """Rotate the picture.

        With W x H input, 90 maps (x, y) to (H-1-y, x), 180 maps it to
        (W-1-x, H-1-y) and 270 maps it to (y, W-1-x).

        Args:
            angle: Angle, or 90/180/270
        """
        angle = parse_angle(kwargs['angle'])
        return Grid.from_array(np.rot90(pictures[0].to_array(), k=self._TURNS[angle]))

    def validate_params(self, **kwargs) -> bool:
        if set(kwargs) != {'angle'}:
            return False
        return _is_valid(parse_angle, kwargs['angle'])


class Flip(TransformPrimitive):
    """Mirror a picture horizontally (left-right) or vertically (up-down)."""

    def __init__(self):
        super().__init__("flip")

    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        """Flip the picture.

        Args:
            direction: Direction, or 'H'/'V'
        """
        direction = parse_direction(kwargs['direction'])
        data = pictures[0].to_array()
        if direction is Direction.HORIZONTAL:
            return Grid.from_array(np.fliplr(data))
        return Grid.from_array(np.flipud(data))

    def validate_params(self, **kwargs) -> bool:
        if set(kwargs) != {'direction'}:
            return False
        return _is_valid(parse_direction, kwargs['direction'])


# Neighbourhood primitives

class Blur(TransformPrimitive):
    """3x3 box blur that leaves the outer border untouched."""

    def __init__(self):
        super().__init__("blur")

    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        data = pictures[0].to_array()
        height, width = data.shape[:2]
        result = data.copy()

        # Pictures narrower or shorter than 3 pixels are all border
        if height < 3 or width < 3:
            return Grid.from_array(result)

        total = np.zeros((height - 2, width - 2, 3), dtype=data.dtype)
        for dy in range(3):
            for dx in range(3):
                total += data[dy:height - 2 + dy, dx:width - 2 + dx]

        result[1:-1, 1:-1] = total // 9
        return Grid.from_array(result)


# Multi-picture primitives

class Blend(TransformPrimitive):
    """Average several pictures channel by channel."""

    def __init__(self, extent_policy: ExtentPolicy = ExtentPolicy.SMALLEST):
        """Initialize blend.

        Args:
            extent_policy: Default policy used to reconcile input sizes
        """
        super().__init__("blend", arity=None)
        self.extent_policy = extent_policy

    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        """Blend the pictures.

        Args:
            extent_policy: Optional ExtentPolicy overriding the default

        Raises:
            BoundaryError: If the extent reaches past a smaller input picture
        """
        policy = parse_extent_policy(kwargs.get('extent_policy', self.extent_policy))
        width, height = common_extent(pictures, policy)

        for index, picture in enumerate(pictures):
            if picture.width < width or picture.height < height:
                x = min(picture.width, width - 1)
                y = min(picture.height, height - 1)
                raise BoundaryError(
                    f"Picture {index} is {picture.width}x{picture.height}, "
                    f"smaller than the {width}x{height} blend extent",
                    x, y
                )

        stack = np.stack([picture.to_array()[:height, :width] for picture in pictures])
        return Grid.from_array(stack.sum(axis=0) // len(pictures))

    def validate_params(self, **kwargs) -> bool:
        if not set(kwargs) <= {'extent_policy'}:
            return False
        if 'extent_policy' in kwargs:
            return _is_valid(parse_extent_policy, kwargs['extent_policy'])
        return True


class Mosaic(TransformPrimitive):
    """Compose square tiles taken from several pictures.

    The output covers the smallest common extent of the inputs, cut down to a
    whole number of tiles in each direction. The tile in tile-column i and
    tile-row j is copied from input (i + j) % n at the same position, so the
    sources cycle along rows and columns in a diagonal pattern.
    """

    def __init__(self):
        super().__init__("mosaic", arity=None)

    def execute(self, pictures: Sequence[Grid], **kwargs) -> Grid:
        """Build the mosaic.

        Args:
            tile_size: Side length of each tile in pixels

        Raises:
            InvalidParameterError: If not even one tile fits the common extent
        """
        tile_size = int(kwargs['tile_size'])
        width, height = common_extent(pictures, ExtentPolicy.SMALLEST)
        columns = width // tile_size
        rows = height // tile_size

        if columns == 0 or rows == 0:
            raise InvalidParameterError(
                f"Tile size {tile_size} does not fit in the {width}x{height} common extent"
            )

        mosaic = Grid(columns * tile_size, rows * tile_size)
        for i in range(columns):
            for j in range(rows):
                source = pictures[(i + j) % len(pictures)]
                start_x, start_y = i * tile_size, j * tile_size
                mosaic.set_tile(start_x, start_y, tile_size,
                                source.get_tile(start_x, start_y, tile_size))

        logger.debug(f"Mosaic of {columns}x{rows} tiles from {len(pictures)} pictures")
        return mosaic

    def validate_params(self, **kwargs) -> bool:
        if set(kwargs) != {'tile_size'}:
            return False
        tile_size = kwargs['tile_size']
        return isinstance(tile_size, Integral) and not isinstance(tile_size, bool) and tile_size > 0


def create_all_primitives(max_execution_time: Optional[float] = None,
                          blend_extent_policy: ExtentPolicy = ExtentPolicy.SMALLEST) -> Dict[str, TransformPrimitive]:
    """Create all available primitives.

    Args:
        max_execution_time: Slow-execution warning threshold applied to every primitive
        blend_extent_policy: Default extent policy for blend

    Returns:
        Dictionary mapping primitive names to instances
    """
    primitives: List[TransformPrimitive] = [
        Invert(),
        Grayscale(),
        Rotate(),
        Flip(),
        Blur(),
        Blend(blend_extent_policy),
        Mosaic(),
    ]

    if max_execution_time is not None:
        for primitive in primitives:
            primitive.max_execution_time = max_execution_time

    logger.debug(f"Created {len(primitives)} transformation primitives")
    return {primitive.name: primitive for primitive in primitives}


# Function-style API

def invert(picture: Grid) -> Grid:
    """Return a new picture with every colour inverted."""
    return Invert()([picture])


def grayscale(picture: Grid) -> Grid:
    """Return a new picture with every colour normalized to gray."""
    return Grayscale()([picture])


def rotate(picture: Grid, angle: Union[int, str, Angle]) -> Grid:
    """Return a new picture rotated clockwise by 90, 180 or 270 degrees."""
    return Rotate()([picture], angle=angle)


def flip(picture: Grid, direction: Union[str, Direction]) -> Grid:
    """Return a new picture mirrored along the given axis."""
    return Flip()([picture], direction=direction)


def blur(picture: Grid) -> Grid:
    """Return a new box-blurred picture with the border copied unchanged."""
    return Blur()([picture])


def blend(pictures: Sequence[Grid],
          extent_policy: Union[str, ExtentPolicy] = ExtentPolicy.SMALLEST) -> Grid:
    """Return the channel-wise floor mean of the pictures."""
    return Blend()(list(pictures), extent_policy=extent_policy)


def mosaic(tile_size: int, pictures: Sequence[Grid]) -> Grid:
    """Return a mosaic of tile_size x tile_size tiles taken from the pictures."""
    return Mosaic()(list(pictures), tile_size=tile_size)
