"""Core data models for the picture engine."""

from dataclasses import dataclass
from numbers import Integral
from typing import Iterator, List, NamedTuple, Sequence, Tuple
import numpy as np

from .exceptions import BoundaryError, InvalidParameterError, LengthMismatchError


MAX_INTENSITY = 255


@dataclass(frozen=True)
class Color:
    """An RGB direct-model colour.

    Each channel is the intensity of one component, nominally 0..255. Values
    are stored as given; nothing here clamps them.
    """

    red: int
    green: int
    blue: int

    def invert(self) -> 'Color':
        """Return the colour with every channel replaced by 255 - channel."""
        return Color(MAX_INTENSITY - self.red,
                     MAX_INTENSITY - self.green,
                     MAX_INTENSITY - self.blue)

    def normalize(self) -> 'Color':
        """Return the gray colour whose channels all equal the channel mean.

        The mean uses floor division and is unweighted, so this is not a
        perceptual (luminance) grayscale.
        """
        average = (self.red + self.green + self.blue) // 3
        return Color(average, average, average)

    def to_tuple(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @classmethod
    def from_tuple(cls, rgb: Sequence[int]) -> 'Color':
        red, green, blue = rgb
        return cls(int(red), int(green), int(blue))


BLACK = Color(0, 0, 0)
WHITE = Color(MAX_INTENSITY, MAX_INTENSITY, MAX_INTENSITY)


def _is_index(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


class Pixel(NamedTuple):
    """A (x, y, color) triple produced while enumerating a Grid."""

    x: int
    y: int
    color: Color


class Grid:
    """A fixed-size 2-D buffer of colours addressed by (x, y).

    x is the column and y the row, both zero-based. The buffer is a numpy
    array of shape (height, width, 3) owned exclusively by this Grid.
    """

    def __init__(self, width: int, height: int, color: Color = BLACK):
        """Create a Grid filled with a single colour.

        Args:
            width: Number of columns (must be positive)
            height: Number of rows (must be positive)
            color: Initial colour of every pixel
        """
        if not _is_index(width) or not _is_index(height):
            raise InvalidParameterError(f"Grid dimensions must be integers, got {width}x{height}")
        if width < 1 or height < 1:
            raise InvalidParameterError(f"Grid dimensions must be positive, got {width}x{height}")

        self._data = np.empty((height, width, 3), dtype=np.int64)
        self._data[:, :] = color.to_tuple()

    @classmethod
    def blank(cls, width: int, height: int, color: Color = BLACK) -> 'Grid':
        """Create a Grid of the given size filled with one colour."""
        return cls(width, height, color)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Grid':
        """Create a Grid from an array of shape (height, width, 3).

        The array is copied, so later changes to it do not affect the Grid.
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 3:
            raise InvalidParameterError(f"Expected array of shape (height, width, 3), got {array.shape}")

        if not np.issubdtype(array.dtype, np.integer):
            raise InvalidParameterError(f"Expected an integer array, got dtype {array.dtype}")

        height, width = array.shape[:2]
        grid = cls(int(width), int(height))
        grid._data[...] = array
        return grid

    def to_array(self) -> np.ndarray:
        """Return a copy of the buffer as an array of shape (height, width, 3)."""
        return self._data.copy()

    def copy(self) -> 'Grid':
        return Grid.from_array(self._data)

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) of the Grid."""
        return (self.width, self.height)

    def contains(self, x: int, y: int) -> bool:
        """Test if the point (x, y) lies within the boundaries of this Grid.

        Only integer coordinates can lie inside.
        """
        return (_is_index(x) and _is_index(y)
                and 0 <= x < self.width and 0 <= y < self.height)

    def get(self, x: int, y: int) -> Color:
        """Return the colour of the pixel at (x, y).

        Raises:
            BoundaryError: If (x, y) lies outside the Grid
        """
        self._check_bounds(x, y)
        red, green, blue = self._data[y, x]
        return Color(int(red), int(green), int(blue))

    def set(self, x: int, y: int, color: Color) -> None:
        """Overwrite the colour of the pixel at (x, y).

        Raises:
            BoundaryError: If (x, y) lies outside the Grid
        """
        self._check_bounds(x, y)
        self._data[y, x] = color.to_tuple()

    def pixels(self) -> Iterator[Pixel]:
        """Enumerate every pixel in row-major order.

        For a fixed y, x runs from 0 to width - 1 before y increments. Each
        call starts a fresh pass.
        """
        for y in range(self.height):
            row = self._data[y]
            for x in range(self.width):
                red, green, blue = row[x]
                yield Pixel(x, y, Color(int(red), int(green), int(blue)))

    def __iter__(self) -> Iterator[Pixel]:
        return self.pixels()

    def get_tile(self, start_x: int, start_y: int, size: int) -> List[Color]:
        """Read the size x size square whose top-left corner is (start_x, start_y).

        Colours are returned column by column: x is the outer loop and y the
        inner one.

        Args:
            start_x: Column of the tile origin
            start_y: Row of the tile origin
            size: Side length of the tile

        Returns:
            List of size * size colours

        Raises:
            BoundaryError: If any part of the tile lies outside the Grid
        """
        self._check_tile(start_x, start_y, size)
        region = self._data[start_y:start_y + size, start_x:start_x + size]
        # (y, x, c) -> (x, y, c) so that flattening runs x outer, y inner
        ordered = region.transpose(1, 0, 2).reshape(-1, 3)
        return [Color(int(r), int(g), int(b)) for r, g, b in ordered]

    def set_tile(self, start_x: int, start_y: int, size: int, colors: Sequence[Color]) -> None:
        """Write a tile in the same column-major order used by get_tile.

        Raises:
            BoundaryError: If any part of the tile lies outside the Grid
            LengthMismatchError: If len(colors) != size * size
        """
        self._check_tile(start_x, start_y, size)
        if len(colors) != size * size:
            raise LengthMismatchError(size * size, len(colors))

        values = np.array([color.to_tuple() for color in colors], dtype=np.int64)
        self._data[start_y:start_y + size, start_x:start_x + size] = (
            values.reshape(size, size, 3).transpose(1, 0, 2)
        )

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.contains(x, y):
            raise BoundaryError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} picture", x, y
            )

    def _check_tile(self, start_x: int, start_y: int, size: int) -> None:
        if size < 1:
            raise BoundaryError(f"Tile size must be positive, got {size}", start_x, start_y)
        if not (self.contains(start_x, start_y)
                and self.contains(start_x + size - 1, start_y + size - 1)):
            raise BoundaryError(
                f"Tile of size {size} at ({start_x}, {start_y}) does not fit "
                f"in the {self.width}x{self.height} picture",
                start_x, start_y
            )

    def __eq__(self, other) -> bool:
        """Two Grids are equal if they have the same size and identical pixels."""
        if not isinstance(other, Grid):
            return False
        return self._data.shape == other._data.shape and np.array_equal(self._data, other._data)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"


# Type aliases for clarity
Picture = Grid
Extent = Tuple[int, int]  # (width, height)
