"""Exceptions raised by the picture engine."""


class PictureError(Exception):
    """Base class for all picture engine errors."""
    pass


class BoundaryError(PictureError, IndexError):
    """A coordinate or tile region lies outside a picture's extent."""

    def __init__(self, message: str, x: int = None, y: int = None):
        super().__init__(message)
        self.x = x
        self.y = y


class LengthMismatchError(PictureError, ValueError):
    """A colour sequence does not match the expected tile area."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected {expected} colors, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidParameterError(PictureError, ValueError):
    """A transformation name, angle, axis or size outside its domain."""
    pass


class LoadError(PictureError):
    """A picture could not be loaded."""
    pass


class SaveError(PictureError):
    """A picture could not be saved."""
    pass
