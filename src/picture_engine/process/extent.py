"""Dimension reconciliation across pictures of differing size."""

import logging
from enum import Enum
from typing import Sequence, Union

from ..core.data_models import Extent, Grid
from ..core.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


class ExtentPolicy(Enum):
    """How to combine the sizes of several pictures into one extent."""

    SMALLEST = "smallest"  # tightest extent contained in every picture
    LARGEST = "largest"  # component-wise maximum; smaller pictures are read out of bounds


def parse_extent_policy(value: Union[str, ExtentPolicy]) -> ExtentPolicy:
    """Convert a configuration value into an ExtentPolicy."""
    if isinstance(value, ExtentPolicy):
        return value
    try:
        return ExtentPolicy(str(value).lower())
    except ValueError:
        choices = ", ".join(policy.value for policy in ExtentPolicy)
        raise InvalidParameterError(f"Unknown extent policy '{value}' (expected one of: {choices})")


def common_extent(pictures: Sequence[Grid],
                  policy: ExtentPolicy = ExtentPolicy.SMALLEST) -> Extent:
    """Compute the (width, height) shared by a group of pictures.

    Args:
        pictures: Non-empty sequence of pictures
        policy: SMALLEST takes the minimum width and height, LARGEST the maximum

    Returns:
        Tuple of (width, height)

    Raises:
        InvalidParameterError: If no pictures are given
    """
    if not pictures:
        raise InvalidParameterError("At least one picture is required")

    policy = parse_extent_policy(policy)
    combine = min if policy is ExtentPolicy.SMALLEST else max

    width = combine(picture.width for picture in pictures)
    height = combine(picture.height for picture in pictures)

    if any(picture.size != (width, height) for picture in pictures):
        logger.debug(f"Pictures differ in size; {policy.value} extent is {width}x{height}")

    return width, height
