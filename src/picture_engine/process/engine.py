"""Transformation engine.

This module maps a closed set of transformation variants onto the primitives
and runs exactly one of them over a list of input pictures.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from enum import Enum
from numbers import Integral
import time

from ..core.data_models import Grid
from ..core.exceptions import InvalidParameterError
from .extent import ExtentPolicy, parse_extent_policy
from .primitives import (
    TransformPrimitive,
    create_all_primitives,
    parse_angle,
    parse_direction,
)

logger = logging.getLogger(__name__)


class Transformation(Enum):
    """Every transformation the engine knows about."""

    INVERT = "invert"
    GRAYSCALE = "grayscale"
    ROTATE = "rotate"
    FLIP = "flip"
    BLUR = "blur"
    BLEND = "blend"
    MOSAIC = "mosaic"


def parse_transformation(name: str) -> Transformation:
    """Look up a transformation by (case-insensitive) name.

    Raises:
        InvalidParameterError: If the name is unknown
    """
    if isinstance(name, Transformation):
        return name
    try:
        return Transformation(str(name).strip().lower())
    except ValueError:
        choices = ", ".join(t.value for t in Transformation)
        raise InvalidParameterError(f"Unknown transformation '{name}' (expected one of: {choices})")


# Parameters each transformation requires, in positional order
PARAMETER_ORDER: Dict[Transformation, List[str]] = {
    Transformation.INVERT: [],
    Transformation.GRAYSCALE: [],
    Transformation.ROTATE: ['angle'],
    Transformation.FLIP: ['direction'],
    Transformation.BLUR: [],
    Transformation.BLEND: [],
    Transformation.MOSAIC: ['tile_size'],
}

# Transformations that combine several pictures
MULTI_PICTURE = {Transformation.BLEND, Transformation.MOSAIC}


@dataclass
class TransformOperation:
    """One transformation together with the parameters it carries."""
    transformation: Transformation
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """String representation of operation."""
        name = self.transformation.value
        if not self.parameters:
            return name

        param_strs = [f"{k}={getattr(v, 'value', v)}" for k, v in self.parameters.items()]
        return f"{name}({', '.join(param_strs)})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert operation to dictionary representation."""
        return {
            'transformation': self.transformation.value,
            'parameters': {k: getattr(v, 'value', v) for k, v in self.parameters.items()}
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransformOperation':
        """Create operation from dictionary representation."""
        return cls(
            transformation=parse_transformation(data['transformation']),
            parameters=dict(data.get('parameters', {}))
        )


class TransformEngine:
    """Engine for dispatching transformations to primitives."""

    def __init__(self, max_execution_time: float = 1.0,
                 blend_extent_policy: ExtentPolicy = ExtentPolicy.SMALLEST):
        """Initialize transformation engine.

        Args:
            max_execution_time: Per-primitive time above which a warning is logged
            blend_extent_policy: How blend reconciles pictures of different sizes
        """
        self.max_execution_time = max_execution_time
        self.blend_extent_policy = parse_extent_policy(blend_extent_policy)

        primitives = create_all_primitives(max_execution_time, self.blend_extent_policy)
        self.primitives: Dict[Transformation, TransformPrimitive] = {
            transformation: primitives[transformation.value]
            for transformation in Transformation
        }

        # Execution statistics
        self.execution_count = 0
        self.total_execution_time = 0.0

        logger.info(f"Transform engine initialized with {len(self.primitives)} primitives")
        logger.debug(f"Blend extent policy: {self.blend_extent_policy.value}")

    @classmethod
    def from_config(cls, config) -> 'TransformEngine':
        """Create an engine from the `engine` section of a configuration."""
        engine_cfg = config.get('engine', {}) if config is not None else {}
        blend_cfg = engine_cfg.get('blend', {})
        return cls(
            max_execution_time=float(engine_cfg.get('max_execution_time', 1.0)),
            blend_extent_policy=blend_cfg.get('extent_policy', ExtentPolicy.SMALLEST.value)
        )

    def create_operation(self, transformation, **parameters) -> TransformOperation:
        """Create an operation with validation.

        Args:
            transformation: Transformation or its name
            **parameters: Parameters for the transformation

        Returns:
            TransformOperation instance

        Raises:
            InvalidParameterError: If the name or parameters are invalid
        """
        transformation = parse_transformation(transformation)
        primitive = self.primitives[transformation]
        if not primitive.validate_params(**parameters):
            raise InvalidParameterError(f"Invalid parameters for {transformation.value}: {parameters}")

        return TransformOperation(transformation, parameters)

    def parse_operation(self, name: str, args: Sequence[str]) -> TransformOperation:
        """Build an operation from a name and positional string arguments.

        For example ("rotate", ["90"]) or ("flip", ["V"]).
        """
        transformation = parse_transformation(name)
        expected = PARAMETER_ORDER[transformation]
        if len(args) != len(expected):
            raise InvalidParameterError(
                f"{transformation.value} takes {len(expected)} argument(s), got {len(args)}"
            )

        parameters: Dict[str, Any] = {}
        for key, raw in zip(expected, args):
            parameters[key] = self._convert_argument(key, raw)

        return self.create_operation(transformation, **parameters)

    def _convert_argument(self, key: str, raw: Any) -> Any:
        if key == 'angle':
            return parse_angle(raw)
        if key == 'direction':
            return parse_direction(raw)
        if key == 'tile_size':
            if isinstance(raw, Integral) and not isinstance(raw, bool):
                return int(raw)
            if isinstance(raw, str) and raw.strip().isdigit():
                return int(raw.strip())
            raise InvalidParameterError(f"Tile size must be an integer, got {raw!r}")
        raise InvalidParameterError(f"Unknown parameter: {key}")

    def execute(self, operation: TransformOperation,
                pictures: Sequence[Grid]) -> Tuple[Grid, Dict[str, Any]]:
        """Run one operation over the input pictures.

        Errors from the primitive are propagated unchanged; no partial result
        is ever returned.

        Args:
            operation: Operation to run
            pictures: Input pictures (exactly one unless the operation combines several)

        Returns:
            Tuple of (output_picture, execution_info)
        """
        start_time = time.perf_counter()

        primitive = self.primitives[operation.transformation]
        result = primitive(list(pictures), **operation.parameters)

        execution_time = time.perf_counter() - start_time
        self.execution_count += 1
        self.total_execution_time += execution_time

        logger.debug(f"Executed {operation} on {len(pictures)} picture(s) in {execution_time*1000:.1f}ms")

        execution_info = {
            'operation': str(operation),
            'input_count': len(pictures),
            'output_size': result.size,
            'execution_time': execution_time,
        }
        return result, execution_info

    def run(self, transformation, pictures: Sequence[Grid], **parameters) -> Grid:
        """Create and execute an operation in one step, returning only the picture."""
        operation = self.create_operation(transformation, **parameters)
        result, _ = self.execute(operation, pictures)
        return result

    def get_stats(self) -> Dict[str, Any]:
        """Get execution statistics."""
        average = (self.total_execution_time / self.execution_count
                   if self.execution_count > 0 else 0.0)
        return {
            'execution_count': self.execution_count,
            'total_execution_time': self.total_execution_time,
            'average_execution_time': average,
        }


def create_transform_engine(config: Optional[Any] = None) -> TransformEngine:
    """Factory function to create a transformation engine.

    Args:
        config: Optional configuration with an `engine` section

    Returns:
        Configured TransformEngine instance
    """
    if config is None:
        return TransformEngine()
    return TransformEngine.from_config(config)
