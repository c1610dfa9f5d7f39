"""
Configuration module for Mat3D transform recipes.

Handles loading and validation of transform recipes from YAML files. A
recipe names a starting state (rect and optional matrix) and a list of
operations to apply to it in order.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import logging

import numpy as np

from . import matrix4
from .core import Mat3D
from .geometry import Offset, Rect, TextDirection

logger = logging.getLogger(__name__)

# Operations a recipe may use, with whether each one takes an ``origin``.
OPERATIONS: Dict[str, bool] = {
    'translate': False,
    'shift': True,
    'translate_x': True,
    'translate_y': True,
    'translate_z': True,
    'upward': True,
    'downward': True,
    'forward': True,
    'backward': True,
    'inward': True,
    'outward': True,
    'scale': False,
    'scale_x': True,
    'scale_y': True,
    'scale_z': True,
    'tilt': False,
    'tilt_x': True,
    'tilt_y': True,
    'tilt_z': True,
    'rotate': True,
    'flip_x': True,
    'flip_y': True,
    'flip_z': True,
    'negate': False,
}

DIRECTIONAL_OPERATIONS = ('forward', 'backward')


@dataclass
class OperationStep:
    """A single operation of a recipe."""
    op: str  # Method name on Mat3D, e.g. 'rotate'
    args: List[Any] = field(default_factory=list)  # Positional arguments
    origin: Optional[Offset] = None  # Pivot override, if the operation takes one
    direction: Optional[TextDirection] = None  # Only for forward/backward

    def apply(self, state: Mat3D, default_direction: TextDirection = TextDirection.LTR) -> Mat3D:
        """Apply this step to ``state`` in place."""
        method = getattr(state, self.op)
        kwargs: Dict[str, Any] = {}
        if self.origin is not None:
            kwargs['origin'] = self.origin
        if self.op in DIRECTIONAL_OPERATIONS:
            kwargs['direction'] = self.direction or default_direction
        if self.op == 'shift':
            return method(Offset.from_sequence(self.args), **kwargs)
        return method(*self.args, **kwargs)


@dataclass
class TransformRecipe:
    """
    A starting state plus the operations to apply to it.

    Attributes:
        rect: Bounding rectangle of the starting state
        steps: Operations, applied in order
        matrix: Starting matrix (identity when None)
        direction: Default reading direction for forward/backward
    """
    rect: Rect = field(default_factory=Rect.zero)
    steps: List[OperationStep] = field(default_factory=list)
    matrix: Optional[np.ndarray] = None
    direction: TextDirection = TextDirection.LTR

    @classmethod
    def from_yaml(cls, recipe_path: str) -> "TransformRecipe":
        """
        Load a recipe from a YAML file.

        Args:
            recipe_path: Path to the YAML recipe

        Returns:
            TransformRecipe with validated steps

        Example YAML structure:
            rect: [0, 0, 200, 100]
            direction: ltr
            matrix: [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1]
            steps:
              - op: scale_x
                args: [2.0]
              - op: rotate
                args: [45]
                origin: [0, 0]
              - op: forward
                args: [10]
                direction: rtl
        """
        path = Path(recipe_path)
        if not path.exists():
            raise FileNotFoundError(f"Recipe file not found: {recipe_path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        logger.info(f"Loading transform recipe from {recipe_path}")
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransformRecipe":
        """
        Build a recipe from already-parsed data.

        Raises:
            ValueError: If the rect, matrix, direction or any step is invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Recipe must be a mapping, got {type(data).__name__}")

        rect_data = data.get('rect')
        try:
            rect = Rect.zero() if rect_data is None else Rect.from_sequence(rect_data)
        except TypeError:
            raise ValueError(f"Recipe rect must be four numbers, got {rect_data!r}")

        matrix_data = data.get('matrix')
        matrix = None if matrix_data is None else matrix4.as_matrix(matrix_data)

        direction = TextDirection.from_value(data.get('direction', 'ltr'))

        steps = [cls._parse_step(index, step) for index, step in enumerate(data.get('steps') or [])]

        return cls(rect=rect, steps=steps, matrix=matrix, direction=direction)

    @staticmethod
    def _parse_step(index: int, step: Any) -> OperationStep:
        if not isinstance(step, dict) or 'op' not in step:
            raise ValueError(f"Step {index}: expected a mapping with an 'op' key")

        op = step['op']
        if op not in OPERATIONS:
            raise ValueError(f"Step {index}: unknown operation {op!r}")

        args = step.get('args', [])
        if not isinstance(args, list):
            args = [args]
        try:
            args = [float(a) for a in args]
        except (TypeError, ValueError):
            raise ValueError(f"Step {index}: arguments of {op!r} must be numbers, got {args!r}")

        origin = None
        if step.get('origin') is not None:
            if not OPERATIONS[op]:
                raise ValueError(f"Step {index}: {op!r} does not take an origin")
            origin = Offset.from_sequence(step['origin'])

        direction = None
        if step.get('direction') is not None:
            if op not in DIRECTIONAL_OPERATIONS:
                raise ValueError(f"Step {index}: {op!r} does not take a direction")
            direction = TextDirection.from_value(step['direction'])

        return OperationStep(op=op, args=args, origin=origin, direction=direction)

    def build(self) -> Mat3D:
        """
        Create the starting state and apply every step.

        Returns:
            New owning Mat3D
        """
        state = Mat3D(matrix=self.matrix, rect=self.rect)
        for index, step in enumerate(self.steps):
            try:
                step.apply(state, self.direction)
            except TypeError as e:
                raise ValueError(f"Step {index}: bad arguments for {step.op!r}: {e}") from e
            logger.debug(f"Applied step {index}: {step.op}({step.args})")
        return state

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'rect': list(self.rect.to_tuple()),
            'direction': self.direction.value,
        }
        if self.matrix is not None:
            data['matrix'] = [float(v) for v in matrix4.flatten(self.matrix)]

        steps = []
        for step in self.steps:
            entry: Dict[str, Any] = {'op': step.op, 'args': list(step.args)}
            if step.origin is not None:
                entry['origin'] = list(step.origin.to_tuple())
            if step.direction is not None:
                entry['direction'] = step.direction.value
            steps.append(entry)
        data['steps'] = steps
        return data

    def to_yaml(self, recipe_path: str) -> None:
        """Save the recipe to a YAML file."""
        with open(recipe_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Transform recipe saved to {recipe_path}")
