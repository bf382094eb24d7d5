#!/usr/bin/env python3
"""
Particle grid and frame renderer.

The grid holds one particle per output pixel as six (height, width) float arrays
(row-major, so cell (col, row) is flat index row * width + col). Particles start at
rest on their own pixel coordinates and carry their state forward from frame to frame;
the renderer only ever adds steps, which is what makes frames progressive.
"""
import logging
from typing import Callable, Optional

import numpy as np

from .classifier import classify_field
from .data_models import Particle
from .physics import FieldPhysics

logger = logging.getLogger(__name__)

STATE_FIELDS = ("x", "y", "xv", "yv", "xa", "ya")


class ParticleGrid:
    """
    One particle per pixel of a width x height canvas.

    Attributes:
        width, height: fixed for the lifetime of the grid.
        x, y, xv, yv, xa, ya: float arrays of shape (height, width).
        iterations: integration steps applied to every particle so far.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"grid size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.reset()

    @property
    def shape(self):
        return (self.height, self.width)

    @property
    def nbytes(self) -> int:
        return sum(getattr(self, name).nbytes for name in STATE_FIELDS)

    def reset(self) -> None:
        """Put every particle back at rest on its pixel coordinate."""
        self.y, self.x = np.indices(self.shape, dtype=float)
        self.xv = np.zeros(self.shape)
        self.yv = np.zeros(self.shape)
        self.xa = np.zeros(self.shape)
        self.ya = np.zeros(self.shape)
        self.iterations = 0

    def _check_cell(self, col: int, row: int) -> None:
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise IndexError(f"cell ({col}, {row}) outside {self.width}x{self.height} grid")

    def particle(self, col: int, row: int) -> Particle:
        """Snapshot of the particle owned by cell (col, row)."""
        self._check_cell(col, row)
        return Particle(*(float(getattr(self, name)[row, col]) for name in STATE_FIELDS))

    def set_particle(self, col: int, row: int, particle: Particle) -> None:
        self._check_cell(col, row)
        for name in STATE_FIELDS:
            getattr(self, name)[row, col] = getattr(particle, name)

    def snapshot(self) -> np.ndarray:
        """Copy of the full state as a (6, height, width) array."""
        return np.stack([getattr(self, name) for name in STATE_FIELDS])

    def new_buffer(self) -> np.ndarray:
        return np.zeros(self.shape + (3,), dtype=np.uint8)


def render_frame(grid: ParticleGrid, positions: np.ndarray, step_increment: int,
                 output: np.ndarray, physics: Optional[FieldPhysics] = None,
                 classifier: Callable[..., np.ndarray] = classify_field) -> np.ndarray:
    """
    Advance every cell `step_increment` steps, then classify it into `output`.

    Args:
        grid: particle grid, mutated in place.
        positions: (n, 2) mass positions.
        step_increment: additional steps for this frame (>= 0).
        output: uint8 buffer of shape (height, width, 3), overwritten.
        physics: integration settings; defaults to FieldPhysics().
        classifier: field classifier from classifier.FIELD_CLASSIFIERS.

    Returns:
        output
    """
    expected = grid.shape + (3,)
    if output.shape != expected:
        raise ValueError(f"output buffer has shape {output.shape}, expected {expected}")
    if physics is None:
        physics = FieldPhysics()

    physics.advance(grid, positions, step_increment)
    grid.iterations += step_increment
    classifier(grid.x, grid.y, positions, out=output)
    logger.debug("Rendered frame at %d cumulative iterations", grid.iterations)
    return output
