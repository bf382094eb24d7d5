#!/usr/bin/env python3
"""
Field Physics Engine for Gravity Snapshot

Responsibilities
- Compute softened inverse-square accelerations toward a fixed set of masses for a whole
  field of particles at once.
- Advance the field with the same semi-implicit step as Particle.advance: move with the old
  velocity, kick with the old acceleration, then recompute acceleration at the new position.

Units and conventions
- Positions are in pixels, time in abstract steps of length dt.
- Force law: a = gravity * d / (|d|^2 + softening). This is a visual design choice, not
  Newtonian gravity (the magnitude falls off as 1/r, not 1/r^2).

Numerical notes
- Softening is added to the squared distance, so a particle exactly on a mass sees zero
  acceleration from it instead of a division by zero; nearby it stays bounded by
  gravity / (2 * sqrt(softening)).
- Every operation is written in the same order as Particle.advance so a grid cell and a
  scalar Particle started from the same state stay bit-identical.
- Complexity: O(cells * masses) per step. Masses never feel the particles.

Threading
- Pure compute over arrays owned by the caller. Holds only gravity, dt and softening.
"""

import logging

import numpy as np

from .constants import DEFAULT_DT, DEFAULT_GRAVITY, DEFAULT_SOFTENING

logger = logging.getLogger(__name__)


class FieldPhysics:
    """
    Softened attraction toward fixed masses, applied to arrays of particles.

    The field state is any object exposing float arrays x, y, xv, yv, xa, ya of a common
    shape (ParticleGrid does); they are updated in place.
    """

    def __init__(self, gravity: float = DEFAULT_GRAVITY, dt: float = DEFAULT_DT,
                 softening: float = DEFAULT_SOFTENING):
        """
        Initialize the physics engine.

        Args:
            gravity: force constant
            dt: integration time step
            softening: added to the squared distance; must be > 0
        """
        self.gravity = float(gravity)
        self.dt = float(dt)
        self.set_softening(softening)

    def set_softening(self, softening: float) -> None:
        softening = float(softening)
        if not softening > 0.0:
            raise ValueError(f"softening must be positive, got {softening}")
        self.softening = softening

    def compute_accelerations(self, xs: np.ndarray, ys: np.ndarray,
                              positions: np.ndarray):
        """
        Sum the pull of every mass on every particle.

        Args:
            xs, ys: particle coordinates, any matching shape.
            positions: (n, 2) mass positions.

        Returns:
            (ax, ay) arrays with the shape of xs.
        """
        xacc = np.zeros_like(xs, dtype=float)
        yacc = np.zeros_like(ys, dtype=float)
        for mx, my in positions:
            dx = mx - xs
            dy = my - ys
            f = self.gravity / (dx * dx + dy * dy + self.softening)
            xacc += dx * f
            yacc += dy * f
        return xacc, yacc

    def step(self, state, positions: np.ndarray) -> None:
        """Advance every particle of `state` by one step."""
        dt = self.dt
        state.x += state.xv * dt
        state.y += state.yv * dt
        state.xv += state.xa * dt
        state.yv += state.ya * dt
        state.xa, state.ya = self.compute_accelerations(state.x, state.y, positions)

    def advance(self, state, positions: np.ndarray, steps: int) -> None:
        """
        Advance every particle `steps` times.

        Args:
            state: field with x, y, xv, yv, xa, ya arrays (modified in place).
            positions: (n, 2) mass positions, read only.
            steps: number of integration steps (>= 0).
        """
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}")
        positions = np.asarray(positions, dtype=float)
        for _ in range(steps):
            self.step(state, positions)
