#!/usr/bin/env python3
"""
Data models for Gravity Snapshot.

This module defines the small value types shared between the layout code, the
physics, the classifier and the interactive probe.

Units and usage
- positions are in pixels; (0, 0) is the top-left corner of the canvas and y grows downward.
- velocity is in pixels per time unit, acceleration in pixels per time unit squared.
- A Particle is owned by exactly one consumer (a grid cell snapshot or the probe) and is
  mutated in place by advance().
"""
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .constants import DEFAULT_GRAVITY, DEFAULT_SOFTENING


class MassLayout(Enum):
    """How the attractor positions are derived from the canvas."""
    TRIANGLE = "triangle"
    LINE = "line"
    RANDOM = "random"
    PRESET = "preset"

    @classmethod
    def parse(cls, value) -> "MassLayout":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown mass layout {value!r} (expected one of: {names})") from None


@dataclass(frozen=True)
class Mass:
    """A fixed attractor point."""
    x: float
    y: float


@dataclass
class Particle:
    """
    A massless test body.

    Fields:
    - x, y: position in pixels
    - xv, yv: velocity
    - xa, ya: acceleration computed at the end of the last step
    """
    x: float = 0.0
    y: float = 0.0
    xv: float = 0.0
    yv: float = 0.0
    xa: float = 0.0
    ya: float = 0.0

    def reset(self, x: float, y: float) -> None:
        """Place the particle at rest at (x, y)."""
        self.x = float(x)
        self.y = float(y)
        self.xv = 0.0
        self.yv = 0.0
        self.xa = 0.0
        self.ya = 0.0

    def advance(self, dt: float, masses: Sequence[Mass],
                gravity: float = DEFAULT_GRAVITY,
                softening: float = DEFAULT_SOFTENING) -> None:
        """
        Advance one integration step.

        Position moves with the old velocity, velocity with the old acceleration,
        then the acceleration is recomputed at the new position. Keep this order:
        FieldPhysics.advance mirrors it elementwise.
        """
        self.x += self.xv * dt
        self.y += self.yv * dt
        self.xv += self.xa * dt
        self.yv += self.ya * dt

        xacc = 0.0
        yacc = 0.0
        for m in masses:
            dx = m.x - self.x
            dy = m.y - self.y
            f = gravity / (dx * dx + dy * dy + softening)
            xacc += dx * f
            yacc += dy * f
        self.xa = xacc
        self.ya = yacc
