#!/usr/bin/env python3
"""
Mass layouts for Gravity Snapshot.

A layout is a pure function of the canvas size, the shape height and (for
RANDOM only) an explicitly supplied numpy Generator. Nothing here reads global
state, so the same inputs always give the same masses.

Built-in layouts
- TRIANGLE: isosceles triangle centred on the canvas; apex first, then the
  left and right base vertices.
- LINE: three masses on the horizontal mid-line, centre first.
- RANDOM: `count` masses at uniformly drawn integer pixel positions.
- PRESET: masses given as canvas fractions by a JSON preset (see presets_loader).
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .constants import DEFAULT_MASS_COUNT
from .data_models import Mass, MassLayout


def triangle_layout(width: int, height: int, shape_height: float) -> Tuple[Mass, ...]:
    mid_w = width / 2.0
    mid_h = height / 2.0
    third = shape_height / 3.0
    half = shape_height / 2.0
    return (
        Mass(mid_w, mid_h - 2.0 * third),
        Mass(mid_w - half, mid_h + third),
        Mass(mid_w + half, mid_h + third),
    )


def line_layout(width: int, height: int, shape_height: float) -> Tuple[Mass, ...]:
    mid_w = width / 2.0
    mid_h = height / 2.0
    half = shape_height / 2.0
    return (
        Mass(mid_w, mid_h),
        Mass(mid_w - half, mid_h),
        Mass(mid_w + half, mid_h),
    )


def random_layout(width: int, height: int, rng: np.random.Generator,
                  count: int = DEFAULT_MASS_COUNT) -> Tuple[Mass, ...]:
    """Draw all x coordinates first, then all y coordinates."""
    xs = rng.integers(0, width, size=count)
    ys = rng.integers(0, height, size=count)
    return tuple(Mass(float(x), float(y)) for x, y in zip(xs, ys))


def derive_layout(kind, width: int, height: int, shape_height: float,
                  rng: Optional[np.random.Generator] = None,
                  count: int = DEFAULT_MASS_COUNT) -> Tuple[Mass, ...]:
    """
    Compute the mass positions for a built-in layout.

    A shape height at or beyond the canvas size is accepted; the masses simply
    land on or past the edges.

    Args:
        kind: MassLayout (or its string value) other than PRESET.
        width, height: canvas size in pixels.
        shape_height: vertical extent of the triangle / length of the line.
        rng: entropy source, required for RANDOM.
        count: number of masses for RANDOM.

    Returns:
        Tuple of Mass in layout order.
    """
    kind = MassLayout.parse(kind)
    if kind is MassLayout.TRIANGLE:
        return triangle_layout(width, height, shape_height)
    if kind is MassLayout.LINE:
        return line_layout(width, height, shape_height)
    if kind is MassLayout.RANDOM:
        if rng is None:
            raise ValueError("RANDOM layout requires an explicit random generator")
        if count < 1:
            raise ValueError("RANDOM layout needs at least one mass")
        return random_layout(width, height, rng, count)
    raise ValueError(f"{kind.name} layout has no derivation rule; use MassConfiguration.from_preset")


@dataclass(frozen=True)
class MassConfiguration:
    """
    The attractors for one run.

    Passed explicitly to everything that needs the masses; never stored at
    module level.
    """
    masses: Tuple[Mass, ...]
    layout: MassLayout
    shape_height: float

    def __post_init__(self):
        if not self.masses:
            raise ValueError("a mass configuration needs at least one mass")

    @classmethod
    def derive(cls, kind, width: int, height: int, shape_height: float,
               rng: Optional[np.random.Generator] = None,
               count: int = DEFAULT_MASS_COUNT) -> "MassConfiguration":
        kind = MassLayout.parse(kind)
        masses = derive_layout(kind, width, height, shape_height, rng=rng, count=count)
        return cls(masses=masses, layout=kind, shape_height=float(shape_height))

    @classmethod
    def from_preset(cls, fractions: Sequence[Tuple[float, float]], width: int, height: int,
                    shape_height: float = 0.0) -> "MassConfiguration":
        """Scale (fx, fy) canvas fractions to pixel positions."""
        masses = tuple(Mass(float(fx) * width, float(fy) * height) for fx, fy in fractions)
        return cls(masses=masses, layout=MassLayout.PRESET, shape_height=float(shape_height))

    @property
    def positions(self) -> np.ndarray:
        """(n, 2) float array of mass positions, in layout order."""
        return np.array([(m.x, m.y) for m in self.masses], dtype=float)

    def __len__(self) -> int:
        return len(self.masses)

    def __iter__(self):
        return iter(self.masses)
