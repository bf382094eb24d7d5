#!/usr/bin/env python3
"""
Color classification for Gravity Snapshot.

Two classifiers turn a particle position into an RGB pixel:

- weighted (default): the nearest mass's channel saturates at 255 and every
  other mass's channel is 255 * (total - d_i) / total, where total is the sum
  of the distances to all masses except the nearest. With three masses each
  mass owns one of R, G, B.
- nearest: flat palette color of the nearest mass by Manhattan distance.

Each classifier has a scalar form (used by the interactive probe) and a
vectorised `*_field` form (used by the frame renderer). Both forms perform the
same float operations in the same order and give identical pixels.

Mass count vs. channel count
- 3 masses: one channel per mass.
- 1 or 2 masses: one channel per mass, the remaining channels are 0.
- more than 3: each mass gets an evenly spaced fully saturated hue, and the
  pixel is the weight-averaged hue color scaled to 255.
"""
import colorsys
import math
from typing import Dict, Callable, Sequence, Tuple

import numpy as np

from .constants import MASS_COLORS
from .data_models import Mass

RGB = Tuple[int, int, int]
CHANNELS = 3


def hue_palette(n: int) -> np.ndarray:
    """(n, 3) array of evenly spaced saturated hues in [0, 1]."""
    return np.array([colorsys.hsv_to_rgb(i / n, 1.0, 1.0) for i in range(n)], dtype=float)


def flat_palette(n: int) -> np.ndarray:
    """(n, 3) uint8 palette: the fixed mass colors, then hue colors for any extra masses."""
    colors = [MASS_COLORS[i] for i in range(min(n, len(MASS_COLORS)))]
    if n > len(MASS_COLORS):
        extra = hue_palette(n)[len(MASS_COLORS):]
        colors.extend(tuple(int(round(c * 255)) for c in rgb) for rgb in extra)
    return np.array(colors, dtype=np.uint8).reshape(n, CHANNELS)


def _weights_to_rgb(weights: Sequence[float]) -> RGB:
    n = len(weights)
    if n <= CHANNELS:
        padded = list(weights) + [0] * (CHANNELS - n)
        return (int(padded[0]), int(padded[1]), int(padded[2]))
    palette = hue_palette(n)
    # same accumulation order as classify_field
    blend = sum(w * palette[i] for i, w in enumerate(weights))
    rgb = np.rint(255.0 * blend / sum(weights))
    return (int(rgb[0]), int(rgb[1]), int(rgb[2]))


def mass_weights(x: float, y: float, masses: Sequence[Mass]):
    """Per-mass weights in [0, 255]; the nearest mass gets 255."""
    dists = []
    for m in masses:
        dx = x - m.x
        dy = y - m.y
        dists.append(math.sqrt(dx * dx + dy * dy))
    nearest = min(range(len(dists)), key=dists.__getitem__)
    total = sum(d for i, d in enumerate(dists) if i != nearest)

    weights = []
    for i, d in enumerate(dists):
        if i == nearest:
            weights.append(255)
        elif total > 0:
            weights.append(round(255.0 * (total - d) / total))
        else:
            weights.append(0)
    return weights


def classify(x: float, y: float, masses: Sequence[Mass]) -> RGB:
    """Weighted-nearest color of a single position."""
    return _weights_to_rgb(mass_weights(x, y, masses))


def classify_field(xs: np.ndarray, ys: np.ndarray, positions: np.ndarray,
                   out: np.ndarray = None) -> np.ndarray:
    """
    Weighted-nearest colors for a whole field.

    Args:
        xs, ys: particle coordinates of a common shape S.
        positions: (n, 2) mass positions.
        out: optional uint8 array of shape S + (3,) to write into.

    Returns:
        uint8 array of shape S + (3,).
    """
    positions = np.asarray(positions, dtype=float)
    n = positions.shape[0]
    dists = np.empty(xs.shape + (n,), dtype=float)
    for i, (mx, my) in enumerate(positions):
        dx = xs - mx
        dy = ys - my
        dists[..., i] = np.sqrt(dx * dx + dy * dy)

    nearest = np.argmin(dists, axis=-1)
    is_nearest = np.arange(n) == nearest[..., None]

    total = np.zeros(xs.shape, dtype=float)
    for i in range(n):
        total += np.where(is_nearest[..., i], 0.0, dists[..., i])

    degenerate = ~(total > 0)
    safe_total = np.where(degenerate, 1.0, total)[..., None]
    scaled = np.rint(255.0 * (safe_total - dists) / safe_total)
    weights = np.where(is_nearest, 255.0, np.where(degenerate[..., None], 0.0, scaled))

    if n <= CHANNELS:
        rgb = np.zeros(xs.shape + (CHANNELS,), dtype=float)
        rgb[..., :n] = weights
    else:
        palette = hue_palette(n)
        blend = sum(weights[..., i, None] * palette[i] for i in range(n))
        norm = sum(weights[..., i] for i in range(n))[..., None]
        rgb = np.rint(255.0 * blend / norm)

    rgb = np.clip(np.nan_to_num(rgb), 0, 255)
    if out is None:
        return rgb.astype(np.uint8)
    out[...] = rgb
    return out


def nearest_index(x: float, y: float, masses: Sequence[Mass]) -> int:
    """Index of the nearest mass by Manhattan distance (first wins ties)."""
    dists = [abs(x - m.x) + abs(y - m.y) for m in masses]
    return min(range(len(dists)), key=dists.__getitem__)


def classify_nearest(x: float, y: float, masses: Sequence[Mass]) -> RGB:
    """Flat palette color of the nearest mass."""
    color = flat_palette(len(masses))[nearest_index(x, y, masses)]
    return (int(color[0]), int(color[1]), int(color[2]))


def classify_nearest_field(xs: np.ndarray, ys: np.ndarray, positions: np.ndarray,
                           out: np.ndarray = None) -> np.ndarray:
    positions = np.asarray(positions, dtype=float)
    dists = np.stack([np.abs(xs - mx) + np.abs(ys - my) for mx, my in positions], axis=-1)
    rgb = flat_palette(positions.shape[0])[np.argmin(dists, axis=-1)]
    if out is None:
        return rgb
    out[...] = rgb
    return out


FieldClassifier = Callable[..., np.ndarray]

FIELD_CLASSIFIERS: Dict[str, FieldClassifier] = {
    "weighted": classify_field,
    "nearest": classify_nearest_field,
}

POINT_CLASSIFIERS = {
    "weighted": classify,
    "nearest": classify_nearest,
}


def get_field_classifier(name: str) -> FieldClassifier:
    try:
        return FIELD_CLASSIFIERS[name]
    except KeyError:
        raise ValueError(f"Unknown classifier {name!r} (expected one of: {', '.join(FIELD_CLASSIFIERS)})") from None
