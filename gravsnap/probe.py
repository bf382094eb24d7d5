#!/usr/bin/env python3
"""
Interactive single-particle probe.

Click anywhere in the window to drop a particle at rest under the cursor and
watch it fall among the masses, one integration step per displayed frame. The
particle is drawn white; masses are drawn in their palette colors. Clicking
again resets the particle at the new cursor position.

ProbeSession holds the simulation side (one Particle, the masses and the
physics constants) and has no pygame dependency; run_interactive is the thin
pygame loop around it.
"""
import logging
from typing import Sequence, Tuple

import pygame

from .classifier import POINT_CLASSIFIERS, flat_palette
from .constants import (
    BACKGROUND_COLOR,
    DEFAULT_DT,
    DEFAULT_GRAVITY,
    DEFAULT_SOFTENING,
    MASS_MARKER_RADIUS,
    PROBE_COLOR,
    PROBE_FPS,
    PROBE_MARKER_RADIUS,
    WINDOW_TITLE,
)
from .data_models import Mass, Particle
from .utils import clamp

logger = logging.getLogger(__name__)


class ProbeSession:
    """One particle stepped against a fixed set of masses."""

    def __init__(self, masses: Sequence[Mass], gravity: float = DEFAULT_GRAVITY,
                 dt: float = DEFAULT_DT, softening: float = DEFAULT_SOFTENING,
                 classifier: str = "weighted"):
        self.masses = tuple(masses)
        self.gravity = gravity
        self.dt = dt
        self.softening = softening
        self._classify = POINT_CLASSIFIERS[classifier]
        self.particle = Particle()
        self.active = False
        self.steps = 0

    def reset(self, x: float, y: float) -> None:
        self.particle.reset(x, y)
        self.active = True
        self.steps = 0

    def step(self, count: int = 1) -> None:
        if not self.active:
            return
        for _ in range(count):
            self.particle.advance(self.dt, self.masses, self.gravity, self.softening)
        self.steps += count

    def color(self) -> Tuple[int, int, int]:
        """Color the particle's current position would get in a rendered frame."""
        return self._classify(self.particle.x, self.particle.y, self.masses)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.particle.x, self.particle.y)


def _draw(surface, session: ProbeSession, palette) -> None:
    surface.fill(BACKGROUND_COLOR)
    for mass, color in zip(session.masses, palette):
        pygame.draw.circle(surface, tuple(int(c) for c in color),
                           (int(mass.x), int(mass.y)), MASS_MARKER_RADIUS)
    if session.active:
        w, h = surface.get_size()
        # pygame rejects huge coordinates; keep the marker just off-canvas
        px = int(clamp(session.particle.x, -PROBE_MARKER_RADIUS, w + PROBE_MARKER_RADIUS))
        py = int(clamp(session.particle.y, -PROBE_MARKER_RADIUS, h + PROBE_MARKER_RADIUS))
        pygame.draw.circle(surface, PROBE_COLOR, (px, py), PROBE_MARKER_RADIUS)


def run_interactive(session: ProbeSession, width: int, height: int) -> None:
    """Run the probe window until it is closed."""
    pygame.init()
    pygame.display.set_caption(f"{WINDOW_TITLE} - interactive")
    surface = pygame.display.set_mode((width, height))
    clock = pygame.time.Clock()
    palette = flat_palette(len(session.masses))
    running = True
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    session.reset(*event.pos)
                    logger.debug("Probe reset at %s", event.pos)
            session.step()
            _draw(surface, session, palette)
            pygame.display.flip()
            clock.tick(PROBE_FPS)
    finally:
        logger.info("Window Closed")
        pygame.quit()
