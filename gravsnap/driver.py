#!/usr/bin/env python3
"""
Progressive frame driver.

The driver owns the particle grid for the whole run. Frame 0 is rendered with the
initial iteration count; every later frame adds `step` more iterations on top of the
state the previous frame left behind, so frame k shows particles after
initial + k * step cumulative steps.

States
- INITIALIZING: masses, grid and frame 0
- RENDERING: later frames
- DONE: bounded frame count reached
- ABORTED: a sink reported closed at a frame boundary, or a sink failed

Sinks receive each finished Frame once. The pixel buffer is reused for the next
frame, so a sink that needs the pixels later must copy them.
"""
import logging
from enum import Enum
from typing import List, NamedTuple, Optional, Protocol, Sequence, Tuple

import numpy as np

from .classifier import get_field_classifier
from .config import ConfigError, SnapshotConfig
from .data_models import MassLayout
from .grid import ParticleGrid, render_frame
from .layout import MassConfiguration
from .physics import FieldPhysics
from .presets_loader import load_preset

logger = logging.getLogger(__name__)


class DriverState(Enum):
    INITIALIZING = "initializing"
    RENDERING = "rendering"
    DONE = "done"
    ABORTED = "aborted"


class FrameSinkError(RuntimeError):
    """A display or save collaborator failed; the run cannot continue."""


class Frame(NamedTuple):
    index: int
    pixels: np.ndarray
    iterations: int


class FrameSink(Protocol):
    @property
    def closed(self) -> bool: ...

    def emit(self, frame: Frame) -> None: ...


def resolve_scene(config: SnapshotConfig) -> Tuple[MassConfiguration, float]:
    """
    Masses and gravity for a validated config.

    RANDOM layouts are seeded from config.seed; a preset may override gravity.
    """
    if config.layout is MassLayout.PRESET:
        preset = load_preset(config.preset)
        if preset is None:
            raise ConfigError(f"Unknown or malformed preset {config.preset!r}")
        logger.info("Using preset %s (%d masses)", preset.name, len(preset.masses))
        masses = MassConfiguration.from_preset(preset.masses, config.width, config.height,
                                               config.shape_height)
        gravity = preset.gravity if preset.gravity is not None else config.gravity
        return masses, gravity
    rng = np.random.default_rng(config.seed)
    masses = MassConfiguration.derive(config.layout, config.width, config.height,
                                      config.shape_height, rng=rng, count=config.mass_count)
    return masses, config.gravity


class ProgressiveDriver:
    """
    Render a sequence of progressive frames and hand each one to the sinks.

    Args:
        config: validated run configuration.
        sinks: frame consumers; any of them may report closed to abort the run.
        masses: optional pre-built masses (otherwise derived from config).
        gravity: gravity to use with `masses`; defaults to config.gravity.
    """

    def __init__(self, config: SnapshotConfig, sinks: Sequence[FrameSink] = (),
                 masses: Optional[MassConfiguration] = None,
                 gravity: Optional[float] = None):
        self.config = config
        self.sinks: List[FrameSink] = list(sinks)
        self.masses = masses
        self.gravity = gravity
        self.state = DriverState.INITIALIZING
        self.frames_emitted = 0
        self.grid: Optional[ParticleGrid] = None
        self.buffer: Optional[np.ndarray] = None
        self.physics: Optional[FieldPhysics] = None
        self._classifier = get_field_classifier(config.classifier)

    def _initialize(self) -> None:
        cfg = self.config
        if self.masses is None:
            self.masses, self.gravity = resolve_scene(cfg)
        elif self.gravity is None:
            self.gravity = cfg.gravity
        self.physics = FieldPhysics(gravity=self.gravity, dt=cfg.dt, softening=cfg.softening)
        self.grid = ParticleGrid(cfg.width, cfg.height)
        self.buffer = self.grid.new_buffer()
        logger.info("Shape height: %s", cfg.shape_height)
        logger.info("Frames: %s", "unbounded" if cfg.unbounded else cfg.frames)
        logger.info("Base iterations per frame: %d", cfg.initial_iterations)
        logger.info("Iteration increase step per frame: %d", cfg.step)
        logger.info("dt: %f", cfg.dt)
        logger.info("Total size required: %s bytes", f"{self.grid.nbytes:,}")

    def _abort_requested(self) -> bool:
        return any(sink.closed for sink in self.sinks)

    def _emit(self, frame: Frame) -> None:
        for sink in self.sinks:
            try:
                sink.emit(frame)
            except (FrameSinkError, OSError) as exc:
                self.state = DriverState.ABORTED
                logger.error("Frame %d could not be delivered: %s", frame.index, exc)
                if isinstance(exc, FrameSinkError):
                    raise
                raise FrameSinkError(str(exc)) from exc
        self.frames_emitted += 1

    def render_next(self, increment: int) -> Frame:
        """Advance the grid by `increment` steps and classify it into the shared buffer."""
        render_frame(self.grid, self.masses.positions, increment, self.buffer,
                     physics=self.physics, classifier=self._classifier)
        return Frame(self.frames_emitted, self.buffer, self.grid.iterations)

    def run(self) -> DriverState:
        """
        Render until the frame count is reached or a sink aborts.

        Returns:
            DriverState.DONE or DriverState.ABORTED.

        Raises:
            FrameSinkError: a sink failed; state is ABORTED.
        """
        cfg = self.config
        if self.grid is None:
            self._initialize()

        increment = cfg.initial_iterations
        while True:
            if self._abort_requested():
                self.state = DriverState.ABORTED
                logger.info("Window Closed")
                return self.state
            frame = self.render_next(increment)
            self._emit(frame)
            if not cfg.unbounded and self.frames_emitted >= cfg.frames:
                break
            self.state = DriverState.RENDERING
            increment = cfg.step

        self.state = DriverState.DONE
        logger.info("Frame Rendering Complete")
        return self.state
