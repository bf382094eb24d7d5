#!/usr/bin/env python3
"""
Run configuration for Gravity Snapshot.

SnapshotConfig collects everything a run needs: canvas, mass layout, physics
constants, progressive frame schedule and output options. Front ends (CLI,
control panel) build one, call validate(), and hand it to the driver.
"""
import logging
from dataclasses import dataclass, replace
from typing import Optional

from .classifier import FIELD_CLASSIFIERS
from .constants import (
    DEFAULT_DT,
    DEFAULT_FILENAME,
    DEFAULT_FRAMES,
    DEFAULT_GRAVITY,
    DEFAULT_HEIGHT,
    DEFAULT_INITIAL_ITERATIONS,
    DEFAULT_MASS_COUNT,
    DEFAULT_SHAPE_HEIGHT,
    DEFAULT_SOFTENING,
    DEFAULT_STEP,
    DEFAULT_WIDTH,
)
from .data_models import MassLayout

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Invalid run configuration, detected before any simulation starts."""


@dataclass
class SnapshotConfig:
    """
    Settings for one run.

    Fields:
    - width, height: canvas size in pixels
    - layout, shape_height, mass_count, seed, preset: how the masses are placed
    - gravity, dt, softening: physics constants
    - initial_iterations: steps applied before frame 0
    - step: additional steps per later frame
    - frames: number of frames to emit, None for an unbounded run
    - classifier: "weighted" or "nearest"
    - save, save_dir, name, timestamp_dir: frame file output
    - display: show frames in a window
    - interactive: run the single-particle probe instead of rendering
    """
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    layout: MassLayout = MassLayout.TRIANGLE
    shape_height: float = DEFAULT_SHAPE_HEIGHT
    mass_count: int = DEFAULT_MASS_COUNT
    seed: Optional[int] = None
    preset: Optional[str] = None
    gravity: float = DEFAULT_GRAVITY
    dt: float = DEFAULT_DT
    softening: float = DEFAULT_SOFTENING
    initial_iterations: int = DEFAULT_INITIAL_ITERATIONS
    step: int = DEFAULT_STEP
    frames: Optional[int] = DEFAULT_FRAMES
    classifier: str = "weighted"
    save: bool = True
    save_dir: Optional[str] = None
    name: str = DEFAULT_FILENAME
    timestamp_dir: bool = False
    display: bool = True
    interactive: bool = False

    @property
    def unbounded(self) -> bool:
        return self.frames is None

    def updated(self, **changes) -> "SnapshotConfig":
        return replace(self, **changes)

    def validate(self) -> "SnapshotConfig":
        """
        Check the configuration and normalise the layout field.

        Raises:
            ConfigError: on the first invalid setting.
        """
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"Canvas size must be positive, got {self.width}x{self.height}")
        try:
            self.layout = MassLayout.parse(self.layout)
        except ValueError as exc:
            raise ConfigError(str(exc)) from None
        if self.layout is MassLayout.PRESET and not self.preset:
            raise ConfigError("PRESET layout needs a preset name")
        if self.preset and self.layout is not MassLayout.PRESET:
            self.layout = MassLayout.PRESET
        if self.mass_count < 1:
            raise ConfigError(f"Mass count must be at least 1, got {self.mass_count}")
        if not self.softening > 0:
            raise ConfigError(f"Softening must be positive, got {self.softening}")
        if self.initial_iterations < 0:
            raise ConfigError(f"Initial iterations must be >= 0, got {self.initial_iterations}")
        if self.step < 0:
            raise ConfigError(f"Step must be >= 0, got {self.step}")
        if self.frames is not None and self.frames < 1:
            raise ConfigError(f"Frame count must be at least 1, got {self.frames}")
        if self.classifier not in FIELD_CLASSIFIERS:
            raise ConfigError(
                f"Unknown classifier {self.classifier!r} (expected one of: {', '.join(FIELD_CLASSIFIERS)})"
            )
        if not self.name:
            raise ConfigError("Output file name must not be empty")
        if self.save_dir and not self.save:
            logger.warning("Save directory is set, but so is the no-save flag. Output will not be saved!")
        return self
