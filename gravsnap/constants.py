#!/usr/bin/env python3
"""
Shared constants for Gravity Snapshot (pixel units throughout).

The CLI, the control panel and the engine all take their defaults from here.
"""

# Canvas
DEFAULT_WIDTH = 500
DEFAULT_HEIGHT = 500

# Physics controls
DEFAULT_GRAVITY = 30.0
DEFAULT_DT = 0.1
DEFAULT_SOFTENING = 5.0  # px^2; added to d^2 so a particle sitting on a mass stays finite

# Mass layout
DEFAULT_SHAPE_HEIGHT = 200
DEFAULT_MASS_COUNT = 3

# Progressive rendering
DEFAULT_INITIAL_ITERATIONS = 100
DEFAULT_STEP = 10
DEFAULT_FRAMES = 1
UNBOUNDED_FRAME_DIGITS = 6

# Output
DEFAULT_FILENAME = "gravity-snapshot.bmp"
TIMESTAMP_DIR_FORMAT = "%Y-%m-%d %H-%M-%S"
WINDOW_TITLE = "Gravity Snapshot"

# Flat classifier palette, one color per mass
MASS_COLORS = (
    (167, 38, 8),
    (122, 179, 131),
    (118, 120, 219),
)

# Interactive probe
MASS_MARKER_RADIUS = 15
PROBE_MARKER_RADIUS = 5
PROBE_COLOR = (255, 255, 255)
BACKGROUND_COLOR = (0, 0, 0)
PROBE_FPS = 60
