#!/usr/bin/env python3
"""
Gravity Snapshot application entry point.

What this program does
- Places a particle at rest on every pixel of the canvas and lets each one fall toward a
  small set of fixed masses under a softened attraction.
- After the initial iteration count, every particle is colored by how close it is to each
  mass; later frames add more iterations on top, so an animation of the basins of
  attraction sharpens frame by frame.
- Frames are shown in a pygame window and saved as numbered image files.

Running
1) Install dependencies: `pip install -e .`
2) Render: `python gravity_snapshot.py --frames 50 --step 10`
3) Explore a single particle: `python gravity_snapshot.py --interactive`
4) Use the control panel: `python gravity_snapshot.py --panel`

Closing the window stops the run at the next frame boundary.
"""
import sys

from gravsnap.cli import main

if __name__ == "__main__":
    sys.exit(main())
