#!/usr/bin/env python3
"""
Frame file output.

FrameSaver is a frame sink that writes every frame to a numbered image file
with pygame. Frame k of a bounded run of N frames is saved as
`<stem>_<k padded to floor(log10(N)) + 1 digits><ext>`; unbounded runs use a
fixed pad width. The image format follows the extension (bmp, png, tga, jpg).
"""
import logging
import math
import os
from datetime import datetime
from typing import Optional

import numpy as np
import pygame

from .constants import DEFAULT_FILENAME, TIMESTAMP_DIR_FORMAT, UNBOUNDED_FRAME_DIGITS
from .config import ConfigError

logger = logging.getLogger(__name__)


def frame_digits(frames: Optional[int]) -> int:
    if frames is None:
        return UNBOUNDED_FRAME_DIGITS
    return int(math.floor(math.log10(max(frames, 1)))) + 1


def numbered_filename(name: str, index: int, digits: int) -> str:
    stem, ext = os.path.splitext(name)
    return f"{stem}_{index:0{digits}d}{ext}"


def resolve_save_directory(save_dir: Optional[str], timestamp_dir: bool,
                           now: Optional[datetime] = None) -> str:
    """
    Validate the save directory and create the timestamped child if requested.

    Raises:
        ConfigError: save_dir does not exist or is not a directory.
    """
    directory = save_dir or "."
    if save_dir:
        if not os.path.exists(directory):
            raise ConfigError(f"Save directory `{directory}` does not exist")
        if not os.path.isdir(directory):
            raise ConfigError(f"`{directory}` is not a directory")
    if timestamp_dir:
        stamp = (now or datetime.now()).strftime(TIMESTAMP_DIR_FORMAT)
        directory = os.path.join(directory, stamp)
        os.makedirs(directory, exist_ok=True)
        logger.info("Saving frames in %s", directory)
    return directory


def buffer_to_surface(pixels: np.ndarray) -> pygame.Surface:
    """(height, width, 3) uint8 buffer to a pygame Surface (pygame indexes x first)."""
    return pygame.surfarray.make_surface(np.ascontiguousarray(pixels.swapaxes(0, 1)))


class FrameSaver:
    """Frame sink that writes each frame to disk."""

    closed = False

    def __init__(self, directory: str = ".", name: str = DEFAULT_FILENAME,
                 frames: Optional[int] = 1):
        self.directory = directory
        self.name = name
        self.digits = frame_digits(frames)
        self.saved = []

    def path_for(self, index: int) -> str:
        return os.path.join(self.directory, numbered_filename(self.name, index, self.digits))

    def emit(self, frame) -> None:
        path = self.path_for(frame.index)
        try:
            pygame.image.save(buffer_to_surface(frame.pixels), path)
        except pygame.error as exc:
            raise OSError(f"Could not save frame {frame.index} to {path}: {exc}") from exc
        self.saved.append(path)
        logger.debug("Saved %s (%d iterations)", path, frame.iterations)
