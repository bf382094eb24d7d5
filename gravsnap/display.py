#!/usr/bin/env python3
"""
Pygame display sink.

Shows every finished frame in a window the size of the canvas. Closing the
window (or setting the optional stop event from another thread) is the abort
signal: `closed` turns True and the driver stops at the next frame boundary.
Events are only pumped between frames, so the window is unresponsive while a
frame is integrating.
"""
import logging
import threading
from typing import Optional

import pygame

from .constants import WINDOW_TITLE
from .driver import FrameSinkError
from .storage import buffer_to_surface

logger = logging.getLogger(__name__)


class PygameDisplay:
    """Frame sink backed by a pygame window."""

    def __init__(self, width: int, height: int, title: str = WINDOW_TITLE,
                 stop_event: Optional[threading.Event] = None):
        try:
            pygame.init()
            pygame.display.set_caption(title)
            self.surface = pygame.display.set_mode((width, height))
            self.surface.fill((0, 0, 0))
            pygame.display.flip()
        except pygame.error as exc:
            raise FrameSinkError(f"Could not open the display: {exc}") from exc
        self.stop_event = stop_event
        self._closed = False

    def handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._closed = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self._closed = True

    @property
    def closed(self) -> bool:
        if not self._closed:
            self.handle_events()
        if self.stop_event is not None and self.stop_event.is_set():
            self._closed = True
        return self._closed

    def emit(self, frame) -> None:
        try:
            self.surface.blit(buffer_to_surface(frame.pixels), (0, 0))
            pygame.display.set_caption(f"{WINDOW_TITLE} - frame {frame.index} ({frame.iterations} iterations)")
            pygame.display.flip()
        except pygame.error as exc:
            raise OSError(f"Display failed on frame {frame.index}: {exc}") from exc
        self.handle_events()

    def wait_until_closed(self) -> None:
        """Keep the last frame on screen until the user closes the window."""
        clock = pygame.time.Clock()
        while not self.closed:
            clock.tick(30)

    def close(self) -> None:
        pygame.display.quit()
