# -*- coding: utf-8 -*-
"""Debounced viewport resize notifications."""

import asyncio
from typing import Callable

from src.processors.models import ScreenSize
from src.utils.logger import get_logger

MOBILE_MAX_WIDTH = 768
TABLET_MAX_WIDTH = 1024
DESKTOP_MAX_WIDTH = 1920


def classify_screen(width: int | float | None) -> ScreenSize:
    """Map a viewport width in pixels to a screen size name.

    Args:
        width: Viewport width; None is treated as desktop.

    Returns:
        'mobile', 'tablet', 'desktop' or 'tv'.
    """
    if width is None:
        return "desktop"
    if width < MOBILE_MAX_WIDTH:
        return "mobile"
    if width < TABLET_MAX_WIDTH:
        return "tablet"
    if width < DESKTOP_MAX_WIDTH:
        return "desktop"
    return "tv"


class ResizeCoordinator:
    """Fans out resize events to subscribers after a quiet period.

    Listening is reference counted: it starts with the first subscriber and
    stops when the last one unsubscribes. Callbacks run on the event loop,
    ``delay`` seconds after the last ``notify_resize`` call.
    """

    def __init__(self, delay: float = 0.15, loop: asyncio.AbstractEventLoop | None = None):
        """Initialize resize coordinator.

        Args:
            delay: Debounce delay in seconds.
            loop: Event loop for timers, defaults to the running loop.
        """
        self.delay = delay
        self.loop = loop
        self.logger = get_logger(__name__)
        self.width: int | float | None = None
        self.height: int | float | None = None

        self._callbacks: dict[int, Callable[[], None]] = {}
        self._next_id = 0
        self._timer: asyncio.TimerHandle | None = None
        self._listening = False

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def screen_size(self) -> ScreenSize:
        return classify_screen(self.width)

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Subscribe to debounced resize events.

        Args:
            callback: Zero-argument function; read ``width``/``height`` or
                ``screen_size`` from the coordinator.

        Returns:
            Function that removes the subscription.
        """
        token = self._next_id
        self._next_id += 1
        self._callbacks[token] = callback
        self._listening = True

        def unsubscribe() -> None:
            self._callbacks.pop(token, None)
            if not self._callbacks:
                self._stop_listening()

        return unsubscribe

    def notify_resize(self, width: int | float | None = None, height: int | float | None = None) -> None:
        """Record a resize and (re)start the debounce timer.

        Without an injected or running event loop only the size is recorded.

        Args:
            width: New viewport width in pixels.
            height: New viewport height in pixels.
        """
        if width is not None:
            self.width = width
        if height is not None:
            self.height = height

        if not self._listening:
            return

        loop = self.loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                self.logger.debug("No running event loop, resize notification skipped")
                return

        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._timer = None
        for callback in list(self._callbacks.values()):
            try:
                callback()
            except Exception as e:
                self.logger.error(f"Error in resize callback: {e}")

    def _stop_listening(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._listening = False

    def destroy(self) -> None:
        """Remove every subscriber and cancel a pending notification."""
        self._callbacks.clear()
        self._stop_listening()
