"""
Carousel driver.

Holds the slide list and the cursor, picks the next eligible slide and keeps
exactly one completion trigger alive for the slide on screen:

    IDLE --advance()--> ADVANCING --> DISPLAYING_IMAGE --(dwell timer / error)--> advance()
                                  `-> DISPLAYING_VIDEO --(ended / error)--------> advance()
                                  `-> IDLE (nothing eligible, re-check later)

Every display gets a new generation number. Completion callbacks carry the
generation they were created for; a callback from an older generation is
ignored, so a late timer or a duplicate media event never advances twice.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone, tzinfo
from enum import Enum
from functools import partial
from typing import Callable, Iterable, Optional, Protocol

from screencarousel.config import DEFAULT_IDLE_RECHECK_MILLIS
from screencarousel.model import CarouselState, MediaType, SlideDescriptor
from screencarousel.schedule import is_eligible

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> Cancellable: ...


class Renderer(Protocol):
    """
    Puts a slide on screen.

    show() must call on_complete when a video ends or when showing the slide
    fails. Image dwell is timed by the driver, not by the renderer.
    """

    def show(self, slide: SlideDescriptor, on_complete: Callable[[], None]) -> None: ...

    def clear(self) -> None: ...


class TimerScheduler:
    """
    Scheduler backed by one daemon threading.Timer per call.
    """

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, delay_seconds), callback)
        timer.daemon = True
        timer.start()
        return timer


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


class DriverPhase(str, Enum):
    IDLE = "idle"
    ADVANCING = "advancing"
    DISPLAYING_IMAGE = "displaying_image"
    DISPLAYING_VIDEO = "displaying_video"


class CarouselDriver:
    def __init__(
        self,
        slides: Iterable[SlideDescriptor],
        renderer: Renderer,
        scheduler: Scheduler,
        clock: Callable[[], datetime] = utc_now,
        local_tz: Optional[tzinfo] = None,
        idle_recheck_millis: int = DEFAULT_IDLE_RECHECK_MILLIS,
    ) -> None:
        self.state = CarouselState(slides=tuple(slides))
        self.phase = DriverPhase.IDLE
        self.renderer = renderer
        self.scheduler = scheduler
        self.clock = clock
        self.local_tz = local_tz
        self.idle_recheck_millis = idle_recheck_millis

        self._lock = threading.RLock()
        self._generation = 0
        self._pending: Optional[Cancellable] = None
        self._in_advance = False

    @property
    def current_slide(self) -> Optional[SlideDescriptor]:
        return self.state.current

    def start(self) -> Optional[int]:
        """
        Show the first eligible slide. Does nothing for an empty deck.
        """
        if not self.state.slides:
            logger.info("Carousel has no slides, staying idle")
            return None
        return self.advance()

    def stop(self) -> None:
        """
        Cancel the pending trigger and invalidate all outstanding callbacks.
        """
        with self._lock:
            self._generation += 1
            self._cancel_pending()
            self.phase = DriverPhase.IDLE

    def find_next_eligible(self, now: datetime) -> Optional[int]:
        """
        Index of the first eligible slide after the cursor, wrapping around.

        At most len(slides) candidates are checked (the current slide last),
        None means no slide is eligible at "now".
        """
        slides = self.state.slides
        count = len(slides)
        for step in range(1, count + 1):
            candidate = (self.state.cursor_index + step) % count
            if is_eligible(slides[candidate], now, self.local_tz):
                return candidate
            logger.debug("Slide %d is not eligible at %s", candidate, now.isoformat())
        return None

    def advance(self) -> Optional[int]:
        """
        Move to the next eligible slide and schedule its completion.

        Returns the new cursor index, or None if nothing is eligible (the
        display is cleared and a re-check is scheduled).
        """
        with self._lock:
            if not self.state.slides:
                return None
            self._in_advance = True
            try:
                return self._advance_locked()
            finally:
                self._in_advance = False

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    def _advance_locked(self) -> Optional[int]:
        self._generation += 1
        self._cancel_pending()
        self.phase = DriverPhase.ADVANCING
        on_complete = partial(self._on_complete, self._generation)

        index = self.find_next_eligible(self.clock())
        if index is None:
            self.phase = DriverPhase.IDLE
            logger.info(
                "No eligible slide among %d, re-checking in %d ms",
                len(self.state.slides),
                self.idle_recheck_millis,
            )
            self.renderer.clear()
            self._pending = self.scheduler.call_later(self.idle_recheck_millis / 1000, on_complete)
            return None

        self.state.cursor_index = index
        slide = self.state.slides[index]
        logger.info("Showing slide %d/%d: %s", index + 1, len(self.state.slides), slide.media_link)

        if slide.media_type is MediaType.VIDEO:
            self.phase = DriverPhase.DISPLAYING_VIDEO
        else:
            self.phase = DriverPhase.DISPLAYING_IMAGE
            self._pending = self.scheduler.call_later(slide.effective_dwell_millis / 1000, on_complete)

        self.renderer.show(slide, on_complete)
        return index

    def _on_complete(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Ignoring stale completion signal (generation %d)", generation)
                return
            if self._in_advance:
                # Signalled from inside renderer.show(): hop through the
                # scheduler instead of recursing.
                self._cancel_pending()
                self._pending = self.scheduler.call_later(0, partial(self._on_complete, generation))
                return
            self.advance()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
