"""
Central data model definitions used across the project.

This module defines the canonical structure of slides and loader results so that:
- the loader, the scheduler and the driver share the same field names
- the slide list stays immutable once loaded
- only the driver owns mutable state (CarouselState)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import List, Optional, Tuple

from screencarousel.config import DEFAULT_DWELL_MILLIS


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class SlideDescriptor:
    """
    One candidate slide, validated and parsed from one feed row.

    The raw_* fields keep the row text verbatim so markup can be rendered
    with the attribute values exactly as the sheet had them.
    """

    media_link: str
    media_type: MediaType
    daily_start_time: Optional[time] = None
    daily_end_time: Optional[time] = None
    active_from_date: Optional[date] = None
    active_until_date: Optional[date] = None
    dwell_millis: Optional[int] = None
    use_utc: bool = False

    raw_start_time: str = ""
    raw_end_time: str = ""
    raw_launch_start: str = ""
    raw_launch_end: str = ""
    raw_duration: str = ""

    @property
    def effective_dwell_millis(self) -> int:
        return self.dwell_millis if self.dwell_millis is not None else DEFAULT_DWELL_MILLIS


@dataclass
class CarouselState:
    """
    Mutable state of one rendered carousel.

    slides never changes after construction; cursor_index is -1 until the
    first slide is shown and is only moved by CarouselDriver.advance().
    """

    slides: Tuple[SlideDescriptor, ...]
    cursor_index: int = -1

    @property
    def current(self) -> Optional[SlideDescriptor]:
        if 0 <= self.cursor_index < len(self.slides):
            return self.slides[self.cursor_index]
        return None


@dataclass(frozen=True)
class SheetSource:
    """
    One sheet referenced from the page's locations table.
    """

    name: str
    path: str


@dataclass
class LoadResult:
    """
    Outcome of loading the slide list from all sheet sources.
    """

    slides: List[SlideDescriptor] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    source_failures: int = 0

    @property
    def no_usable_data(self) -> bool:
        # Empty because something broke, not because nothing is configured.
        return not self.slides and self.source_failures > 0
