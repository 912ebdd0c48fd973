"""
Domain errors for the carousel.

Row-level errors (bad date, bad time, unsupported media, any other broken row)
drop a single slide. Feed errors (fetch or parse of a whole sheet) drop a whole
source. Callers catch at those two boundaries.
"""

from __future__ import annotations


class CarouselError(Exception):
    """Base class for all carousel errors."""


class ScheduleFormatError(CarouselError, ValueError):
    """A schedule field does not match its expected format."""


class MalformedDate(ScheduleFormatError):
    """Raised for a date that is not D/M/YYYY."""


class MalformedTime(ScheduleFormatError):
    """Raised for a time that is not H:MM:SS AM|PM."""


class UnsupportedMediaExtension(CarouselError, ValueError):
    """Raised when a link is neither a known image nor a known video."""


class RowProcessingFailure(CarouselError):
    """Raised for any other problem with a single feed row."""


class FeedError(CarouselError):
    """Base class for errors that invalidate a whole sheet."""


class FeedFetchFailure(FeedError):
    """The sheet (or page) could not be fetched."""


class FeedParseFailure(FeedError):
    """The fetched document is not a usable sheet."""
