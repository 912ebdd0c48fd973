"""
Schedule evaluation (CORE LOGIC).

A slide has two windows:
- a daily time-of-day window (Start Time / End Time), re-applied every day
- a date-range window (Launch Start / Launch End) bounding the whole campaign

Both are resolved to absolute instants in the slide's zone (UTC for "GMT"
slides, local wall clock otherwise) and compared against a caller-supplied
"now". Both windows are inclusive on both ends.

Formats:
- dates: D/M/YYYY or DD/MM/YYYY
- times: H:MM:SS AM|PM or HH:MM:SS AM|PM

Everything here is pure: no clock reads, no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional

from screencarousel.config import DEFAULT_WINDOW_YEARS
from screencarousel.errors import MalformedDate, MalformedTime
from screencarousel.model import SlideDescriptor


DATE_RE = re.compile(r"^(0?[1-9]|[1-2][0-9]|3[0-1])/(0?[1-9]|1[0-2])/([0-9]{4})$")
TIME_RE = re.compile(r"^(0?[1-9]|1[0-2]):([0-5][0-9]):([0-5][0-9])\s(AM|PM)$")


# ---------------------------------------------------------------------------
# Validation & parsing
# ---------------------------------------------------------------------------


def validate_date_format(value: Optional[str]) -> None:
    """
    Raise MalformedDate if a non-empty value is not D/M/YYYY.
    Empty values are allowed (they mean "use the default").
    """
    if not value:
        return
    if not DATE_RE.match(value):
        raise MalformedDate(f"Invalid date format: {value!r}")


def validate_time_format(value: Optional[str]) -> None:
    """
    Raise MalformedTime if a non-empty value is not H:MM:SS AM|PM.
    """
    if not value:
        return
    if not TIME_RE.match(value):
        raise MalformedTime(f"Invalid time format: {value!r}")


def parse_date_string(value: str) -> date:
    """
    Parse 'D/M/YYYY' into a date.

    The format check only bounds day to 1-31, so impossible dates such as
    31/2/2026 are rejected here as well.
    """
    match = DATE_RE.match((value or "").strip())
    if not match:
        raise MalformedDate(f"Invalid date format: {value!r}")

    day, month, year = (int(x) for x in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise MalformedDate(f"Invalid date: {value!r} ({exc})") from exc


def format_date_string(value: date) -> str:
    """
    Format a date as 'D/M/YYYY' (no zero padding), the inverse of parse_date_string.
    """
    return f"{value.day}/{value.month}/{value.year:04d}"


def parse_time_string(value: str) -> time:
    """
    Parse 'H:MM:SS AM|PM' into a 24h time.

    12:xx:xx AM is just after midnight, 12:xx:xx PM is just after noon.
    """
    match = TIME_RE.match((value or "").strip())
    if not match:
        raise MalformedTime(f"Invalid time format: {value!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    seconds = int(match.group(3))
    is_pm = match.group(4) == "PM"

    if is_pm and hours < 12:
        hours += 12
    if not is_pm and hours == 12:
        hours = 0

    return time(hours, minutes, seconds)


def is_gmt(timezone_value: Optional[str]) -> bool:
    return bool(timezone_value) and timezone_value.strip().lower() == "gmt"


# ---------------------------------------------------------------------------
# Boundary resolution
# ---------------------------------------------------------------------------


def add_years(moment: datetime, years: int) -> datetime:
    """
    Shift a datetime by whole calendar years (29 Feb falls back to 28 Feb).
    """
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def zone_for(use_utc: bool, local_tz: Optional[tzinfo] = None) -> Optional[tzinfo]:
    """
    Zone a slide is evaluated in. None means the system local zone.
    """
    if use_utc:
        return timezone.utc
    return local_tz


def _localize(now: datetime, zone: Optional[tzinfo], local_tz: Optional[tzinfo]) -> datetime:
    # A naive "now" is wall-clock time in local_tz, or in the system zone
    # when local_tz is None (datetime.astimezone(None) uses the system zone).
    if now.tzinfo is None and local_tz is not None:
        now = now.replace(tzinfo=local_tz)
    return now.astimezone(zone)


@dataclass(frozen=True)
class ScheduleWindow:
    window_start: datetime
    window_end: datetime
    start_instant: datetime
    end_instant: datetime

    def contains(self, now: datetime) -> bool:
        return (
            self.window_start <= now <= self.window_end
            and self.start_instant <= now <= self.end_instant
        )


def resolve_boundaries(
    slide: SlideDescriptor,
    now: datetime,
    local_tz: Optional[tzinfo] = None,
) -> ScheduleWindow:
    """
    Resolve the four boundary instants of a slide relative to "now".

    Absent start values default to now, absent end values to now + 10 years.
    Times of day are placed on today's date in the slide's zone, dates are
    taken at midnight in that zone.
    """
    zone = zone_for(slide.use_utc, local_tz)
    here = _localize(now, zone, local_tz)
    far_future = add_years(here, DEFAULT_WINDOW_YEARS)

    def on_today(t: time) -> datetime:
        return here.replace(hour=t.hour, minute=t.minute, second=t.second, microsecond=0)

    def at_midnight(d: date) -> datetime:
        return datetime.combine(d, time(0, 0), tzinfo=here.tzinfo)

    start_instant = on_today(slide.daily_start_time) if slide.daily_start_time else here
    end_instant = on_today(slide.daily_end_time) if slide.daily_end_time else far_future
    window_start = at_midnight(slide.active_from_date) if slide.active_from_date else here
    window_end = at_midnight(slide.active_until_date) if slide.active_until_date else far_future

    return ScheduleWindow(
        window_start=window_start,
        window_end=window_end,
        start_instant=start_instant,
        end_instant=end_instant,
    )


def is_eligible(
    slide: SlideDescriptor,
    now: datetime,
    local_tz: Optional[tzinfo] = None,
) -> bool:
    """
    True if "now" lies inside both the date-range window and today's time window.
    """
    window = resolve_boundaries(slide, now, local_tz)
    return window.contains(_localize(now, zone_for(slide.use_utc, local_tz), local_tz))
