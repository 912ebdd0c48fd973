"""
Unit tests for schedule evaluation.

Rules covered here:
- D/M/YYYY dates and H:MM:SS AM|PM times, malformed input raises
- absent windows default to "now" .. "now + 10 years"
- both windows are inclusive at their boundaries
- GMT slides compare in UTC, other slides in local wall-clock time
- a naive "now" is wall-clock time in local_tz
"""

import unittest
from datetime import date, datetime, time, timedelta, timezone

from screencarousel.errors import MalformedDate, MalformedTime
from screencarousel.model import MediaType, SlideDescriptor
from screencarousel.schedule import (
    add_years,
    format_date_string,
    is_eligible,
    is_gmt,
    parse_date_string,
    parse_time_string,
    resolve_boundaries,
    validate_date_format,
    validate_time_format,
)

UTC = timezone.utc
PLUS_FIVE = timezone(timedelta(hours=5))


def make_slide(**kwargs) -> SlideDescriptor:
    return SlideDescriptor(media_link="https://cdn.example.com/a.png", media_type=MediaType.IMAGE, **kwargs)


class TestParsing(unittest.TestCase):
    def test_time_am_pm(self) -> None:
        self.assertEqual(parse_time_string("9:05:07 AM"), time(9, 5, 7))
        self.assertEqual(parse_time_string("09:05:07 PM"), time(21, 5, 7))
        self.assertEqual(parse_time_string("12:00:00 AM"), time(0, 0, 0))
        self.assertEqual(parse_time_string("12:30:00 PM"), time(12, 30, 0))

    def test_malformed_time_raises(self) -> None:
        for bad in ("13:00:00 PM", "9:00 AM", "9:00:00", "0:10:00 AM", "9:60:00 AM", "nine o'clock"):
            with self.subTest(bad=bad):
                with self.assertRaises(MalformedTime):
                    parse_time_string(bad)
                with self.assertRaises(MalformedTime):
                    validate_time_format(bad)

    def test_date_formats(self) -> None:
        self.assertEqual(parse_date_string("1/2/2026"), date(2026, 2, 1))
        self.assertEqual(parse_date_string("01/02/2026"), date(2026, 2, 1))
        self.assertEqual(parse_date_string("31/12/2026"), date(2026, 12, 31))

    def test_malformed_date_raises(self) -> None:
        for bad in ("2026-01-01", "32/1/2026", "1/13/2026", "1/1/26", "31/2/2026"):
            with self.subTest(bad=bad):
                with self.assertRaises(MalformedDate):
                    parse_date_string(bad)

    def test_empty_values_pass_validation(self) -> None:
        validate_date_format("")
        validate_date_format(None)
        validate_time_format("")
        validate_time_format(None)

    def test_date_string_roundtrip(self) -> None:
        for text in ("1/1/2026", "29/2/2028", "15/10/1999", "31/12/2035"):
            with self.subTest(text=text):
                self.assertEqual(format_date_string(parse_date_string(text)), text)
        # zero-padded input parses to the same calendar date
        self.assertEqual(parse_date_string(format_date_string(parse_date_string("05/03/2027"))), date(2027, 3, 5))

    def test_is_gmt_case_insensitive(self) -> None:
        self.assertTrue(is_gmt("GMT"))
        self.assertTrue(is_gmt("gmt"))
        self.assertTrue(is_gmt(" Gmt "))
        self.assertFalse(is_gmt("CET"))
        self.assertFalse(is_gmt(""))
        self.assertFalse(is_gmt(None))

    def test_add_years_leap_day(self) -> None:
        self.assertEqual(add_years(datetime(2028, 2, 29, tzinfo=UTC), 10), datetime(2038, 2, 28, tzinfo=UTC))


class TestEligibility(unittest.TestCase):
    def test_no_windows_is_always_eligible(self) -> None:
        base = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)
        slide = make_slide()
        for years in range(-9, 10):
            now = add_years(base, years)
            with self.subTest(now=now):
                self.assertTrue(is_eligible(slide, now, local_tz=UTC))

    def test_default_window_end_is_ten_years_ahead(self) -> None:
        now = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)
        window = resolve_boundaries(make_slide(use_utc=True), now)
        self.assertEqual(window.window_start, now)
        self.assertEqual(window.start_instant, now)
        self.assertEqual(window.window_end, datetime(2036, 10, 19, 12, 0, 0, tzinfo=UTC))
        self.assertEqual(window.end_instant, datetime(2036, 10, 19, 12, 0, 0, tzinfo=UTC))

    def test_daily_window_is_inclusive(self) -> None:
        slide = make_slide(daily_start_time=time(9, 0, 0), daily_end_time=time(17, 0, 0), use_utc=True)
        day = datetime(2026, 10, 19, tzinfo=UTC)

        self.assertTrue(is_eligible(slide, day.replace(hour=9)))
        self.assertTrue(is_eligible(slide, day.replace(hour=17)))
        self.assertTrue(is_eligible(slide, day.replace(hour=12, minute=30)))
        self.assertFalse(is_eligible(slide, day.replace(hour=8, minute=59, second=59)))
        self.assertFalse(is_eligible(slide, day.replace(hour=17, second=1)))

    def test_daily_window_recurs_every_day(self) -> None:
        slide = make_slide(daily_start_time=time(9, 0, 0), daily_end_time=time(17, 0, 0), use_utc=True)
        for day in (1, 15, 28):
            with self.subTest(day=day):
                self.assertTrue(is_eligible(slide, datetime(2027, 3, day, 10, 0, 0, tzinfo=UTC)))

    def test_start_time_equal_to_now_is_eligible(self) -> None:
        now = datetime(2026, 10, 19, 14, 22, 5, tzinfo=UTC)
        slide = make_slide(daily_start_time=now.time(), use_utc=True)
        self.assertTrue(is_eligible(slide, now))

    def test_date_range(self) -> None:
        now = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)
        expired = make_slide(active_until_date=date(2026, 10, 1), use_utc=True)
        upcoming = make_slide(active_from_date=date(2026, 11, 1), use_utc=True)
        running = make_slide(active_from_date=date(2026, 10, 19), active_until_date=date(2026, 10, 20), use_utc=True)

        self.assertFalse(is_eligible(expired, now))
        self.assertFalse(is_eligible(upcoming, now))
        self.assertTrue(is_eligible(running, now))

    def test_launch_end_is_midnight_of_that_day(self) -> None:
        slide = make_slide(active_until_date=date(2026, 10, 19), use_utc=True)
        self.assertTrue(is_eligible(slide, datetime(2026, 10, 19, 0, 0, 0, tzinfo=UTC)))
        self.assertFalse(is_eligible(slide, datetime(2026, 10, 19, 0, 0, 1, tzinfo=UTC)))

    def test_gmt_slide_ignores_local_offset(self) -> None:
        slide = make_slide(daily_start_time=parse_time_string("09:00:00 AM"), use_utc=True)
        now = datetime(2026, 10, 19, 9, 0, 0, tzinfo=UTC)

        self.assertTrue(is_eligible(slide, now, local_tz=PLUS_FIVE))
        self.assertTrue(is_eligible(slide, now, local_tz=UTC))

    def test_local_slide_uses_wall_clock(self) -> None:
        slide = make_slide(
            daily_start_time=parse_time_string("09:00:00 AM"),
            daily_end_time=parse_time_string("10:00:00 AM"),
        )
        local_nine = datetime(2026, 10, 19, 9, 0, 0, tzinfo=PLUS_FIVE)
        utc_nine = datetime(2026, 10, 19, 9, 0, 0, tzinfo=UTC)

        # 09:00 local is 04:00 UTC, a different instant than the GMT case
        self.assertTrue(is_eligible(slide, local_nine, local_tz=PLUS_FIVE))
        self.assertFalse(is_eligible(slide, utc_nine, local_tz=PLUS_FIVE))

    def test_naive_now_is_wall_clock_in_local_tz(self) -> None:
        nine_to_ten = dict(
            daily_start_time=parse_time_string("09:00:00 AM"),
            daily_end_time=parse_time_string("10:00:00 AM"),
        )
        plus_nine = timezone(timedelta(hours=9))

        self.assertTrue(is_eligible(make_slide(**nine_to_ten), datetime(2026, 10, 19, 9, 30), local_tz=plus_nine))
        self.assertFalse(is_eligible(make_slide(**nine_to_ten), datetime(2026, 10, 19, 10, 30), local_tz=plus_nine))

        # 18:30 at +09:00 is 09:30 UTC
        gmt = make_slide(use_utc=True, **nine_to_ten)
        self.assertTrue(is_eligible(gmt, datetime(2026, 10, 19, 18, 30), local_tz=plus_nine))
        self.assertFalse(is_eligible(gmt, datetime(2026, 10, 19, 9, 30), local_tz=plus_nine))


if __name__ == "__main__":
    unittest.main()
