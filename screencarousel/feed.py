"""
Slide-list loading (page -> sheets -> rows -> slides).

- Reads the page markup and finds the sheet table (".locations > div")
- Fetches every referenced sheet as JSON (one attempt, no retries)
- Turns every row into exactly ONE SlideDescriptor

Failure boundaries:
- a broken row is dropped, the rest of the sheet is still used
- a broken sheet contributes nothing, the other sheets are still used
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from screencarousel.config import HTTP_TIMEOUT_SECONDS, LOCATIONS_SELECTOR
from screencarousel.errors import (
    CarouselError,
    FeedError,
    FeedFetchFailure,
    FeedParseFailure,
    RowProcessingFailure,
)
from screencarousel.media import media_type_for_link
from screencarousel.model import LoadResult, SheetSource, SlideDescriptor
from screencarousel.schedule import (
    is_gmt,
    parse_date_string,
    parse_time_string,
    validate_date_format,
    validate_time_format,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def fetch_text(url: str, timeout: float = HTTP_TIMEOUT_SECONDS) -> str:
    """
    GET a URL and return its body. Any transport error or non-2xx status
    becomes FeedFetchFailure.
    """
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FeedFetchFailure(f"request to fetch {url} failed: {exc}") from exc
    return resp.text


def fetch_json(url: str, timeout: float = HTTP_TIMEOUT_SECONDS) -> Any:
    text = fetch_text(url, timeout=timeout)
    try:
        document = json.loads(text)
    except ValueError as exc:
        raise FeedParseFailure(f"response from {url} is not JSON: {exc}") from exc
    if not document:
        raise FeedParseFailure(f"empty sheet document at {url}")
    return document


# ---------------------------------------------------------------------------
# Page -> sheet sources
# ---------------------------------------------------------------------------


def extract_sheet_sources(markup: str) -> List[SheetSource]:
    """
    Extract (sheet name, sheet path) pairs from the page's locations table.

    Each row looks like:
        <div><div>Sheet name</div><div><a href="/path/to/sheet.json">..</a></div></div>
    Only the path of the link is kept; it is resolved against the host later.
    """
    soup = BeautifulSoup(markup, "html.parser")
    rows = soup.select(LOCATIONS_SELECTOR)
    if not rows:
        logger.warning("No carousel data found while extracting sheet data.")
        return []

    sources: List[SheetSource] = []
    for i, row in enumerate(rows):
        cells = row.find_all("div")
        anchor = cells[1].find("a", href=True) if len(cells) >= 2 else None
        if anchor is None:
            logger.warning("Skipping locations row %d: expected a name and a sheet link", i)
            continue

        try:
            path = urlparse(anchor["href"]).path
        except ValueError as exc:
            logger.warning("Skipping locations row %d: bad sheet link (%s)", i, exc)
            continue
        if not path:
            logger.warning("Skipping locations row %d: empty sheet link", i)
            continue

        sources.append(SheetSource(name=cells[0].get_text(strip=True), path=path))

    return sources


def sheet_rows(document: Mapping[str, Any], sheet_name: str) -> List[Dict[str, Any]]:
    """
    Return the row list of a sheet document.

    Single sheets keep their rows under "data"; multi-sheet documents keep one
    {"data": [...]} object per sheet name.
    """
    sheet_type = document.get(":type") if isinstance(document, Mapping) else None

    try:
        if sheet_type == "multi-sheet":
            data = document[sheet_name]["data"]
        elif sheet_type == "sheet":
            data = document["data"]
        else:
            raise FeedParseFailure(f"Invalid sheet type: {sheet_type!r}")
    except (KeyError, TypeError) as exc:
        raise FeedParseFailure(f"sheet {sheet_name!r} has no data: {exc}") from exc

    if not isinstance(data, list):
        raise FeedParseFailure(f"sheet {sheet_name!r} data is not a list")
    return data


# ---------------------------------------------------------------------------
# Row -> slide
# ---------------------------------------------------------------------------


def _field(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value).strip()


def _parse_duration(value: str) -> Optional[int]:
    if not value:
        return None
    try:
        millis = int(float(value))
    except (ValueError, OverflowError) as exc:
        raise RowProcessingFailure(f"Invalid duration: {value!r}") from exc
    if millis <= 0:
        raise RowProcessingFailure(f"Duration must be positive: {value!r}")
    return millis


def slide_from_row(row: Mapping[str, Any]) -> SlideDescriptor:
    """
    Validate one sheet row and build its SlideDescriptor.

    Raises a CarouselError subclass if anything in the row is unusable.
    """
    if not isinstance(row, Mapping):
        raise RowProcessingFailure(f"row is not an object: {row!r}")

    link = _field(row, "Link")
    if not link:
        raise RowProcessingFailure("row has no Link")

    media_type = media_type_for_link(link)

    start_time = _field(row, "Start Time")
    end_time = _field(row, "End Time")
    launch_start = _field(row, "Launch Start")
    launch_end = _field(row, "Launch End")
    duration = _field(row, "Duration")

    validate_time_format(start_time)
    validate_time_format(end_time)
    validate_date_format(launch_start)
    validate_date_format(launch_end)

    return SlideDescriptor(
        media_link=link,
        media_type=media_type,
        daily_start_time=parse_time_string(start_time) if start_time else None,
        daily_end_time=parse_time_string(end_time) if end_time else None,
        active_from_date=parse_date_string(launch_start) if launch_start else None,
        active_until_date=parse_date_string(launch_end) if launch_end else None,
        dwell_millis=_parse_duration(duration),
        use_utc=is_gmt(_field(row, "Timezone")),
        raw_start_time=start_time,
        raw_end_time=end_time,
        raw_launch_start=launch_start,
        raw_launch_end=launch_end,
        raw_duration=duration,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_slides_from_sources(
    sources: List[SheetSource],
    host: str,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> LoadResult:
    """
    Fetch every sheet and collect the valid slides in feed order.
    """
    result = LoadResult()

    if not sources:
        logger.warning("No sheet data available")

    for source in sources:
        url = urljoin(host, source.path)
        try:
            rows = sheet_rows(fetch_json(url, timeout=timeout), source.name)
        except FeedError as exc:
            result.source_failures += 1
            message = f"Error while processing sheet {source.name!r} ({url}): {exc}"
            logger.warning(message)
            result.warnings.append(message)
            continue

        for index, row in enumerate(rows):
            try:
                result.slides.append(slide_from_row(row))
            except CarouselError as exc:
                message = f"Dropping row {index} of sheet {source.name!r}: {exc}"
                logger.warning(message)
                result.warnings.append(message)

    if result.no_usable_data:
        logger.warning("No usable slides: every sheet failed or was empty after errors")
    return result


def load_slides_from_markup(markup: str, page_url: str, timeout: float = HTTP_TIMEOUT_SECONDS) -> LoadResult:
    return load_slides_from_sources(extract_sheet_sources(markup), page_url, timeout=timeout)


def load_slides(page_url: str, timeout: float = HTTP_TIMEOUT_SECONDS) -> LoadResult:
    """
    Load the slide list for a page URL.

    A page that cannot be fetched counts as one failed source, so callers
    see no_usable_data instead of an exception.
    """
    try:
        markup = fetch_text(page_url, timeout=timeout)
    except FeedFetchFailure as exc:
        message = f"Error while fetching page {page_url}: {exc}"
        logger.warning(message)
        return LoadResult(warnings=[message], source_failures=1)

    return load_slides_from_markup(markup, page_url, timeout=timeout)
