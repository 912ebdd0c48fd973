"""
Build-time generator (page -> static HTML + asset list).

For one page of a site this:
- fetches the page markup and the sheets it references
- collects every asset the carousel needs offline:
  sheet paths, media paths of every row, the carousel script/style files
- pre-renders the carousel track into the page's .carousel block
- writes the result to <out_dir>/<path>.html

Failures are logged, never raised: whatever was collected is still returned
so the bundling step can continue with the other pages.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Sequence
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from screencarousel.config import CAROUSEL_ASSETS, CAROUSEL_BLOCK_SELECTOR, HTTP_TIMEOUT_SECONDS
from screencarousel.errors import CarouselError, FeedError
from screencarousel.feed import extract_sheet_sources, fetch_json, fetch_text, sheet_rows, slide_from_row
from screencarousel.model import SheetSource, SlideDescriptor
from screencarousel.render import build_track

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def media_path(link: str) -> str:
    """
    Path component of an absolute media URL.

    Relative links cannot be bundled and raise ValueError.
    """
    parsed = urlparse((link or "").strip())
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"not an absolute URL: {link!r}")
    return parsed.path


def collect_assets(
    host: str,
    sources: Sequence[SheetSource],
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> tuple[List[str], List[SlideDescriptor]]:
    """
    Return (asset paths, valid slides) for the given sheet sources.

    Every sheet path is listed even if the sheet later fails to load; rows
    are listed by media path whether or not they pass slide validation.
    """
    assets: List[str] = []
    slides: List[SlideDescriptor] = []

    for source in sources:
        assets.append(source.path)
        try:
            rows = sheet_rows(fetch_json(urljoin(host, source.path), timeout=timeout), source.name)
        except FeedError as exc:
            logger.warning("Error while processing sheet %r: %s", source.name, exc)
            continue

        for index, row in enumerate(rows):
            link = str(row.get("Link") or "") if isinstance(row, dict) else ""
            try:
                assets.append(media_path(link))
            except ValueError as exc:
                logger.warning("Error while processing asset %d of sheet %r: %s", index, source.name, exc)
                continue

            try:
                slides.append(slide_from_row(row))
            except CarouselError as exc:
                logger.warning("Not pre-rendering row %d of sheet %r: %s", index, source.name, exc)

    return assets, slides


def rewrite_markup(markup: str, slides: Sequence[SlideDescriptor]) -> str:
    """
    Replace the contents of the page's .carousel block with the rendered track.

    Pages without a carousel block are returned re-serialized but unchanged.
    """
    soup = BeautifulSoup(markup, "html.parser")
    block = soup.select_one(CAROUSEL_BLOCK_SELECTOR)
    if block is None:
        logger.warning("Page has no %s block, markup left as is", CAROUSEL_BLOCK_SELECTOR)
        return str(soup)

    block.clear()
    block.append(build_track(soup, slides))
    return str(soup)


def output_path(out_dir: Path, path: str) -> Path:
    return Path(out_dir) / f"{path.strip('/')}.html"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_html(
    host: str,
    path: str,
    out_dir: Path = Path("."),
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> List[str]:
    """
    Generate <out_dir>/<path>.html for one page and return its asset list.
    """
    logger.info("running carousel from sheet generator for %s", path)
    additional_assets: List[str] = []

    try:
        markup = fetch_text(urljoin(host, path), timeout=timeout)
        sources = extract_sheet_sources(markup)
        if not sources:
            logger.warning("No sheet data available during HTML generation")

        assets, slides = collect_assets(host, sources, timeout=timeout)
        additional_assets.extend(assets)
        additional_assets.extend(CAROUSEL_ASSETS)

        target = output_path(out_dir, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(rewrite_markup(markup, slides), encoding="utf-8")
        logger.info("Wrote %s (%d slides, %d assets)", target, len(slides), len(additional_assets))
    except (CarouselError, OSError) as exc:
        logger.error("Generating %s failed: %s", path, exc)

    return additional_assets


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="screencarousel.generator",
        description="Pre-render a carousel page and list its assets",
    )
    p.add_argument("host", type=str, help="Site origin, e.g. https://main--site--org.hlx.page")
    p.add_argument("path", type=str, help="Page path, e.g. /screens/lobby")
    p.add_argument("--out-dir", type=Path, default=Path("."), help="Directory for the generated HTML")
    p.add_argument("--timeout", type=float, default=HTTP_TIMEOUT_SECONDS, help="HTTP timeout in seconds")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    for asset in generate_html(args.host, args.path, out_dir=args.out_dir, timeout=args.timeout):
        print(asset)


if __name__ == "__main__":
    main()
