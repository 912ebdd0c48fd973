"""
CLI (Command Line Interface).

Terminal commands for checking and running a carousel feed:

    screencarousel check <page-url>            # load the feed, show which slides are live now
    screencarousel play <page-url>             # run the carousel in the terminal
    screencarousel generate <host> <path>      # pre-render page + list bundle assets

Note:
- Loading lives in screencarousel/feed.py, scheduling in schedule.py/driver.py
- Output tables use rich; diagnostics go through logging (coloredlogs)
"""

from __future__ import annotations

import argparse
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

import coloredlogs
from rich import box
from rich.console import Console
from rich.table import Table

from screencarousel.config import DEFAULT_LOG_LEVEL, DEFAULT_VIDEO_SECONDS, HTTP_TIMEOUT_SECONDS, LOG_FORMAT
from screencarousel.driver import CarouselDriver, Scheduler, TimerScheduler, utc_now
from screencarousel.feed import load_slides
from screencarousel.generator import generate_html
from screencarousel.model import LoadResult, MediaType, SlideDescriptor
from screencarousel.schedule import is_eligible

logger = logging.getLogger(__name__)
console = Console()


# ---------------------------------------------------------------------------
# Terminal renderer
# ---------------------------------------------------------------------------


class ConsoleRenderer:
    """
    Renderer that prints the live slide.

    A terminal cannot play video, so video playback "ends" after
    video_seconds via the scheduler.
    """

    def __init__(self, scheduler: Scheduler, video_seconds: float = DEFAULT_VIDEO_SECONDS) -> None:
        self.scheduler = scheduler
        self.video_seconds = video_seconds

    def show(self, slide: SlideDescriptor, on_complete: Callable[[], None]) -> None:
        if slide.media_type is MediaType.VIDEO:
            console.print(f"[bold magenta]VIDEO[/] {slide.media_link}")
            self.scheduler.call_later(self.video_seconds, on_complete)
        else:
            console.print(f"[bold cyan]IMAGE[/] {slide.media_link} ({slide.effective_dwell_millis} ms)")

    def clear(self) -> None:
        console.print("[dim](nothing scheduled right now)[/]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(level: str) -> None:
    # Installs a colored stderr handler on the root logger.
    coloredlogs.install(level=level.upper(), fmt=LOG_FORMAT)


def _window_text(start: str, end: str) -> str:
    if not start and not end:
        return "always"
    return f"{start or 'any'} - {end or 'any'}"


def _load_or_report(args: argparse.Namespace) -> Optional[LoadResult]:
    """
    Load the slides; print a message and return None if there is nothing usable.
    """
    result = load_slides(args.page_url, timeout=args.timeout)
    if result.no_usable_data:
        print("No usable data: every sheet failed to load.")
        return None
    if result.warnings:
        print(f"Loaded {len(result.slides)} slides ({len(result.warnings)} warnings).")
    return result


def slides_table(slides: List[SlideDescriptor], now: datetime) -> Table:
    table = Table(title=f"Slides at {now.isoformat(timespec='seconds')}", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Link", overflow="fold")
    table.add_column("Daily")
    table.add_column("Dates")
    table.add_column("Zone")
    table.add_column("Live")

    for i, slide in enumerate(slides, start=1):
        live = is_eligible(slide, now)
        table.add_row(
            str(i),
            slide.media_type.value,
            slide.media_link,
            _window_text(slide.raw_start_time, slide.raw_end_time),
            _window_text(slide.raw_launch_start, slide.raw_launch_end),
            "GMT" if slide.use_utc else "local",
            "[green]yes[/]" if live else "[red]no[/]",
        )
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_check(args: argparse.Namespace) -> int:
    """
    Show every loaded slide and whether it is eligible right now.
    """
    result = _load_or_report(args)
    if result is None:
        return 1
    if not result.slides:
        print("No slides configured.")
        return 0

    console.print(slides_table(result.slides, utc_now()))
    return 0


def _cmd_play(args: argparse.Namespace) -> int:
    """
    Run the carousel until interrupted (Ctrl+C).
    """
    result = _load_or_report(args)
    if result is None:
        return 1
    if not result.slides:
        print("No slides configured, nothing to play.")
        return 0

    logger.info("Starting carousel with %d slides", len(result.slides))
    scheduler = TimerScheduler()
    driver = CarouselDriver(
        result.slides,
        renderer=ConsoleRenderer(scheduler, video_seconds=args.video_seconds),
        scheduler=scheduler,
    )
    driver.start()

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        print("Stopped.")
    finally:
        driver.stop()
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """
    Pre-render one page and print the assets it depends on.
    """
    assets = generate_html(args.host, args.path, out_dir=args.out_dir, timeout=args.timeout)
    if not assets:
        print("Generation failed, no assets collected.")
        return 1
    for asset in assets:
        print(asset)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="screencarousel", description="Scheduled image/video carousel")
    parser.add_argument(
        "-l",
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Logging level (default: {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument("--timeout", type=float, default=HTTP_TIMEOUT_SECONDS, help="HTTP timeout in seconds")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Show slides and whether they are live now")
    p_check.add_argument("page_url", type=str, help="URL of the page with the locations table")

    p_play = sub.add_parser("play", help="Run the carousel in the terminal")
    p_play.add_argument("page_url", type=str, help="URL of the page with the locations table")
    p_play.add_argument(
        "--video-seconds",
        type=float,
        default=DEFAULT_VIDEO_SECONDS,
        help=f"Pretended video length (default: {DEFAULT_VIDEO_SECONDS})",
    )

    p_generate = sub.add_parser("generate", help="Pre-render a page and list its assets")
    p_generate.add_argument("host", type=str, help="Site origin")
    p_generate.add_argument("path", type=str, help="Page path")
    p_generate.add_argument("--out-dir", type=Path, default=Path("."), help="Output directory")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)

    if args.command == "check":
        raise SystemExit(_cmd_check(args))
    if args.command == "play":
        raise SystemExit(_cmd_play(args))
    if args.command == "generate":
        raise SystemExit(_cmd_generate(args))

    raise SystemExit(2)
