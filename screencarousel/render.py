"""
Carousel markup.

Builds the static track the browser-side carousel animates:

    <div class="carousel-track">
      <div class="carousel-item" start-time=".." end-time=".." ... type="image">
        <img src="..."/>
      </div>
      ...
    </div>
"""

from __future__ import annotations

from typing import Iterable

from bs4 import BeautifulSoup, Tag

from screencarousel.model import MediaType, SlideDescriptor


def _item(soup: BeautifulSoup, slide: SlideDescriptor) -> Tag:
    item = soup.new_tag("div", attrs={"class": "carousel-item"})
    item["start-time"] = slide.raw_start_time
    item["end-time"] = slide.raw_end_time
    item["launch-start-date"] = slide.raw_launch_start
    item["launch-end-date"] = slide.raw_launch_end
    item["duration"] = slide.raw_duration
    item["type"] = slide.media_type.value
    if slide.use_utc:
        item["is-gmt"] = "true"

    if slide.media_type is MediaType.VIDEO:
        media = soup.new_tag("video", attrs={"src": slide.media_link})
        media["muted"] = ""
        media["playsinline"] = ""
    else:
        media = soup.new_tag("img", attrs={"src": slide.media_link})
    item.append(media)
    return item


def build_track(soup: BeautifulSoup, slides: Iterable[SlideDescriptor]) -> Tag:
    """
    Create the carousel-track element (owned by soup) with one item per slide.
    """
    track = soup.new_tag("div", attrs={"class": "carousel-track"})
    for slide in slides:
        track.append(_item(soup, slide))
    return track


def render_track(slides: Iterable[SlideDescriptor]) -> str:
    soup = BeautifulSoup("", "html.parser")
    return str(build_track(soup, slides))
