"""
Media type detection from a slide link.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import urlparse

from screencarousel.config import SUPPORTED_IMAGE_EXTENSIONS, SUPPORTED_VIDEO_EXTENSIONS
from screencarousel.errors import UnsupportedMediaExtension
from screencarousel.model import MediaType


def media_type_for_link(link: str) -> MediaType:
    """
    Return IMAGE or VIDEO based on the extension of the link's path.

    Query string and fragment are ignored, the comparison is case-insensitive.
    Raises UnsupportedMediaExtension for anything else (including no extension).
    """
    raw = (link or "").strip()
    try:
        path = urlparse(raw).path
    except ValueError as exc:
        raise UnsupportedMediaExtension(f"Unparseable asset link: {link!r} ({exc})") from exc
    suffix = PurePosixPath(path).suffix.lower()

    if suffix in SUPPORTED_IMAGE_EXTENSIONS:
        return MediaType.IMAGE
    if suffix in SUPPORTED_VIDEO_EXTENSIONS:
        return MediaType.VIDEO
    raise UnsupportedMediaExtension(f"Incompatible asset format: {link!r}")
