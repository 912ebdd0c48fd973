"""
Configuration constants.

Everything that is a "magic value" in the carousel lives here:
- supported media extensions
- default dwell time and default activation window
- asset paths that the build-time generator always bundles
- HTTP and logging defaults used by the CLI
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

# Extensions are compared case-insensitively against the link's path suffix.
SUPPORTED_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".raw", ".tiff")
SUPPORTED_VIDEO_EXTENSIONS = (".mp4", ".wmv", ".avi", ".mpg", ".m4v")


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

# Dwell time for image slides without a Duration.
DEFAULT_DWELL_MILLIS = 10 * 1000

# Absent end time / end date means "now + this many years".
DEFAULT_WINDOW_YEARS = 10

# How long the driver waits before re-scanning when no slide is eligible.
DEFAULT_IDLE_RECHECK_MILLIS = DEFAULT_DWELL_MILLIS

# The console renderer cannot play video, it pretends playback lasts this long.
DEFAULT_VIDEO_SECONDS = 15.0


# ---------------------------------------------------------------------------
# Feed & generator
# ---------------------------------------------------------------------------

# Rows of the sheet table on the page: <div class="locations"><div>...</div></div>
LOCATIONS_SELECTOR = ".locations > div"
CAROUSEL_BLOCK_SELECTOR = ".carousel"

CAROUSEL_ASSETS = (
    "/blocks/carousel/carousel.js",
    "/blocks/carousel/utils.js",
    "/blocks/carousel/carousel.css",
)

HTTP_TIMEOUT_SECONDS = 30.0


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
