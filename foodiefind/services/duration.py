"""Duration and title checks that keep short-form and non-food content out of the pipeline."""
from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

SHORT_FORM_MAX_SECONDS = 60
MIN_SUITABLE_DURATION_SECONDS = 120
NON_FOOD_KEYWORDS = ("music", "live stream", "shorts", "compilation", "trailer", "announcement")

_ISO_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_duration(duration: str | None) -> int:
    """Convert a YouTube duration such as ``PT1H2M10S`` to seconds (0 when unknown)."""
    if not duration:
        return 0

    match = _ISO_DURATION_PATTERN.search(duration)
    if not match:
        return 0

    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def format_duration(seconds: int | float | None) -> str | None:
    if not seconds or seconds <= 0:
        return None

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = ["PT"]
    if hours:
        parts.append(f"{hours}H")
    if minutes:
        parts.append(f"{minutes}M")
    if secs or total < 60:
        parts.append(f"{secs}S")
    return "".join(parts)


def _short_title(title: str) -> str:
    return title[:50]


def is_suitable(duration_seconds: int | float | None, title: str | None) -> bool:
    """
    Return True when a video is likely to hold narrative restaurant content.

    Unknown or zero duration does not block the video.
    """
    duration = int(duration_seconds or 0)
    title_text = title or ""

    if 0 < duration <= SHORT_FORM_MAX_SECONDS:
        logger.info("Skipping short video (%ds): %s", duration, _short_title(title_text))
        return False

    if 0 < duration <= MIN_SUITABLE_DURATION_SECONDS:
        logger.info("Skipping very short video (%ds): %s", duration, _short_title(title_text))
        return False

    lowered = title_text.lower()
    if any(keyword in lowered for keyword in NON_FOOD_KEYWORDS):
        logger.info("Skipping non-food video: %s", _short_title(title_text))
        return False

    return True
