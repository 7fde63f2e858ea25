# foodiefind/services/ids.py
import re
from typing import Optional

_VIDEO_RE = re.compile(
    r"(?:youtu\.be/|youtube\.com/(?:watch\?(?:.*&)?v=|embed/|shorts/|live/))([A-Za-z0-9_-]{6,})"
)

_CHANNEL_PATTERNS = (
    (re.compile(r"youtube\.com/channel/([^/?&#]+)"), ""),
    (re.compile(r"youtube\.com/c/([^/?&#]+)"), ""),
    (re.compile(r"youtube\.com/user/([^/?&#]+)"), ""),
    (re.compile(r"youtube\.com/@([^/?&#]+)"), "@"),
)


def extract_video_id(url: str) -> Optional[str]:
    """Return the YouTube video id from a watch/short/embed URL."""
    m = _VIDEO_RE.search(url or "")
    return m.group(1) if m else None


def extract_channel_id(url: str) -> Optional[str]:
    """Return a channel id, legacy name or ``@handle`` from a channel URL."""
    for pattern, prefix in _CHANNEL_PATTERNS:
        m = pattern.search(url or "")
        if m:
            return f"{prefix}{m.group(1)}"
    return None
