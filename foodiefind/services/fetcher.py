from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

import yt_dlp

from foodiefind.app.domain.models import ChannelInfo, VideoDetails

from .duration import format_duration, is_suitable
from .errors import FetchFailedError, InvalidURLError, PrivateOrUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHANNEL_VIDEOS = 50
CHANNEL_FETCH_CAP = 50

YdlFactory = Callable[[dict], Any]


def _clean_string(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _safe_numeric(value: object, default: int | float = 0) -> int | float:
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else default


def _safe_count(value: object) -> int:
    return int(_safe_numeric(value))


def _extract_thumbnail(info: dict | None) -> str | None:
    if not isinstance(info, dict):
        return None

    direct_url = _clean_string(info.get("thumbnail")) or _clean_string(info.get("thumbnail_url"))
    if direct_url:
        return direct_url

    return _find_best_thumbnail_from_list(info.get("thumbnails"))


def _find_best_thumbnail_from_list(thumbnails: list | None) -> str | None:
    if not isinstance(thumbnails, list):
        return None

    scored_thumbnails = [
        (_score_thumbnail(entry), _clean_string(entry.get("url")))
        for entry in thumbnails
        if isinstance(entry, dict) and _clean_string(entry.get("url"))
    ]

    if not scored_thumbnails:
        return None

    scored_thumbnails.sort(reverse=True, key=lambda x: x[0])
    return scored_thumbnails[0][1]


def _score_thumbnail(entry: dict) -> tuple[int | float, int | float, int | float]:
    return (
        _safe_numeric(entry.get("preference")),
        _safe_numeric(entry.get("width")),
        _safe_numeric(entry.get("height")),
    )


def _published_at(info: dict) -> str | None:
    timestamp = info.get("timestamp") or info.get("release_timestamp")
    if isinstance(timestamp, (int, float)):
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()

    upload_date = _clean_string(info.get("upload_date"))
    if upload_date:
        try:
            return datetime.strptime(upload_date, "%Y%m%d").replace(tzinfo=timezone.utc).isoformat()
        except ValueError:
            return None
    return None


def _create_ydl_options(flat: bool = False, playlist_end: int | None = None) -> dict:
    opts: dict[str, Any] = {
        "quiet": True,
        "noprogress": True,
        "skip_download": True,
        "check_formats": False,
    }
    if flat:
        opts["extract_flat"] = "in_playlist"
    if playlist_end:
        opts["playlistend"] = playlist_end
    return opts


def _check_video_availability(info: dict) -> None:
    is_private = info.get("is_private")
    availability = info.get("availability")
    if is_private or availability in {"private", "needs_auth"}:
        raise PrivateOrUnavailableError("Video is private or requires login.")


def channel_url(channel_id: str) -> str:
    if channel_id.startswith("@"):
        return f"https://www.youtube.com/{channel_id}"
    return f"https://www.youtube.com/channel/{channel_id}"


def _details_from_info(info: dict, fallback_id: str) -> VideoDetails:
    seconds = int(_safe_numeric(info.get("duration")))
    return VideoDetails(
        video_id=_clean_string(info.get("id")) or fallback_id,
        title=_clean_string(info.get("title")) or "Untitled",
        channel_id=_clean_string(info.get("channel_id")),
        description=_clean_string(info.get("description")),
        duration=format_duration(seconds),
        duration_seconds=seconds,
        thumbnail_url=_extract_thumbnail(info),
        published_at=_published_at(info),
        view_count=_safe_count(info.get("view_count")),
        like_count=_safe_count(info.get("like_count")),
    )


class VideoFetcher:
    """YouTube video and channel metadata via yt-dlp, without downloading media."""

    def __init__(self, ydl_factory: YdlFactory | None = None) -> None:
        self._ydl_factory = ydl_factory or yt_dlp.YoutubeDL

    def _extract(self, url: str, opts: dict) -> dict:
        try:
            with self._ydl_factory(opts) as ydl:
                info = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as error:
            message = str(error)
            if "Private video" in message or "unavailable" in message.lower():
                raise PrivateOrUnavailableError(message) from error
            raise FetchFailedError(f"Failed to fetch {url}: {message}") from error
        except (ConnectionError, TimeoutError) as error:
            raise FetchFailedError(f"Network error fetching {url}: {error}") from error

        if not isinstance(info, dict):
            raise PrivateOrUnavailableError(f"No metadata returned for {url}")
        return info

    def get_video_details(self, video_id: str) -> VideoDetails:
        if not video_id:
            raise InvalidURLError("Video id is required")

        info = self._extract(f"https://www.youtube.com/watch?v={video_id}", _create_ydl_options())
        _check_video_availability(info)
        return _details_from_info(info, video_id)

    def get_channel_info(self, channel_id: str) -> ChannelInfo:
        if not channel_id:
            raise InvalidURLError("Channel id is required")

        info = self._extract(channel_url(channel_id), _create_ydl_options(flat=True, playlist_end=1))
        resolved_id = _clean_string(info.get("channel_id")) or _clean_string(info.get("id")) or channel_id

        return ChannelInfo(
            channel_id=resolved_id,
            name=_clean_string(info.get("channel")) or _clean_string(info.get("title")) or resolved_id,
            channel_url=f"https://youtube.com/channel/{resolved_id}",
            description=_clean_string(info.get("description")),
            profile_image_url=_extract_thumbnail(info),
            subscriber_count=_safe_count(info.get("channel_follower_count")),
            video_count=_safe_count(info.get("playlist_count")),
        )

    def get_channel_videos(self, channel_id: str, max_results: int = DEFAULT_MAX_CHANNEL_VIDEOS) -> list[VideoDetails]:
        """
        Newest suitable videos of a channel.

        Fetches up to twice `max_results` entries (capped) since many are filtered out.
        """
        fetch_count = min(max_results * 2, CHANNEL_FETCH_CAP)
        listing = self._extract(
            f"{channel_url(channel_id)}/videos",
            _create_ydl_options(flat=True, playlist_end=fetch_count),
        )
        entries = [entry for entry in listing.get("entries") or [] if isinstance(entry, dict) and entry.get("id")]

        videos: list[VideoDetails] = []
        skipped = 0
        for entry in entries[:fetch_count]:
            listed_duration = int(_safe_numeric(entry.get("duration")))
            if listed_duration and not is_suitable(listed_duration, entry.get("title")):
                skipped += 1
                continue

            try:
                details = self.get_video_details(str(entry["id"]))
            except (PrivateOrUnavailableError, FetchFailedError) as error:
                logger.warning("Skipping channel video %s: %s", entry.get("id"), error)
                skipped += 1
                continue

            if not is_suitable(details.duration_seconds, details.title):
                skipped += 1
                continue

            videos.append(details)
            if len(videos) >= max_results:
                break

        logger.info("Selected %d suitable videos from %s, skipped %d", len(videos), channel_id, skipped)
        return videos
