"""Transcript acquisition: captions first, then the fallback provider."""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

import httpx
from youtube_transcript_api import CouldNotRetrieveTranscript, YouTubeTranscriptApi

from foodiefind.app.domain.errors import TranscriptUnavailableError
from foodiefind.app.domain.models import CaptionEntry, TranscriptResult, TranscriptSource

from .errors import NoCaptionsError, ServiceError, TranscriptProviderError

logger = logging.getLogger(__name__)

MIN_TRANSCRIPT_CHARS = 50
PRIORITY_LANGUAGES = ("en", "en-US", "en-GB")
RAPIDAPI_TIMEOUT_SECONDS = 30.0
WHITESPACE_PATTERN = re.compile(r"\s+")


def _normalize_text(value: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def _join_entries(entries: list[CaptionEntry]) -> str:
    return _normalize_text(" ".join(entry.text for entry in entries if entry.text))


class CaptionSource(ABC):
    """Primary captioning source that yields per-caption offsets."""

    @abstractmethod
    def get_captions(self, video_id: str) -> list[CaptionEntry]:
        """Raises NoCaptionsError when the video has no usable caption track."""


class FallbackTranscriptProvider(ABC):
    """Secondary transcript source, text only."""

    @abstractmethod
    def get_transcript(self, video_id: str) -> str | list:
        """Raises TranscriptProviderError on any provider failure."""


class YouTubeCaptionSource(CaptionSource):
    def __init__(
        self,
        languages: tuple[str, ...] = PRIORITY_LANGUAGES,
        api: YouTubeTranscriptApi | None = None,
    ) -> None:
        self.languages = languages
        self._api = api

    def _get_api(self) -> YouTubeTranscriptApi:
        if self._api is None:
            self._api = YouTubeTranscriptApi()
        return self._api

    def get_captions(self, video_id: str) -> list[CaptionEntry]:
        try:
            fetched = self._get_api().fetch(video_id, languages=list(self.languages))
        except CouldNotRetrieveTranscript as error:
            raise NoCaptionsError(video_id, type(error).__name__) from error
        except OSError as error:
            raise NoCaptionsError(video_id, f"Network error: {error}") from error

        raw_items = fetched.to_raw_data() if hasattr(fetched, "to_raw_data") else list(fetched)
        entries = [
            CaptionEntry(text=_normalize_text(str(item.get("text", ""))), offset_seconds=float(item.get("start", 0.0)))
            for item in raw_items
            if item.get("text")
        ]

        if not entries:
            raise NoCaptionsError(video_id, "Caption track is empty")
        return entries


class RapidApiTranscriptProvider(FallbackTranscriptProvider):
    def __init__(
        self,
        api_key: str | None,
        host: str | None,
        timeout: float = RAPIDAPI_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.host = host
        self.timeout = timeout
        self._client = client

    def _request(self, video_id: str) -> httpx.Response:
        url = f"https://{self.host}/api/transcript"
        headers = {"X-RapidAPI-Key": self.api_key or "", "X-RapidAPI-Host": self.host or ""}
        params = {"videoId": video_id}

        if self._client is not None:
            return self._client.get(url, params=params, headers=headers, timeout=self.timeout)

        with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
            return client.get(url, params=params, headers=headers)

    def get_transcript(self, video_id: str) -> str | list:
        if not self.api_key or not self.host:
            raise TranscriptProviderError("RapidAPI transcript provider not configured")

        try:
            response = self._request(video_id)
            response.raise_for_status()
        except httpx.TimeoutException as error:
            raise TranscriptProviderError(f"RapidAPI request timed out after {self.timeout}s") from error
        except httpx.HTTPStatusError as error:
            raise TranscriptProviderError(
                _error_message(error.response),
                status_code=error.response.status_code,
            ) from error
        except httpx.HTTPError as error:
            raise TranscriptProviderError(f"RapidAPI request failed: {error}") from error

        try:
            payload = response.json()
        except ValueError as error:
            raise TranscriptProviderError("RapidAPI response is not JSON") from error

        transcript = payload.get("transcript") if isinstance(payload, dict) else None
        if isinstance(transcript, (str, list)) and transcript:
            return transcript

        raise TranscriptProviderError("No transcript data in RapidAPI response")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "Unknown error"


def fallback_to_text(raw: str | list) -> str:
    """Flatten the fallback provider payload (string, list of strings or of ``{text}`` dicts)."""
    if isinstance(raw, str):
        return _normalize_text(raw)

    parts: list[str] = []
    for entry in raw:
        if isinstance(entry, dict):
            text = entry.get("text")
        else:
            text = entry
        if isinstance(text, str) and text.strip():
            parts.append(text)
    return _normalize_text(" ".join(parts))


class TranscriptAcquirer:
    """
    Obtains a transcript for a video, trying captions first and the fallback provider second.

    Falling back to the stored description is left to the caller.
    """

    def __init__(
        self,
        caption_source: CaptionSource,
        fallback_provider: FallbackTranscriptProvider,
        min_chars: int = MIN_TRANSCRIPT_CHARS,
    ) -> None:
        self.caption_source = caption_source
        self.fallback_provider = fallback_provider
        self.min_chars = min_chars

    def _is_usable(self, text: str) -> bool:
        return len(text.strip()) > self.min_chars

    def acquire(self, video_id: str) -> TranscriptResult:
        try:
            entries = self.caption_source.get_captions(video_id)
            text = _join_entries(entries)
            if self._is_usable(text):
                logger.info("Caption transcript acquired: video=%s, chars=%d", video_id, len(text))
                return TranscriptResult(text=text, source=TranscriptSource.CAPTIONS, timestamped=entries)
            primary_reason = f"transcript too short ({len(text)} chars)"
        except ServiceError as error:
            primary_reason = str(error)

        logger.info("Captions unusable for %s (%s), trying fallback provider", video_id, primary_reason)

        try:
            text = fallback_to_text(self.fallback_provider.get_transcript(video_id))
            if self._is_usable(text):
                logger.info("Fallback transcript acquired: video=%s, chars=%d", video_id, len(text))
                return TranscriptResult(text=text, source=TranscriptSource.FALLBACK)
            fallback_reason = f"transcript too short ({len(text)} chars)"
        except ServiceError as error:
            fallback_reason = str(error)

        logger.warning("Both transcript sources failed for %s", video_id)
        raise TranscriptUnavailableError(video_id, primary_reason, fallback_reason)

    def fetch_timestamped(self, video_id: str) -> list[CaptionEntry] | None:
        try:
            return self.caption_source.get_captions(video_id) or None
        except ServiceError as error:
            logger.info("No timestamped transcript for %s: %s", video_id, error)
            return None
