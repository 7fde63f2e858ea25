"""
Estimate where in a video each restaurant is mentioned, from caption proximity.

Search terms are a set: a context word that repeats a name token is one
corroborating signal and is scored once.
"""
from __future__ import annotations

import logging
import math
from typing import Sequence

from foodiefind.app.domain.models import CaptionEntry, RecommendationCandidate

logger = logging.getLogger(__name__)

WINDOW_RADIUS = 2
MIN_MATCH_SCORE = 2
FULL_NAME_WEIGHT = 2
TERM_WEIGHT = 1
MIN_TERM_LENGTH = 3
MIN_CONTEXT_WORD_LENGTH = 4


def build_search_terms(name: str, context: str | None) -> dict[str, int]:
    terms: dict[str, int] = {}

    def add(term: str, weight: int) -> None:
        if len(term) < MIN_TERM_LENGTH:
            return
        terms[term] = max(terms.get(term, 0), weight)

    lowered_name = " ".join(name.lower().split())
    add(lowered_name, FULL_NAME_WEIGHT)
    for token in lowered_name.split():
        add(token, TERM_WEIGHT)
    for word in (context or "").lower().split():
        if len(word) >= MIN_CONTEXT_WORD_LENGTH:
            add(word, TERM_WEIGHT)
    return terms


def find_mention_offset(
    transcript: Sequence[CaptionEntry],
    name: str,
    context: str | None,
) -> int | None:
    """Offset in whole seconds of the best-scoring caption window, or None below the threshold."""
    if not transcript:
        return None

    terms = build_search_terms(name, context)
    if not terms:
        return None

    texts = [entry.text.lower() for entry in transcript]
    best_score = 0
    best_offset: int | None = None

    for index, entry in enumerate(transcript):
        window = " ".join(texts[max(0, index - WINDOW_RADIUS): index + WINDOW_RADIUS + 1])
        score = sum(weight for term, weight in terms.items() if term in window)
        if score > best_score:
            best_score = score
            best_offset = int(math.floor(entry.offset_seconds))

    return best_offset if best_score >= MIN_MATCH_SCORE else None


class TimestampReconciler:
    def reconcile(
        self,
        timestamped: Sequence[CaptionEntry] | None,
        candidates: list[RecommendationCandidate],
    ) -> list[RecommendationCandidate]:
        if not timestamped:
            return candidates

        try:
            offsets = [find_mention_offset(timestamped, c.name, c.context) for c in candidates]
        except Exception as error:
            logger.warning("Timestamp reconciliation failed, keeping candidates as-is: %s", error)
            return candidates

        for candidate, offset in zip(candidates, offsets):
            candidate.mentioned_at = offset
            if offset is not None:
                logger.info("Found timestamp for %s: %s", candidate.name, format_timestamp(offset))
        return candidates


def format_timestamp(seconds: int | None) -> str | None:
    if seconds is None:
        return None
    minutes, remaining = divmod(int(seconds), 60)
    return f"{minutes}:{remaining:02d}"


def youtube_url(video_id: str, seconds: int | None = None) -> str:
    if not seconds:
        return f"https://www.youtube.com/watch?v={video_id}"
    return f"https://www.youtube.com/watch?v={video_id}&t={seconds}s"
