"""Restaurant extraction from a transcript through the completion client."""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from foodiefind.app.domain.errors import ExtractionParseError, ExtractionProviderError
from foodiefind.app.domain.models import PRICE_RANGES, RecommendationCandidate
from foodiefind.services.errors import LLMConfigurationError, ServiceError
from foodiefind.services.gemini_client import CompletionClient

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.6
DEFAULT_CONFIDENCE = 0.8
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 2000

_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

SYSTEM_PROMPT = (
    "You are an expert at extracting restaurant recommendations from food influencer video transcripts. "
    "Extract restaurant names, locations, cuisine types, and specific dishes mentioned. "
    "Be precise and only include restaurants that are clearly recommended or positively mentioned. "
    "Return results in valid JSON format only."
)

_USER_PROMPT_TEMPLATE = """Please analyze this food video transcript and extract restaurant recommendations.

Video Title: "{title}"

Transcript: "{transcript}"

Extract and return a JSON object with the following structure:
{{
  "restaurants": [
    {{
      "name": "Restaurant Name",
      "location": "City, State/Country (if mentioned, otherwise null)",
      "address": "Full address if mentioned, otherwise null",
      "cuisineType": "Type of cuisine or null",
      "dishMentioned": "Specific dish or food item mentioned, or null",
      "context": "Brief quote or context about why it's recommended",
      "confidenceScore": 0.9,
      "priceRange": "$, $$, $$$, $$$$ or null",
      "mentionedAt": null
    }}
  ]
}}

Guidelines:
1. Only include restaurants that are clearly recommended or spoken about positively
2. Don't include restaurants that are just mentioned in passing without recommendation
3. Extract specific dishes or menu items mentioned
4. Include location details if mentioned (city, neighborhood, address)
5. Set confidenceScore between 0.0 and 1.0 based on how clearly the restaurant is recommended
6. Price range: $, $$, $$$, $$$$ (if mentioned or can be inferred from context), otherwise null
7. mentionedAt: approximate time in seconds only if the transcript contains timestamps, otherwise null
8. If no restaurants are recommended, return: {{"restaurants": []}}
9. Be conservative - better to miss a recommendation than include a false positive

Return only the JSON object, no additional text."""


def build_user_prompt(transcript_text: str, video_title: str) -> str:
    return _USER_PROMPT_TEMPLATE.format(title=video_title or "", transcript=transcript_text)


def parse_structured_output(text: str) -> dict[str, Any]:
    """
    Parse the model output as a JSON object.

    Strict parse first, then the widest ``{...}`` span found in the text.
    """
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        match = _JSON_OBJECT_PATTERN.search(text or "")
        if not match:
            raise ExtractionParseError(raw_text=text)
        try:
            parsed = json.loads(match.group(0))
        except ValueError as error:
            raise ExtractionParseError(f"AI response is not valid JSON: {error}", raw_text=text) from error

    if not isinstance(parsed, dict):
        raise ExtractionParseError("AI response is not a JSON object", raw_text=text)
    return parsed


def _clean_str(value: Any) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _to_confidence(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return None
    return confidence if math.isfinite(confidence) else None


def _to_seconds(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return seconds if seconds >= 0 else None


def normalize_price_range(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    token = value.strip()
    return token if token in PRICE_RANGES else None


def validate_candidates(payload: dict[str, Any]) -> list[RecommendationCandidate]:
    entries = payload.get("restaurants")
    if not isinstance(entries, list):
        return []

    candidates: list[RecommendationCandidate] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue

        name = _clean_str(entry.get("name"))
        if not name:
            continue

        confidence = _to_confidence(entry.get("confidenceScore"))
        if confidence is None:
            confidence = DEFAULT_CONFIDENCE
        elif confidence < MIN_CONFIDENCE:
            logger.debug("Dropping low-confidence candidate %s (%.2f)", name, confidence)
            continue

        candidates.append(
            RecommendationCandidate(
                name=name,
                location=_clean_str(entry.get("location")),
                address=_clean_str(entry.get("address")),
                cuisine_type=_clean_str(entry.get("cuisineType")),
                dish_mentioned=_clean_str(entry.get("dishMentioned")),
                context=_clean_str(entry.get("context")),
                confidence_score=min(confidence, 1.0),
                price_range=normalize_price_range(entry.get("priceRange")),
                mentioned_at=_to_seconds(entry.get("mentionedAt")),
            )
        )
    return candidates


class RecommendationExtractor:
    def __init__(
        self,
        client: CompletionClient,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self.client = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def extract(self, transcript_text: str, video_title: str = "") -> list[RecommendationCandidate]:
        user_prompt = build_user_prompt(transcript_text, video_title)

        try:
            completion = self.client.complete(
                SYSTEM_PROMPT,
                user_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except LLMConfigurationError as error:
            raise ExtractionProviderError(str(error), retryable=False) from error
        except ServiceError as error:
            raise ExtractionProviderError(str(error)) from error

        candidates = validate_candidates(parse_structured_output(completion))
        logger.info("Extracted %d candidate(s) for '%s'", len(candidates), (video_title or "")[:50])
        return candidates
