# foodiefind/app/domain/models.py
"""
Domain models for the video-to-recommendation pipeline.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class VideoState(str, Enum):
    """Processing state derived from the stored flags of a video."""
    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    FAILED = "FAILED"


class TranscriptSource(str, Enum):
    CAPTIONS = "captions"
    FALLBACK = "fallback"
    DESCRIPTION = "description"
    STORED = "stored"


class ResolutionPolicy(str, Enum):
    """How a candidate is matched against already stored restaurants."""
    FIRST_MATCH_NO_MERGE = "FIRST_MATCH_NO_MERGE"


class EdgeConflictPolicy(str, Enum):
    """What happens when a (video, restaurant) edge already exists."""
    SKIP_EXISTING = "SKIP_EXISTING"


PRICE_RANGES = ("$", "$$", "$$$", "$$$$")


@dataclass
class Influencer:
    id: str
    channel_id: str
    channel_name: str
    channel_url: Optional[str] = None
    subscriber_count: int = 0
    video_count: int = 0
    description: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class Video:
    """
    A YouTube video owned by an influencer.

    `id` is the store identity, `video_id` is the YouTube id.
    """
    id: str
    video_id: str
    title: str
    influencer_id: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    duration_seconds: int = 0
    transcript: Optional[str] = None
    processed: bool = False
    processing_error: Optional[str] = None
    thumbnail_url: Optional[str] = None
    published_at: Optional[datetime] = None
    view_count: int = 0
    like_count: int = 0
    created_at: Optional[datetime] = None

    @property
    def state(self) -> VideoState:
        if self.processed:
            return VideoState.PROCESSED
        if self.processing_error:
            return VideoState.FAILED
        return VideoState.PENDING


@dataclass
class VideoDetails:
    """Metadata fetched from YouTube before a video is stored."""
    video_id: str
    title: str
    channel_id: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    duration_seconds: int = 0
    thumbnail_url: Optional[str] = None
    published_at: Optional[str] = None
    view_count: int = 0
    like_count: int = 0


@dataclass
class ChannelInfo:
    channel_id: str
    name: str
    channel_url: str
    description: Optional[str] = None
    profile_image_url: Optional[str] = None
    subscriber_count: int = 0
    video_count: int = 0


@dataclass
class CaptionEntry:
    """One caption line with its playback offset."""
    text: str
    offset_seconds: float


@dataclass
class TranscriptResult:
    text: str
    source: TranscriptSource
    timestamped: Optional[list[CaptionEntry]] = None


@dataclass
class RecommendationCandidate:
    """An unpersisted restaurant mention proposed by the language model."""
    name: str
    location: Optional[str] = None
    address: Optional[str] = None
    cuisine_type: Optional[str] = None
    dish_mentioned: Optional[str] = None
    context: Optional[str] = None
    confidence_score: float = 0.8
    price_range: Optional[str] = None
    mentioned_at: Optional[int] = None


@dataclass
class Restaurant:
    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    cuisine_type: Optional[str] = None
    price_range: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    google_maps_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    created_at: Optional[datetime] = None


@dataclass
class RecommendationEdge:
    """Persisted link between one video and one restaurant."""
    id: str
    video_id: str
    restaurant_id: str
    confidence_score: float
    dish_mentioned: Optional[str] = None
    context: Optional[str] = None
    mentioned_at_timestamp: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class PersistedRecommendation:
    restaurant: Restaurant
    recommendation: RecommendationEdge
    restaurant_created: bool = False


@dataclass
class ProcessingOutcome:
    """Result of running the pipeline on a single video."""
    video_id: str
    transcript_source: TranscriptSource
    extracted_count: int = 0
    recommendations: list[PersistedRecommendation] = field(default_factory=list)
    duplicate_count: int = 0
    failed_count: int = 0

    @property
    def processed_count(self) -> int:
        return len(self.recommendations)


@dataclass
class BatchFailure:
    video_id: str
    title: Optional[str]
    error: str


@dataclass
class BatchReport:
    total: int = 0
    processed: int = 0
    failed: int = 0
    outcomes: list[ProcessingOutcome] = field(default_factory=list)
    errors: list[BatchFailure] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "processed": self.processed,
            "failed": self.failed,
            "videos_processed": [
                {"videoId": outcome.video_id, "recommendations": outcome.processed_count}
                for outcome in self.outcomes
            ],
            "errors": [
                {"videoId": failure.video_id, "title": failure.title, "error": failure.error}
                for failure in self.errors
            ],
        }
