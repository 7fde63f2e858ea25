# foodiefind/app/infra/db/base.py
"""
Abstract repositories used by the processing pipeline.
These interfaces allow swapping the store (or a test stub) without touching the pipeline.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from foodiefind.app.domain.models import (
    ChannelInfo,
    Influencer,
    RecommendationCandidate,
    RecommendationEdge,
    Restaurant,
    Video,
    VideoDetails,
)


class VideoRepository(ABC):
    """
    Video rows keyed by their YouTube id.

    Implementations:
    - SupabaseVideoRepository: `videos` table in Supabase
    """

    @abstractmethod
    def get_video(self, video_id: str) -> Optional[Video]:
        pass

    @abstractmethod
    def create_video(self, details: VideoDetails, influencer_id: str) -> Video:
        pass

    @abstractmethod
    def update_transcript(self, video_id: str, transcript: str) -> None:
        pass

    @abstractmethod
    def mark_processed(self, video_id: str) -> None:
        """Set processed=True and clear any previous processing error."""
        pass

    @abstractmethod
    def mark_failed(self, video_id: str, error_message: str) -> None:
        """Set processed=False with the error text, leaving the video eligible for reprocessing."""
        pass

    @abstractmethod
    def reset_processing(self, video_id: str) -> None:
        """Clear processed and processing_error so the video is pending again."""
        pass

    @abstractmethod
    def find_unprocessed(self, limit: int, min_duration_seconds: int) -> list[Video]:
        """
        Pending videos, newest first.

        Args:
            limit: Maximum number of videos returned
            min_duration_seconds: Videos at or below this duration are excluded,
                unknown durations are kept
        """
        pass

    @abstractmethod
    def find_failed(self, limit: int) -> list[Video]:
        pass

    @abstractmethod
    def processing_counts(self) -> dict[str, int]:
        """Return total, processed, failed and pending counts."""
        pass

    @abstractmethod
    def delete_video(self, video_id: str) -> bool:
        pass


class InfluencerRepository(ABC):
    @abstractmethod
    def get_influencer(self, influencer_id: str) -> Optional[Influencer]:
        pass

    @abstractmethod
    def get_by_channel_id(self, channel_id: str) -> Optional[Influencer]:
        pass

    @abstractmethod
    def create_influencer(self, channel: ChannelInfo) -> Influencer:
        pass


class RestaurantRepository(ABC):
    @abstractmethod
    def find_by_name(self, name: str, city: Optional[str] = None, limit: int = 5) -> list[Restaurant]:
        """Case-insensitive substring match on name, optionally narrowed by city."""
        pass

    @abstractmethod
    def create_restaurant(self, fields: dict[str, Any]) -> Restaurant:
        pass

    @abstractmethod
    def get_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        pass

    @abstractmethod
    def list_restaurants(self) -> list[Restaurant]:
        pass

    @abstractmethod
    def update_restaurant(self, restaurant_id: str, updates: dict[str, Any]) -> Restaurant:
        pass


class RecommendationRepository(ABC):
    @abstractmethod
    def find_edge(self, video_pk: str, restaurant_id: str) -> Optional[RecommendationEdge]:
        pass

    @abstractmethod
    def create_edge(
        self,
        video_pk: str,
        restaurant_id: str,
        candidate: RecommendationCandidate,
    ) -> RecommendationEdge:
        """
        Insert the edge for (video, restaurant).

        Raises:
            DuplicateRecommendationError: If the pair already exists
        """
        pass


class UserRepository(ABC):
    """Profiles, favorites and follows of authenticated users."""

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[dict[str, Any]]:
        pass

    @abstractmethod
    def create_profile(self, user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        pass

    @abstractmethod
    def update_profile(self, user_id: str, updates: dict[str, Any]) -> Optional[dict[str, Any]]:
        pass

    @abstractmethod
    def list_favorites(self, user_id: str) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    def add_favorite(self, user_id: str, restaurant_id: str) -> dict[str, Any]:
        """Raises UserLinkExistsError when the restaurant is already a favorite."""
        pass

    @abstractmethod
    def remove_favorite(self, user_id: str, restaurant_id: str) -> None:
        pass

    @abstractmethod
    def follow(self, user_id: str, influencer_id: str) -> dict[str, Any]:
        """Raises UserLinkExistsError when the influencer is already followed."""
        pass

    @abstractmethod
    def unfollow(self, user_id: str, influencer_id: str) -> None:
        pass

    @abstractmethod
    def list_following(self, user_id: str) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    def personalized_recommendations(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        pass
