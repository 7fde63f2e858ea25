from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from foodiefind.app.domain.errors import DuplicateRecommendationError, RepositoryError, UserLinkExistsError
from foodiefind.app.domain.models import (
    ChannelInfo,
    Influencer,
    RecommendationCandidate,
    RecommendationEdge,
    Restaurant,
    Video,
    VideoDetails,
)
from foodiefind.app.infra.db.base import (
    InfluencerRepository,
    RecommendationRepository,
    RestaurantRepository,
    UserRepository,
    VideoRepository,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_int(value: object, default: int = 0) -> int:
    return int(value) if value else default


def _safe_float(value: object) -> float | None:
    return float(value) if value is not None else None


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def _row_to_video(row: dict[str, Any]) -> Video:
    return Video(
        id=str(row["id"]),
        video_id=str(row["video_id"]),
        title=str(row.get("title") or ""),
        influencer_id=_safe_str(row.get("influencer_id")),
        description=_safe_str(row.get("description")),
        duration=_safe_str(row.get("duration")),
        duration_seconds=_safe_int(row.get("duration_seconds")),
        transcript=_safe_str(row.get("transcript")),
        processed=bool(row.get("processed")),
        processing_error=_safe_str(row.get("processing_error")),
        thumbnail_url=_safe_str(row.get("thumbnail_url")),
        published_at=_parse_datetime(row.get("published_at")),
        view_count=_safe_int(row.get("view_count")),
        like_count=_safe_int(row.get("like_count")),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _row_to_influencer(row: dict[str, Any]) -> Influencer:
    return Influencer(
        id=str(row["id"]),
        channel_id=str(row["channel_id"]),
        channel_name=str(row.get("channel_name") or ""),
        channel_url=_safe_str(row.get("channel_url")),
        subscriber_count=_safe_int(row.get("subscriber_count")),
        video_count=_safe_int(row.get("video_count")),
        description=_safe_str(row.get("description")),
        profile_image_url=_safe_str(row.get("profile_image_url")),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _row_to_restaurant(row: dict[str, Any]) -> Restaurant:
    return Restaurant(
        id=str(row["id"]),
        name=str(row["name"]),
        address=_safe_str(row.get("address")),
        city=_safe_str(row.get("city")),
        state=_safe_str(row.get("state")),
        country=_safe_str(row.get("country")),
        cuisine_type=_safe_str(row.get("cuisine_type")),
        price_range=_safe_str(row.get("price_range")),
        phone=_safe_str(row.get("phone")),
        website=_safe_str(row.get("website")),
        google_maps_url=_safe_str(row.get("google_maps_url")),
        latitude=_safe_float(row.get("latitude")),
        longitude=_safe_float(row.get("longitude")),
        rating=_safe_float(row.get("rating")),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _row_to_edge(row: dict[str, Any]) -> RecommendationEdge:
    timestamp = row.get("mentioned_at_timestamp")
    return RecommendationEdge(
        id=str(row["id"]),
        video_id=str(row["video_id"]),
        restaurant_id=str(row["restaurant_id"]),
        confidence_score=float(row.get("confidence_score") or 0.0),
        dish_mentioned=_safe_str(row.get("dish_mentioned")),
        context=_safe_str(row.get("context")),
        mentioned_at_timestamp=int(timestamp) if timestamp is not None else None,
        created_at=_parse_datetime(row.get("created_at")),
    )


def _escape_like(value: str) -> str:
    return value.replace("%", r"\%").replace("_", r"\_")


def create_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


class SupabaseVideoRepository(VideoRepository):
    TABLE_NAME = "videos"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def _update(self, video_id: str, data: dict[str, Any], operation: str) -> None:
        data["updated_at"] = _now_utc().isoformat()
        try:
            self._client.table(self.TABLE_NAME).update(data).eq("video_id", video_id).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            logger.error("Error during %s for video %s: %s", operation, video_id, error)
            raise RepositoryError(operation, str(error)) from error

    def get_video(self, video_id: str) -> Video | None:
        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("video_id", video_id)
                .limit(1)
                .execute()
            )
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("get_video", str(error)) from error
        return _row_to_video(result.data[0]) if result.data else None

    def create_video(self, details: VideoDetails, influencer_id: str) -> Video:
        data = {
            "id": str(uuid4()),
            "video_id": details.video_id,
            "influencer_id": influencer_id,
            "title": details.title,
            "description": details.description,
            "duration": details.duration,
            "duration_seconds": details.duration_seconds,
            "thumbnail_url": details.thumbnail_url,
            "published_at": details.published_at,
            "view_count": details.view_count,
            "like_count": details.like_count,
            "processed": False,
            "created_at": _now_utc().isoformat(),
        }

        try:
            result = self._client.table(self.TABLE_NAME).insert(data).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            logger.error("Error creating video %s: %s", details.video_id, error)
            raise RepositoryError("create_video", str(error)) from error

        if not result.data:
            raise RepositoryError("create_video", "insert returned no rows")

        logger.info("Created video: video_id=%s, title=%s", details.video_id, details.title[:50])
        return _row_to_video(result.data[0])

    def update_transcript(self, video_id: str, transcript: str) -> None:
        self._update(video_id, {"transcript": transcript}, "update_transcript")

    def mark_processed(self, video_id: str) -> None:
        self._update(video_id, {"processed": True, "processing_error": None}, "mark_processed")

    def mark_failed(self, video_id: str, error_message: str) -> None:
        self._update(video_id, {"processed": False, "processing_error": error_message}, "mark_failed")

    def reset_processing(self, video_id: str) -> None:
        self._update(video_id, {"processed": False, "processing_error": None}, "reset_processing")

    def find_unprocessed(self, limit: int, min_duration_seconds: int) -> list[Video]:
        duration_filter = (
            f"duration_seconds.gt.{min_duration_seconds},"
            "duration_seconds.eq.0,"
            "duration_seconds.is.null"
        )
        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("processed", False)
                .is_("processing_error", "null")
                .or_(duration_filter)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("find_unprocessed", str(error)) from error
        return [_row_to_video(row) for row in result.data or []]

    def find_failed(self, limit: int) -> list[Video]:
        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("processed", False)
                .not_.is_("processing_error", "null")
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("find_failed", str(error)) from error
        return [_row_to_video(row) for row in result.data or []]

    def _select_count(self) -> Any:
        return self._client.table(self.TABLE_NAME).select("id", count="exact")

    def _count(self, query: Any) -> int:
        result = query.limit(1).execute()
        return int(getattr(result, "count", 0) or 0)

    def processing_counts(self) -> dict[str, int]:
        try:
            total = self._count(self._select_count())
            processed = self._count(self._select_count().eq("processed", True))
            failed = self._count(
                self._select_count().eq("processed", False).not_.is_("processing_error", "null")
            )
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("processing_counts", str(error)) from error

        return {
            "total": total,
            "processed": processed,
            "failed": failed,
            "pending": max(total - processed - failed, 0),
        }

    def delete_video(self, video_id: str) -> bool:
        try:
            result = self._client.table(self.TABLE_NAME).delete().eq("video_id", video_id).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("delete_video", str(error)) from error
        return bool(result.data)


class SupabaseInfluencerRepository(InfluencerRepository):
    TABLE_NAME = "influencers"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def _get_one(self, column: str, value: str) -> Influencer | None:
        try:
            result = self._client.table(self.TABLE_NAME).select("*").eq(column, value).limit(1).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("get_influencer", str(error)) from error
        return _row_to_influencer(result.data[0]) if result.data else None

    def get_influencer(self, influencer_id: str) -> Influencer | None:
        return self._get_one("id", influencer_id)

    def get_by_channel_id(self, channel_id: str) -> Influencer | None:
        return self._get_one("channel_id", channel_id)

    def create_influencer(self, channel: ChannelInfo) -> Influencer:
        data = {
            "id": str(uuid4()),
            "channel_id": channel.channel_id,
            "channel_name": channel.name,
            "channel_url": channel.channel_url,
            "description": channel.description,
            "profile_image_url": channel.profile_image_url,
            "subscriber_count": channel.subscriber_count,
            "video_count": channel.video_count,
            "created_at": _now_utc().isoformat(),
        }

        try:
            result = self._client.table(self.TABLE_NAME).insert(data).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("create_influencer", str(error)) from error

        if not result.data:
            raise RepositoryError("create_influencer", "insert returned no rows")

        logger.info("Created influencer: channel_id=%s, name=%s", channel.channel_id, channel.name)
        return _row_to_influencer(result.data[0])


class SupabaseRestaurantRepository(RestaurantRepository):
    TABLE_NAME = "restaurants"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def find_by_name(self, name: str, city: str | None = None, limit: int = 5) -> list[Restaurant]:
        query = self._client.table(self.TABLE_NAME).select("*").ilike("name", f"%{_escape_like(name)}%")
        if city:
            query = query.ilike("city", f"%{_escape_like(city)}%")

        try:
            result = query.order("created_at").limit(limit).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("find_by_name", str(error)) from error
        return [_row_to_restaurant(row) for row in result.data or []]

    def create_restaurant(self, fields: dict[str, Any]) -> Restaurant:
        data = {"id": str(uuid4()), "created_at": _now_utc().isoformat(), **fields}

        try:
            result = self._client.table(self.TABLE_NAME).insert(data).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("create_restaurant", str(error)) from error

        if not result.data:
            raise RepositoryError("create_restaurant", "insert returned no rows")
        return _row_to_restaurant(result.data[0])

    def get_restaurant(self, restaurant_id: str) -> Restaurant | None:
        try:
            result = self._client.table(self.TABLE_NAME).select("*").eq("id", restaurant_id).limit(1).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("get_restaurant", str(error)) from error
        return _row_to_restaurant(result.data[0]) if result.data else None

    def list_restaurants(self) -> list[Restaurant]:
        try:
            result = self._client.table(self.TABLE_NAME).select("*").order("created_at").execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("list_restaurants", str(error)) from error
        return [_row_to_restaurant(row) for row in result.data or []]

    def update_restaurant(self, restaurant_id: str, updates: dict[str, Any]) -> Restaurant:
        data = {**updates, "updated_at": _now_utc().isoformat()}
        try:
            result = self._client.table(self.TABLE_NAME).update(data).eq("id", restaurant_id).execute()
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("update_restaurant", str(error)) from error

        if not result.data:
            raise RepositoryError("update_restaurant", f"restaurant {restaurant_id} not updated")
        return _row_to_restaurant(result.data[0])


class SupabaseRecommendationRepository(RecommendationRepository):
    TABLE_NAME = "restaurant_recommendations"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def find_edge(self, video_pk: str, restaurant_id: str) -> RecommendationEdge | None:
        try:
            result = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("video_id", video_pk)
                .eq("restaurant_id", restaurant_id)
                .limit(1)
                .execute()
            )
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError("find_edge", str(error)) from error
        return _row_to_edge(result.data[0]) if result.data else None

    def create_edge(
        self,
        video_pk: str,
        restaurant_id: str,
        candidate: RecommendationCandidate,
    ) -> RecommendationEdge:
        data = {
            "id": str(uuid4()),
            "video_id": video_pk,
            "restaurant_id": restaurant_id,
            "confidence_score": candidate.confidence_score,
            "dish_mentioned": candidate.dish_mentioned,
            "context": candidate.context,
            "mentioned_at_timestamp": candidate.mentioned_at,
            "created_at": _now_utc().isoformat(),
        }

        try:
            result = self._client.table(self.TABLE_NAME).insert(data).execute()
        except APIError as error:
            if error.code == UNIQUE_VIOLATION:
                raise DuplicateRecommendationError(video_pk, restaurant_id) from error
            raise RepositoryError("create_edge", str(error)) from error
        except (ConnectionError, TimeoutError, httpx.HTTPError) as error:
            raise RepositoryError("create_edge", str(error)) from error

        if not result.data:
            raise RepositoryError("create_edge", "insert returned no rows")
        return _row_to_edge(result.data[0])


class SupabaseUserRepository(UserRepository):
    PROFILES_TABLE = "user_profiles"
    FAVORITES_TABLE = "user_favorites"
    FOLLOWS_TABLE = "user_follows"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def _insert_link(self, table: str, data: dict[str, Any], relation: str, target_id: str) -> dict[str, Any]:
        try:
            result = self._client.table(table).insert(data).execute()
        except APIError as error:
            if error.code == UNIQUE_VIOLATION:
                raise UserLinkExistsError(relation, target_id) from error
            raise RepositoryError(f"insert {table}", str(error)) from error
        except (ConnectionError, TimeoutError, httpx.HTTPError) as error:
            raise RepositoryError(f"insert {table}", str(error)) from error

        if not result.data:
            raise RepositoryError(f"insert {table}", "insert returned no rows")
        return result.data[0]

    def _select(self, operation: str, query: Any) -> list[dict[str, Any]]:
        try:
            return query.execute().data or []
        except (ConnectionError, TimeoutError, httpx.HTTPError, APIError) as error:
            raise RepositoryError(operation, str(error)) from error

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        rows = self._select(
            "get_profile",
            self._client.table(self.PROFILES_TABLE).select("*").eq("id", user_id).limit(1),
        )
        return rows[0] if rows else None

    def create_profile(self, user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        data = {"id": user_id, "created_at": _now_utc().isoformat(), **fields}
        rows = self._select("create_profile", self._client.table(self.PROFILES_TABLE).insert(data))
        if not rows:
            raise RepositoryError("create_profile", "insert returned no rows")
        return rows[0]

    def update_profile(self, user_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        data = {**updates, "updated_at": _now_utc().isoformat()}
        rows = self._select(
            "update_profile",
            self._client.table(self.PROFILES_TABLE).update(data).eq("id", user_id),
        )
        return rows[0] if rows else None

    def list_favorites(self, user_id: str) -> list[dict[str, Any]]:
        return self._select(
            "list_favorites",
            self._client.table(self.FAVORITES_TABLE)
            .select("*, restaurant:restaurants(*)")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
        )

    def add_favorite(self, user_id: str, restaurant_id: str) -> dict[str, Any]:
        data = {"user_id": user_id, "restaurant_id": restaurant_id, "created_at": _now_utc().isoformat()}
        return self._insert_link(self.FAVORITES_TABLE, data, "favorites", restaurant_id)

    def remove_favorite(self, user_id: str, restaurant_id: str) -> None:
        self._select(
            "remove_favorite",
            self._client.table(self.FAVORITES_TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("restaurant_id", restaurant_id),
        )

    def follow(self, user_id: str, influencer_id: str) -> dict[str, Any]:
        data = {"user_id": user_id, "influencer_id": influencer_id, "created_at": _now_utc().isoformat()}
        return self._insert_link(self.FOLLOWS_TABLE, data, "follows", influencer_id)

    def unfollow(self, user_id: str, influencer_id: str) -> None:
        self._select(
            "unfollow",
            self._client.table(self.FOLLOWS_TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("influencer_id", influencer_id),
        )

    def list_following(self, user_id: str) -> list[dict[str, Any]]:
        return self._select(
            "list_following",
            self._client.table(self.FOLLOWS_TABLE)
            .select("*, influencer:influencers(*)")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
        )

    def personalized_recommendations(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        return self._select(
            "personalized_recommendations",
            self._client.rpc("get_personalized_recommendations", {"user_uuid": user_id, "limit_count": limit}),
        )
