# foodiefind/services/listings.py
from __future__ import annotations

from collections import OrderedDict
from typing import Any

from supabase import Client

from foodiefind.services.duration import MIN_SUITABLE_DURATION_SECONDS, SHORT_FORM_MAX_SECONDS

DEFAULT_PAGE_SIZE = 20
DEFAULT_SEARCH_LIMIT = 50
MIN_SEARCH_TERM_LENGTH = 2
LONG_VIDEO_SECONDS = 600

VIDEO_LIST_SELECT = "*, influencer:influencers(channel_name, profile_image_url), recommendations:restaurant_recommendations(count)"
VIDEO_RECOMMENDATIONS_SELECT = "*, restaurant:restaurants(*), video:videos(title, influencer:influencers(channel_name))"
RESTAURANT_RECOMMENDATIONS_SELECT = (
    "*, video:videos(title, video_id, influencer:influencers(channel_name, profile_image_url))"
)
RESTAURANT_LIST_SELECT = (
    "*, recommendations:restaurant_recommendations(video:videos(title, video_id, influencer:influencers(channel_name)))"
)


def _count(query: Any) -> int:
    response = query.limit(1).execute()
    return getattr(response, "count", 0) or 0


def _first(response: Any) -> dict[str, Any] | None:
    rows = response.data or []
    return rows[0] if rows else None


# ---------------------------------------------------------------------------
# videos
# ---------------------------------------------------------------------------


def list_videos(
    supa: Client,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    processed: bool | None = None,
) -> list[dict[str, Any]]:
    offset = (max(page, 1) - 1) * limit
    query = supa.table("videos").select(VIDEO_LIST_SELECT)
    if processed is not None:
        query = query.eq("processed", processed)
    response = query.order("published_at", desc=True).range(offset, offset + limit - 1).execute()
    return response.data or []


def get_video(supa: Client, video_id: str) -> dict[str, Any] | None:
    response = (
        supa.table("videos")
        .select("*, influencer:influencers(*)")
        .eq("video_id", video_id)
        .limit(1)
        .execute()
    )
    return _first(response)


def video_recommendations(supa: Client, video_id: str) -> list[dict[str, Any]] | None:
    """Recommendations of a video addressed by its YouTube id; None when the video is unknown."""
    video = _first(supa.table("videos").select("id").eq("video_id", video_id).limit(1).execute())
    if video is None:
        return None
    response = (
        supa.table("restaurant_recommendations")
        .select(VIDEO_RECOMMENDATIONS_SELECT)
        .eq("video_id", video["id"])
        .execute()
    )
    return response.data or []


def list_unprocessed_videos(supa: Client, limit: int = 10) -> list[dict[str, Any]]:
    response = (
        supa.table("videos")
        .select("*, influencer:influencers(channel_name)")
        .eq("processed", False)
        .is_("processing_error", "null")
        .or_(f"duration_seconds.gt.{MIN_SUITABLE_DURATION_SECONDS},duration_seconds.eq.0,duration_seconds.is.null")
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return response.data or []


# ---------------------------------------------------------------------------
# influencers
# ---------------------------------------------------------------------------


def _influencer_totals(supa: Client, influencer_id: str) -> dict[str, int]:
    total_videos = _count(
        supa.table("videos").select("id", count="exact").eq("influencer_id", influencer_id)
    )
    video_rows = supa.table("videos").select("id").eq("influencer_id", influencer_id).execute().data or []
    video_ids = [row["id"] for row in video_rows if row.get("id")]
    total_restaurants = 0
    if video_ids:
        total_restaurants = _count(
            supa.table("restaurant_recommendations").select("id", count="exact").in_("video_id", video_ids)
        )
    return {"total_videos": total_videos, "total_restaurants": total_restaurants}


def list_influencers(supa: Client) -> list[dict[str, Any]]:
    rows = supa.table("influencers").select("*").order("created_at", desc=True).execute().data or []
    return [{**row, **_influencer_totals(supa, str(row["id"]))} for row in rows]


def get_influencer(supa: Client, influencer_id: str) -> dict[str, Any] | None:
    row = _first(supa.table("influencers").select("*").eq("id", influencer_id).limit(1).execute())
    if row is None:
        return None
    return {**row, **_influencer_totals(supa, influencer_id)}


def influencer_videos(supa: Client, influencer_id: str) -> list[dict[str, Any]]:
    response = (
        supa.table("videos")
        .select("*")
        .eq("influencer_id", influencer_id)
        .order("published_at", desc=True)
        .execute()
    )
    return response.data or []


def group_recommendations_by_restaurant(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Collapse recommendation rows into one entry per restaurant.

    Each entry keeps every mention, the distinct videos and the average confidence.
    """
    grouped: OrderedDict[str, dict[str, Any]] = OrderedDict()

    for row in rows:
        restaurant = row.get("restaurants") or row.get("restaurant")
        if not restaurant or not restaurant.get("id"):
            continue

        entry = grouped.get(restaurant["id"])
        if entry is None:
            entry = {**restaurant, "recommendations": [], "videos": [], "_total": 0.0}
            grouped[restaurant["id"]] = entry

        video = row.get("videos") or row.get("video")
        entry["recommendations"].append(
            {
                "confidence_score": row.get("confidence_score"),
                "context": row.get("context"),
                "dish_mentioned": row.get("dish_mentioned"),
                "mentioned_at_timestamp": row.get("mentioned_at_timestamp"),
                "video": video,
            }
        )
        if video and video not in entry["videos"]:
            entry["videos"].append(video)
        entry["_total"] += float(row.get("confidence_score") or 0)

    result = []
    for entry in grouped.values():
        total = entry.pop("_total")
        mentions = len(entry["recommendations"])
        entry["mention_count"] = mentions
        entry["average_confidence"] = round(total / mentions, 2) if mentions else 0.0
        result.append(entry)
    return result


def influencer_restaurants(supa: Client, influencer_id: str) -> list[dict[str, Any]]:
    response = (
        supa.table("restaurant_recommendations")
        .select("*, restaurants(*), videos!inner(video_id, title, thumbnail_url, published_at, influencer_id)")
        .eq("videos.influencer_id", influencer_id)
        .order("confidence_score", desc=True)
        .execute()
    )
    return group_recommendations_by_restaurant(response.data or [])


# ---------------------------------------------------------------------------
# restaurants
# ---------------------------------------------------------------------------


def list_restaurants(supa: Client) -> list[dict[str, Any]]:
    response = supa.table("restaurants").select(RESTAURANT_LIST_SELECT).order("created_at", desc=True).execute()
    return response.data or []


def get_restaurant(supa: Client, restaurant_id: str) -> dict[str, Any] | None:
    return _first(supa.table("restaurants").select("*").eq("id", restaurant_id).limit(1).execute())


def restaurant_recommendations(supa: Client, restaurant_id: str) -> list[dict[str, Any]]:
    response = (
        supa.table("restaurant_recommendations")
        .select(RESTAURANT_RECOMMENDATIONS_SELECT)
        .eq("restaurant_id", restaurant_id)
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


def top_restaurants(supa: Client, limit: int = 20) -> list[dict[str, Any]]:
    return supa.rpc("get_top_restaurants", {"limit_count": limit}).execute().data or []


def trending_restaurants(supa: Client, days_back: int = 7, limit: int = 20) -> list[dict[str, Any]]:
    payload = {"days_back": days_back, "limit_count": limit}
    return supa.rpc("get_trending_restaurants", payload).execute().data or []


def influencer_stats(supa: Client, influencer_id: str) -> dict[str, Any] | None:
    data = supa.rpc("get_influencer_stats", {"influencer_uuid": influencer_id}).execute().data
    if isinstance(data, list):
        return data[0] if data else None
    return data


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------


def build_search_filter(query: str | None) -> str | None:
    """
    PostgREST ``or`` filter matching any term against name, cuisine or city.

    A single-word query is used as-is; in a multi-word query, terms shorter
    than two characters are ignored.
    """
    text = (query or "").strip()
    if not text:
        return None

    terms = text.lower().split()
    if len(terms) > 1:
        terms = [term for term in terms if len(term) >= MIN_SEARCH_TERM_LENGTH]
    if not terms:
        return None

    conditions = [
        f"{column}.ilike.%{term}%"
        for term in terms
        for column in ("name", "cuisine_type", "city")
    ]
    return ",".join(conditions)


def search_restaurants(
    supa: Client,
    query: str | None = None,
    *,
    cuisine: str | None = None,
    city: str | None = None,
    price: str | None = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[dict[str, Any]]:
    request = supa.table("restaurants").select("*, recommendation_count:restaurant_recommendations(count)")

    or_filter = build_search_filter(query)
    if or_filter:
        request = request.or_(or_filter)
    if cuisine:
        request = request.eq("cuisine_type", cuisine)
    if city:
        request = request.ilike("city", f"%{city}%")
    if price:
        request = request.eq("price_range", price)

    response = request.order("created_at", desc=True).limit(limit).execute()
    return response.data or []


# ---------------------------------------------------------------------------
# analytics
# ---------------------------------------------------------------------------


def _percent(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


def summarize_video_stats(rows: list[dict[str, Any]]) -> dict[str, Any]:
    durations = [(int(row.get("duration_seconds") or 0), row) for row in rows]

    shorts = sum(1 for seconds, _ in durations if seconds <= SHORT_FORM_MAX_SECONDS)
    short_medium = sum(
        1 for seconds, _ in durations if SHORT_FORM_MAX_SECONDS < seconds <= MIN_SUITABLE_DURATION_SECONDS
    )
    suitable_rows = [row for seconds, row in durations if seconds > MIN_SUITABLE_DURATION_SECONDS]
    long_videos = sum(1 for seconds, _ in durations if seconds > LONG_VIDEO_SECONDS)
    suitable_processed = sum(1 for row in suitable_rows if row.get("processed"))

    return {
        "total": len(rows),
        "shorts": shorts,
        "short_medium": short_medium,
        "suitable": len(suitable_rows),
        "long": long_videos,
        "processed": sum(1 for row in rows if row.get("processed")),
        "failed": sum(1 for row in rows if row.get("processing_error")),
        "suitable_processed": suitable_processed,
        "suitable_processing_rate": _percent(suitable_processed, len(suitable_rows)),
        "distribution": {
            "shorts": shorts,
            "short": short_medium,
            "medium": len(suitable_rows) - long_videos,
            "long": long_videos,
        },
    }


def video_stats(supa: Client) -> dict[str, Any]:
    response = (
        supa.table("videos")
        .select("duration_seconds, processed, processing_error")
        .not_.is_("duration_seconds", "null")
        .execute()
    )
    return summarize_video_stats(response.data or [])
