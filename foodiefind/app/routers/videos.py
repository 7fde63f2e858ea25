# foodiefind/app/routers/videos.py
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from starlette.concurrency import run_in_threadpool
from supabase import Client

from foodiefind.app.deps import get_catalog_service, get_supabase, get_video_repository, require_admin
from foodiefind.app.domain.errors import ProcessingError, VideoNotFoundError
from foodiefind.app.infra.db.base import VideoRepository
from foodiefind.app.schemas.catalog import AddVideoRequest
from foodiefind.app.services.catalog import CatalogService
from foodiefind.services import listings
from foodiefind.services.errors import ServiceError
from foodiefind.services.ids import extract_video_id

from .common import to_http_exception

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.get("/")
async def list_videos(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    processed: Optional[bool] = None,
    supa: Client = Depends(get_supabase),
) -> list[dict[str, Any]]:
    return listings.list_videos(supa, page=page, limit=limit, processed=processed)


@router.get("/status/unprocessed")
async def list_unprocessed(
    limit: int = Query(default=10, ge=1, le=100),
    supa: Client = Depends(get_supabase),
) -> list[dict[str, Any]]:
    return listings.list_unprocessed_videos(supa, limit)


@router.get("/{video_id}")
async def get_video(video_id: str, supa: Client = Depends(get_supabase)) -> dict[str, Any]:
    video = listings.get_video(supa, video_id)
    if video is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
    return video


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def add_video(
    payload: AddVideoRequest,
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    if not payload.videoUrl and not payload.videoId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Video URL or ID is required")

    video_id = payload.videoId or extract_video_id(payload.videoUrl or "")
    if not video_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid YouTube video URL")

    try:
        video = await run_in_threadpool(catalog.add_video, video_id)
    except (ProcessingError, ServiceError) as exc:
        raise to_http_exception(exc)
    return asdict(video)


@router.get("/{video_id}/recommendations")
async def video_recommendations(video_id: str, supa: Client = Depends(get_supabase)) -> list[dict[str, Any]]:
    recommendations = listings.video_recommendations(supa, video_id)
    if recommendations is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
    return recommendations


@router.delete("/{video_id}", dependencies=[Depends(require_admin)])
async def delete_video(
    video_id: str,
    videos: VideoRepository = Depends(get_video_repository),
) -> dict[str, str]:
    try:
        deleted = videos.delete_video(video_id)
        if not deleted:
            raise VideoNotFoundError(video_id)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return {"message": "Video deleted successfully"}
