# foodiefind/app/routers/influencers.py
from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool
from supabase import Client

from foodiefind.app.deps import get_catalog_service, get_supabase, require_admin
from foodiefind.app.domain.errors import ProcessingError
from foodiefind.app.schemas.catalog import AddInfluencerRequest, SyncVideosRequest, SyncVideosResponse
from foodiefind.app.services.catalog import CatalogService
from foodiefind.services import listings
from foodiefind.services.errors import ServiceError
from foodiefind.services.ids import extract_channel_id

from .common import to_http_exception

router = APIRouter(prefix="/api/influencers", tags=["influencers"])


@router.get("/")
async def list_influencers(supa: Client = Depends(get_supabase)) -> list[dict[str, Any]]:
    return listings.list_influencers(supa)


@router.get("/{influencer_id}")
async def get_influencer(influencer_id: str, supa: Client = Depends(get_supabase)) -> dict[str, Any]:
    influencer = listings.get_influencer(supa, influencer_id)
    if influencer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Influencer not found")
    return influencer


@router.post("/", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def add_influencer(
    payload: AddInfluencerRequest,
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    if not payload.channelUrl and not payload.channelId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Channel URL or ID is required")

    channel_id = payload.channelId or extract_channel_id(payload.channelUrl or "")
    if not channel_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid YouTube channel URL")

    try:
        influencer = await run_in_threadpool(catalog.add_influencer, channel_id)
    except (ProcessingError, ServiceError) as exc:
        raise to_http_exception(exc)
    return asdict(influencer)


@router.get("/{influencer_id}/videos")
async def influencer_videos(influencer_id: str, supa: Client = Depends(get_supabase)) -> list[dict[str, Any]]:
    return listings.influencer_videos(supa, influencer_id)


@router.get("/{influencer_id}/restaurants")
async def influencer_restaurants(influencer_id: str, supa: Client = Depends(get_supabase)) -> list[dict[str, Any]]:
    return listings.influencer_restaurants(supa, influencer_id)


@router.get("/{influencer_id}/stats")
async def influencer_stats(influencer_id: str, supa: Client = Depends(get_supabase)) -> dict[str, Any]:
    stats = listings.influencer_stats(supa, influencer_id)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Influencer not found")
    return stats


@router.post(
    "/{influencer_id}/sync-videos",
    response_model=SyncVideosResponse,
    dependencies=[Depends(require_admin)],
)
async def sync_videos(
    influencer_id: str,
    payload: SyncVideosRequest | None = Body(default=None),
    catalog: CatalogService = Depends(get_catalog_service),
) -> SyncVideosResponse:
    max_results = payload.maxResults if payload else SyncVideosRequest().maxResults
    try:
        result = await run_in_threadpool(catalog.sync_influencer_videos, influencer_id, max_results)
    except (ProcessingError, ServiceError) as exc:
        raise to_http_exception(exc)

    return SyncVideosResponse(
        message="Video sync completed",
        synced=len(result.added),
        skipped=result.skipped,
        failed=result.failed,
        total=len(result.added) + result.skipped + result.failed,
    )
