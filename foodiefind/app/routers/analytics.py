# foodiefind/app/routers/analytics.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from supabase import Client

from foodiefind.app.deps import get_supabase
from foodiefind.services import listings

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/video-stats")
async def video_stats(supa: Client = Depends(get_supabase)) -> dict[str, Any]:
    return listings.video_stats(supa)
