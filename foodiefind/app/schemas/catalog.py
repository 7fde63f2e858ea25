# foodiefind/app/schemas/catalog.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class AddVideoRequest(BaseModel):
    videoUrl: Optional[str] = None
    videoId: Optional[str] = None


class AddInfluencerRequest(BaseModel):
    channelUrl: Optional[str] = None
    channelId: Optional[str] = None


class SyncVideosRequest(BaseModel):
    maxResults: int = Field(default=50, ge=1, le=50)


class SyncVideosResponse(BaseModel):
    message: str
    synced: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0


class EnrichResponse(BaseModel):
    message: str
    enhanced: int = 0
    failed: int = 0
    total: int = 0
