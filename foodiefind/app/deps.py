# foodiefind/app/deps.py
from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from foodiefind.app.config import settings
from foodiefind.app.infra.db.base import (
    InfluencerRepository,
    RecommendationRepository,
    RestaurantRepository,
    UserRepository,
    VideoRepository,
)
from foodiefind.app.infra.db.supabase_repo import (
    SupabaseInfluencerRepository,
    SupabaseRecommendationRepository,
    SupabaseRestaurantRepository,
    SupabaseUserRepository,
    SupabaseVideoRepository,
)
from foodiefind.app.services.catalog import CatalogService
from foodiefind.app.services.processing_pipeline import ProcessingOrchestrator
from foodiefind.services.extractor import RecommendationExtractor
from foodiefind.services.fetcher import VideoFetcher
from foodiefind.services.gemini_client import GeminiClient
from foodiefind.services.maps import MapsEnricher, PlacesClient
from foodiefind.services.resolver import RestaurantResolver
from foodiefind.services.timestamps import TimestampReconciler
from foodiefind.services.transcripts import (
    RapidApiTranscriptProvider,
    TranscriptAcquirer,
    YouTubeCaptionSource,
)

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL), settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None
    avatar_url: str | None = None


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Validate the Supabase access token from ``Authorization: Bearer <token>``
    and return the minimal user data.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    try:
        res = supa.auth.get_user(cred.credentials)
        user = res.user if res else None
        if not user:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

        meta = getattr(user, "user_metadata", None) or {}
        if not isinstance(meta, dict):
            meta = {}

        return CurrentUser(
            id=str(user.id),
            email=user.email,
            name=meta.get("full_name") or meta.get("name"),
            avatar_url=meta.get("avatar_url"),
        )
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid/expired token")


def require_admin(x_admin_key: str | None = Header(default=None)) -> None:
    """Guard for endpoints that trigger processing or mutate the catalog."""
    expected = settings.ADMIN_API_KEY
    if not expected:
        if settings.APP_ENV == "local":
            return
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access is not configured")

    if not x_admin_key or not secrets.compare_digest(x_admin_key, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin key")


def get_video_repository(supa: Client = Depends(get_supabase)) -> VideoRepository:
    return SupabaseVideoRepository(supa)


def get_influencer_repository(supa: Client = Depends(get_supabase)) -> InfluencerRepository:
    return SupabaseInfluencerRepository(supa)


def get_restaurant_repository(supa: Client = Depends(get_supabase)) -> RestaurantRepository:
    return SupabaseRestaurantRepository(supa)


def get_recommendation_repository(supa: Client = Depends(get_supabase)) -> RecommendationRepository:
    return SupabaseRecommendationRepository(supa)


def get_user_repository(supa: Client = Depends(get_supabase)) -> UserRepository:
    return SupabaseUserRepository(supa)


def get_fetcher() -> VideoFetcher:
    return VideoFetcher()


def get_catalog_service(
    videos: VideoRepository = Depends(get_video_repository),
    influencers: InfluencerRepository = Depends(get_influencer_repository),
    fetcher: VideoFetcher = Depends(get_fetcher),
) -> CatalogService:
    return CatalogService(videos, influencers, fetcher)


def get_orchestrator(
    videos: VideoRepository = Depends(get_video_repository),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    recommendations: RecommendationRepository = Depends(get_recommendation_repository),
) -> ProcessingOrchestrator:
    acquirer = TranscriptAcquirer(
        YouTubeCaptionSource(),
        RapidApiTranscriptProvider(settings.RAPIDAPI_KEY, settings.RAPIDAPI_HOST),
    )
    extractor = RecommendationExtractor(
        GeminiClient(settings.gemini_api_key, model_name=settings.GEMINI_MODEL),
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
    )
    return ProcessingOrchestrator(
        videos=videos,
        recommendations=recommendations,
        acquirer=acquirer,
        extractor=extractor,
        reconciler=TimestampReconciler(),
        resolver=RestaurantResolver(restaurants),
    )


def get_maps_enricher(
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> MapsEnricher:
    return MapsEnricher(PlacesClient(settings.GOOGLE_MAPS_API_KEY), restaurants)
