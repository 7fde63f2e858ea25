# foodiefind/app/routers/restaurants.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from starlette.concurrency import run_in_threadpool
from supabase import Client

from foodiefind.app.deps import get_maps_enricher, get_supabase, require_admin
from foodiefind.app.schemas.catalog import EnrichResponse
from foodiefind.services import listings
from foodiefind.services.maps import MapsEnricher

router = APIRouter(prefix="/api/restaurants", tags=["restaurants"])


@router.get("/")
async def list_restaurants(supa: Client = Depends(get_supabase)) -> list[dict[str, Any]]:
    return listings.list_restaurants(supa)


@router.get("/top")
async def top_restaurants(
    limit: int = Query(default=20, ge=1, le=100),
    supa: Client = Depends(get_supabase),
) -> list[dict[str, Any]]:
    return listings.top_restaurants(supa, limit)


@router.get("/trending")
async def trending_restaurants(
    days: int = Query(default=7, ge=1, le=365),
    limit: int = Query(default=20, ge=1, le=100),
    supa: Client = Depends(get_supabase),
) -> list[dict[str, Any]]:
    return listings.trending_restaurants(supa, days_back=days, limit=limit)


@router.post("/enrich", response_model=EnrichResponse, dependencies=[Depends(require_admin)])
async def enrich_restaurants(enricher: MapsEnricher = Depends(get_maps_enricher)) -> EnrichResponse:
    if not enricher.places.configured:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Google Maps API key not configured")
    summary = await run_in_threadpool(enricher.enrich_all)
    return EnrichResponse(message="Enrichment completed", **summary)


@router.get("/{restaurant_id}")
async def get_restaurant(restaurant_id: str, supa: Client = Depends(get_supabase)) -> dict[str, Any]:
    restaurant = listings.get_restaurant(supa, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return {**restaurant, "recommendations": listings.restaurant_recommendations(supa, restaurant_id)}


@router.get("/{restaurant_id}/recommendations")
async def restaurant_recommendations(restaurant_id: str, supa: Client = Depends(get_supabase)) -> list[dict[str, Any]]:
    return listings.restaurant_recommendations(supa, restaurant_id)
