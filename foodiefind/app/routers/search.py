# foodiefind/app/routers/search.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from supabase import Client

from foodiefind.app.deps import get_supabase
from foodiefind.services import listings

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("/restaurants")
async def search_restaurants(
    q: Optional[str] = None,
    cuisine: Optional[str] = None,
    city: Optional[str] = None,
    price: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=100),
    supa: Client = Depends(get_supabase),
) -> dict[str, Any]:
    results = listings.search_restaurants(supa, q, cuisine=cuisine, city=city, price=price, limit=limit)
    filters = {key: value for key, value in (("cuisine", cuisine), ("city", city), ("price", price)) if value}
    return {"query": q, "filters": filters, "results": results, "count": len(results)}
