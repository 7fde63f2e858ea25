# foodiefind/app/main.py
from __future__ import annotations

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodiefind import __version__
from foodiefind.app.config import settings
from foodiefind.app.routers.analytics import router as analytics_router
from foodiefind.app.routers.influencers import router as influencers_router
from foodiefind.app.routers.processing import router as processing_router
from foodiefind.app.routers.restaurants import router as restaurants_router
from foodiefind.app.routers.search import router as search_router
from foodiefind.app.routers.users import router as users_router
from foodiefind.app.routers.videos import router as videos_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="FoodieFind API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(influencers_router)
app.include_router(videos_router)
app.include_router(restaurants_router)
app.include_router(search_router)
app.include_router(users_router)
app.include_router(processing_router)
app.include_router(analytics_router)


@app.get("/health")
def health():
    return {"ok": True, "env": settings.APP_ENV}


@app.get("/")
def root():
    return {
        "name": "FoodieFind API",
        "version": __version__,
        "endpoints": [
            "/api/influencers",
            "/api/videos",
            "/api/restaurants",
            "/api/search",
            "/api/users",
            "/api/processing",
            "/api/analytics",
        ],
    }
