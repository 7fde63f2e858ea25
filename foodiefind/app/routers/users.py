# foodiefind/app/routers/users.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from foodiefind.app.deps import (
    CurrentUser,
    get_current_user,
    get_influencer_repository,
    get_restaurant_repository,
    get_user_repository,
)
from foodiefind.app.domain.errors import (
    InfluencerNotFoundError,
    ProcessingError,
    RestaurantNotFoundError,
)
from foodiefind.app.infra.db.base import InfluencerRepository, RestaurantRepository, UserRepository
from foodiefind.app.schemas.users import ProfileUpdate

from .common import to_http_exception

router = APIRouter(prefix="/api/users", tags=["users"])


def _default_profile(user: CurrentUser) -> dict[str, Any]:
    username = (user.email or "").split("@")[0] or "user"
    return {"username": username, "full_name": user.name or "", "avatar_url": user.avatar_url or ""}


@router.get("/profile")
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> dict[str, Any]:
    try:
        profile = users.get_profile(user.id)
        if profile is None:
            profile = users.create_profile(user.id, _default_profile(user))
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return profile


@router.put("/profile")
async def update_profile(
    payload: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True)
    try:
        profile = users.update_profile(user.id, changes)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.get("/favorites")
async def list_favorites(
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> list[dict[str, Any]]:
    return users.list_favorites(user.id)


@router.post("/favorites/{restaurant_id}", status_code=status.HTTP_201_CREATED)
async def add_favorite(
    restaurant_id: str,
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> dict[str, Any]:
    try:
        restaurant = restaurants.get_restaurant(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(restaurant_id)
        favorite = users.add_favorite(user.id, restaurant_id)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return {**favorite, "restaurant": {"id": restaurant.id, "name": restaurant.name}}


@router.delete("/favorites/{restaurant_id}")
async def remove_favorite(
    restaurant_id: str,
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> dict[str, str]:
    try:
        users.remove_favorite(user.id, restaurant_id)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return {"message": "Restaurant removed from favorites"}


@router.post("/follow/{influencer_id}", status_code=status.HTTP_201_CREATED)
async def follow_influencer(
    influencer_id: str,
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    influencers: InfluencerRepository = Depends(get_influencer_repository),
) -> dict[str, Any]:
    try:
        influencer = influencers.get_influencer(influencer_id)
        if influencer is None:
            raise InfluencerNotFoundError(influencer_id)
        follow = users.follow(user.id, influencer_id)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return {**follow, "influencer": {"id": influencer.id, "channel_name": influencer.channel_name}}


@router.delete("/follow/{influencer_id}")
async def unfollow_influencer(
    influencer_id: str,
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> dict[str, str]:
    try:
        users.unfollow(user.id, influencer_id)
    except ProcessingError as exc:
        raise to_http_exception(exc)
    return {"message": "Unfollowed influencer"}


@router.get("/following")
async def list_following(
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> list[dict[str, Any]]:
    return users.list_following(user.id)


@router.get("/recommendations")
async def personalized_recommendations(
    limit: int = Query(default=20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> list[dict[str, Any]]:
    return users.personalized_recommendations(user.id, limit)
