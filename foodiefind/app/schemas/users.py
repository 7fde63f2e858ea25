# foodiefind/app/schemas/users.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=60)
    full_name: Optional[str] = Field(default=None, max_length=120)
    avatar_url: Optional[str] = None
    preferred_cuisines: Optional[list[str]] = None
    preferred_cities: Optional[list[str]] = None
