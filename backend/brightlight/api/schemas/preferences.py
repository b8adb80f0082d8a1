"""Schemas for activity preference scores."""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field


class PreferenceUpdateRequest(BaseModel):
    user_id: str = Field(min_length=1)
    activity: str = Field(min_length=1)
    score: float = Field(ge=0, le=100)


class PreferencesResponse(BaseModel):
    user_id: str
    scores: Dict[str, float]
    request_id: str
