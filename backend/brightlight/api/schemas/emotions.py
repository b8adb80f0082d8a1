"""Schemas for emotion analysis and daily snapshots."""
from __future__ import annotations

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class EmotionScorePayload(BaseModel):
    name: str
    value: float


class EmotionAnalyzeRequest(BaseModel):
    text: str = Field(min_length=1)


class EmotionAnalyzeResponse(BaseModel):
    scores: Dict[str, float]
    top: List[EmotionScorePayload]
    request_id: str


class DailyEmotionsRequest(BaseModel):
    user_id: str = Field(min_length=1)
    emotions: List[EmotionScorePayload]
    summary: str = ""
    greeting_texts: List[str] = Field(default_factory=list)


class DailyEmotionsResponse(BaseModel):
    stored: bool
    id: Optional[UUID] = None
    request_id: str


class LatestSummaryResponse(BaseModel):
    user_id: str
    summary: str
    first_launch_today: bool
    request_id: str
