"""Schemas for the wellness plan endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from brightlight.services.plan.types import DayPlan


class PlanGenerateRequest(BaseModel):
    user_id: str


class PlanProgressPayload(BaseModel):
    current_day: int
    days_remaining: int
    expired: bool


class PlanResponse(BaseModel):
    user_id: str
    creation_date: Optional[datetime]
    progress: Optional[PlanProgressPayload]
    days: List[DayPlan]
    source: Literal["remote", "cache", "generated"]
    request_id: str


class TodayPlanResponse(BaseModel):
    user_id: str
    progress: PlanProgressPayload
    day: Optional[DayPlan]
    request_id: str


class ActivityCompletionRequest(BaseModel):
    completed: bool


class ActivityCompletionResponse(BaseModel):
    activity_id: str
    completed: bool
    request_id: str
