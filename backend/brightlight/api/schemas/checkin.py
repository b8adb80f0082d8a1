"""Schemas for two-week check-ins."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from brightlight.api.schemas.plan import PlanResponse


class CheckInRequest(BaseModel):
    user_id: str = Field(min_length=1)
    answers: Optional[List[Annotated[int, Field(ge=0, le=4)]]] = Field(default=None, min_length=10, max_length=10)
    gad_score: Optional[int] = Field(default=None, ge=0, le=20)
    phq_score: Optional[int] = Field(default=None, ge=0, le=20)

    @model_validator(mode="after")
    def _scores_or_answers(self) -> "CheckInRequest":
        if self.answers is None and (self.gad_score is None or self.phq_score is None):
            raise ValueError("Provide either answers or both gad_score and phq_score")
        return self


class CheckInRecordPayload(BaseModel):
    id: UUID
    date: datetime
    gad_score: int
    gad_score_level: str
    phq_score: int
    phq_score_level: str


class CheckInResponse(BaseModel):
    record: CheckInRecordPayload
    summary: str
    plan: PlanResponse
    request_id: str


class LatestCheckInResponse(BaseModel):
    user_id: str
    record: CheckInRecordPayload
    summary: str
    request_id: str


class CheckInStatusResponse(BaseModel):
    user_id: str
    status: Literal["Due", "Complete"]
    last_check_date: Optional[datetime]
    request_id: str
