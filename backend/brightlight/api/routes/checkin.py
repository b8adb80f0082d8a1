"""Two-week check-in endpoints."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from brightlight.api.deps import get_local_cache, get_plan_generator
from brightlight.api.errors import http_error_from
from brightlight.api.routes.plan import plan_response
from brightlight.api.schemas.checkin import (
    CheckInRecordPayload,
    CheckInRequest,
    CheckInResponse,
    CheckInStatusResponse,
    LatestCheckInResponse,
)
from brightlight.core.errors import BrightLightError
from brightlight.db.deps import get_db
from brightlight.db.models.two_week_check import TwoWeekCheckRecord
from brightlight.observability.metrics import log_metric
from brightlight.observability.tracing import trace
from brightlight.services.assessment import assessment_summary, score_answers
from brightlight.services.checkin_service import (
    fetch_latest_two_week_check,
    store_check_and_generate_plan,
    two_week_status,
)
from brightlight.services.local_cache import LocalCache
from brightlight.services.plan.generator import PlanGenerator
from brightlight.services.plan.store import PlanStore

router = APIRouter()


@router.post("/checkins", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED, tags=["checkins"])
def checkin_create(
    request: Request,
    payload: CheckInRequest,
    db: Session = Depends(get_db),
    generator: PlanGenerator = Depends(get_plan_generator),
    cache: LocalCache = Depends(get_local_cache),
) -> CheckInResponse:
    """Store the check and replace the user's plan with a freshly generated one."""
    request_id = getattr(request.state, "request_id", None)
    if payload.answers is not None:
        gad_score, phq_score = score_answers(payload.answers)
    else:
        gad_score, phq_score = payload.gad_score, payload.phq_score

    start = perf_counter()
    metadata = {"gad_score": gad_score, "phq_score": phq_score}
    with trace("checkins.create", metadata=metadata, user_id=payload.user_id, request_id=request_id):
        try:
            result = store_check_and_generate_plan(
                db,
                payload.user_id,
                gad_score=gad_score,
                phq_score=phq_score,
                generator=generator,
                store=PlanStore(db, payload.user_id, cache),
            )
        except BrightLightError as exc:
            log_metric("checkins.create.success", 0, metadata={"error": type(exc).__name__})
            raise http_error_from(exc) from exc

    log_metric("checkins.create.success", 1, metadata={"user_id": payload.user_id})
    log_metric("checkins.create.latency_ms", (perf_counter() - start) * 1000, metadata={"user_id": payload.user_id})
    return CheckInResponse(
        record=_record_payload(result.record),
        summary=assessment_summary(gad_score, phq_score),
        plan=plan_response(payload.user_id, result.plan, source="generated", request_id=request_id),
        request_id=request_id or "",
    )


@router.get("/checkins/latest", response_model=LatestCheckInResponse, tags=["checkins"])
def checkin_latest(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User ID"),
    db: Session = Depends(get_db),
) -> LatestCheckInResponse:
    request_id = getattr(request.state, "request_id", None)
    record = fetch_latest_two_week_check(db, user_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No two-week check found")
    return LatestCheckInResponse(
        user_id=user_id,
        record=_record_payload(record),
        summary=assessment_summary(record.gad_score, record.phq_score),
        request_id=request_id or "",
    )


@router.get("/checkins/status", response_model=CheckInStatusResponse, tags=["checkins"])
def checkin_status(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User ID"),
    db: Session = Depends(get_db),
) -> CheckInStatusResponse:
    request_id = getattr(request.state, "request_id", None)
    latest = fetch_latest_two_week_check(db, user_id)
    return CheckInStatusResponse(
        user_id=user_id,
        status=two_week_status(db, user_id),
        last_check_date=latest.date if latest else None,
        request_id=request_id or "",
    )


def _record_payload(record: TwoWeekCheckRecord) -> CheckInRecordPayload:
    return CheckInRecordPayload(
        id=record.id,
        date=record.date,
        gad_score=record.gad_score,
        gad_score_level=record.gad_score_level,
        phq_score=record.phq_score,
        phq_score_level=record.phq_score_level,
    )
