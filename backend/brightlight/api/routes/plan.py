"""Wellness plan endpoints."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from brightlight.api.deps import get_local_cache, get_plan_generator, get_plan_store
from brightlight.api.errors import http_error_from, store_unavailable
from brightlight.api.schemas.plan import (
    ActivityCompletionRequest,
    ActivityCompletionResponse,
    PlanGenerateRequest,
    PlanProgressPayload,
    PlanResponse,
    TodayPlanResponse,
)
from brightlight.core.config import settings
from brightlight.core.errors import BrightLightError, TransportError
from brightlight.db.deps import get_db
from brightlight.observability.metrics import log_metric
from brightlight.observability.tracing import trace
from brightlight.services.checkin_service import fetch_latest_two_week_check, generate_plan_for_user
from brightlight.services.local_cache import LocalCache
from brightlight.services.plan.generator import PlanGenerator
from brightlight.services.plan.store import PlanStore
from brightlight.services.plan.types import Plan, plan_progress

router = APIRouter()

_CACHE_MAX_AGE = timedelta(hours=settings.local_cache_max_age_hours)


@router.post("/plan/generate", response_model=PlanResponse, tags=["plan"])
def plan_generate(
    request: Request,
    payload: PlanGenerateRequest,
    db: Session = Depends(get_db),
    generator: PlanGenerator = Depends(get_plan_generator),
    cache: LocalCache = Depends(get_local_cache),
) -> PlanResponse:
    """Regenerate the plan from the latest two-week check."""
    request_id = getattr(request.state, "request_id", None)
    latest = fetch_latest_two_week_check(db, payload.user_id)
    if latest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No two-week check found")

    start = perf_counter()
    store = PlanStore(db, payload.user_id, cache)
    with trace("plan.generate", metadata={"route": "/plan/generate"}, user_id=payload.user_id, request_id=request_id):
        try:
            plan = generate_plan_for_user(
                db,
                payload.user_id,
                gad_score=latest.gad_score,
                phq_score=latest.phq_score,
                generator=generator,
                store=store,
            )
        except BrightLightError as exc:
            log_metric("plan.generate.success", 0, metadata={"error": type(exc).__name__})
            raise http_error_from(exc) from exc

    log_metric("plan.generate.success", 1, metadata={"user_id": payload.user_id})
    log_metric("plan.generate.latency_ms", (perf_counter() - start) * 1000, metadata={"user_id": payload.user_id})
    return plan_response(payload.user_id, plan, source="generated", request_id=request_id)


@router.get("/plan", response_model=PlanResponse, tags=["plan"])
def plan_current(
    request: Request,
    store: PlanStore = Depends(get_plan_store),
) -> PlanResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("plan.current", user_id=store.user_id, request_id=request_id):
        plan, source = _load_plan(store)
    return plan_response(store.user_id, plan, source=source, request_id=request_id)


@router.get("/plan/today", response_model=TodayPlanResponse, tags=["plan"])
def plan_today(
    request: Request,
    store: PlanStore = Depends(get_plan_store),
) -> TodayPlanResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("plan.today", user_id=store.user_id, request_id=request_id):
        try:
            plan = store.load_with_fallback(_CACHE_MAX_AGE)
        except TransportError as exc:
            raise store_unavailable(exc) from exc
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No plan exists yet")
    progress = _progress_payload(plan)
    if progress is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan has no creation date")
    return TodayPlanResponse(
        user_id=store.user_id,
        progress=progress,
        day=plan.day(progress.current_day),
        request_id=request_id or "",
    )


@router.patch("/plan/activities/{activity_id}", response_model=ActivityCompletionResponse, tags=["plan"])
def plan_activity_update(
    activity_id: str,
    request: Request,
    payload: ActivityCompletionRequest,
    store: PlanStore = Depends(get_plan_store),
) -> ActivityCompletionResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {"activity_id": activity_id, "completed": payload.completed}
    with trace("plan.activity_update", metadata=metadata, user_id=store.user_id, request_id=request_id):
        try:
            updated = store.update_completion(activity_id, payload.completed)
        except TransportError as exc:
            raise store_unavailable(exc) from exc
        except BrightLightError as exc:
            raise http_error_from(exc) from exc
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")

    log_metric("plan.activity_completed", 1 if payload.completed else 0, metadata={"user_id": store.user_id})
    return ActivityCompletionResponse(activity_id=activity_id, completed=payload.completed, request_id=request_id or "")


def _load_plan(store: PlanStore) -> tuple[Plan, str]:
    source = "remote"
    try:
        plan = store.load()
    except TransportError as exc:
        plan = store.load_cached(_CACHE_MAX_AGE)
        if plan is None:
            raise store_unavailable(exc) from exc
        source = "cache"
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No plan exists yet")
    return plan, source


def _progress_payload(plan: Plan) -> Optional[PlanProgressPayload]:
    if plan.creation_date is None:
        return None
    progress = plan_progress(plan, datetime.now(timezone.utc).date())
    return PlanProgressPayload(
        current_day=progress.current_day,
        days_remaining=progress.days_remaining,
        expired=progress.expired,
    )


def plan_response(user_id: str, plan: Plan, *, source: str, request_id: Optional[str]) -> PlanResponse:
    return PlanResponse(
        user_id=user_id,
        creation_date=plan.creation_date,
        progress=_progress_payload(plan),
        days=plan.days,
        source=source,
        request_id=request_id or "",
    )
