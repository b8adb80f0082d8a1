"""Activity preference endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from brightlight.api.errors import http_error_from
from brightlight.api.schemas.preferences import PreferencesResponse, PreferenceUpdateRequest
from brightlight.core.errors import BrightLightError
from brightlight.db.deps import get_db
from brightlight.services.preferences_service import fetch_preference_scores, update_preference_score

router = APIRouter()


@router.get("/preferences", response_model=PreferencesResponse, tags=["preferences"])
def preferences_get(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User ID"),
    db: Session = Depends(get_db),
) -> PreferencesResponse:
    request_id = getattr(request.state, "request_id", None)
    return PreferencesResponse(
        user_id=user_id,
        scores=fetch_preference_scores(db, user_id),
        request_id=request_id or "",
    )


@router.put("/preferences", response_model=PreferencesResponse, tags=["preferences"])
def preferences_update(
    request: Request,
    payload: PreferenceUpdateRequest,
    db: Session = Depends(get_db),
) -> PreferencesResponse:
    request_id = getattr(request.state, "request_id", None)
    try:
        scores = update_preference_score(db, payload.user_id, payload.activity, payload.score)
    except BrightLightError as exc:
        raise http_error_from(exc) from exc
    return PreferencesResponse(user_id=payload.user_id, scores=scores, request_id=request_id or "")
