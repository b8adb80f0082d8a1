"""Emotion analysis and daily snapshot endpoints."""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from brightlight.api.deps import get_emotion_classifier, get_local_cache
from brightlight.api.errors import http_error_from
from brightlight.api.schemas.emotions import (
    DailyEmotionsRequest,
    DailyEmotionsResponse,
    EmotionAnalyzeRequest,
    EmotionAnalyzeResponse,
    EmotionScorePayload,
    LatestSummaryResponse,
)
from brightlight.core.errors import BrightLightError
from brightlight.db.deps import get_db
from brightlight.observability.tracing import trace
from brightlight.services.emotion_classifier import EmotionClassifier
from brightlight.services.emotion_journal import (
    LAST_LAUNCH_MARKER,
    LAST_STORED_MARKER,
    EmotionScore,
    fetch_latest_summary,
    marker_key,
    store_daily_emotions,
    top_emotions,
)
from brightlight.services.local_cache import LocalCache, claim_daily_marker

router = APIRouter()


@router.post("/emotions/analyze", response_model=EmotionAnalyzeResponse, tags=["emotions"])
def emotions_analyze(
    request: Request,
    payload: EmotionAnalyzeRequest,
    classifier: EmotionClassifier = Depends(get_emotion_classifier),
) -> EmotionAnalyzeResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("emotions.analyze", metadata={"text_length": len(payload.text)}, request_id=request_id):
        try:
            scores = classifier.classify(payload.text)
        except BrightLightError as exc:
            raise http_error_from(exc) from exc
    return EmotionAnalyzeResponse(
        scores=scores,
        top=[EmotionScorePayload(name=item.name, value=item.value) for item in top_emotions(scores)],
        request_id=request_id or "",
    )


@router.post("/emotions/daily", response_model=DailyEmotionsResponse, tags=["emotions"])
def emotions_daily(
    request: Request,
    payload: DailyEmotionsRequest,
    db: Session = Depends(get_db),
    cache: LocalCache = Depends(get_local_cache),
) -> DailyEmotionsResponse:
    """Store the day's top emotions at most once per calendar day."""
    request_id = getattr(request.state, "request_id", None)
    if not payload.emotions:
        return DailyEmotionsResponse(stored=False, request_id=request_id or "")
    key = marker_key(payload.user_id, LAST_STORED_MARKER)
    if not claim_daily_marker(cache, key, datetime.now(timezone.utc).date()):
        return DailyEmotionsResponse(stored=False, request_id=request_id or "")

    try:
        record = store_daily_emotions(
            db,
            payload.user_id,
            emotions=[EmotionScore(name=item.name, value=item.value) for item in payload.emotions],
            summary=payload.summary,
            greeting_texts=payload.greeting_texts,
        )
    except BrightLightError as exc:
        # Release the marker so a later request today can try again.
        cache.delete(key)
        raise http_error_from(exc) from exc
    return DailyEmotionsResponse(stored=True, id=record.id, request_id=request_id or "")


@router.get("/emotions/summary/latest", response_model=LatestSummaryResponse, tags=["emotions"])
def emotions_latest_summary(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User ID"),
    db: Session = Depends(get_db),
    cache: LocalCache = Depends(get_local_cache),
) -> LatestSummaryResponse:
    """Newest stored summary; the first call of the day is flagged for the greeting screen."""
    request_id = getattr(request.state, "request_id", None)
    summary = fetch_latest_summary(db, user_id)
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No summary found")
    first_launch = claim_daily_marker(cache, marker_key(user_id, LAST_LAUNCH_MARKER), datetime.now(timezone.utc).date())
    return LatestSummaryResponse(
        user_id=user_id,
        summary=summary,
        first_launch_today=first_launch,
        request_id=request_id or "",
    )
