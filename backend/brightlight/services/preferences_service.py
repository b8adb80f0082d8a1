"""Activity preference scores per user."""
from __future__ import annotations

import logging
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brightlight.core.errors import PersistenceError
from brightlight.db.models.preference_scores import PreferenceScores

logger = logging.getLogger(__name__)


def fetch_preference_scores(db: Session, user_id: str) -> Dict[str, float]:
    """Return the latest scores, or an empty mapping when none were recorded."""
    row = db.get(PreferenceScores, user_id)
    if row is None or not isinstance(row.scores, dict):
        return {}
    scores: Dict[str, float] = {}
    for activity, value in row.scores.items():
        try:
            scores[activity] = float(value)
        except (TypeError, ValueError):
            scores[activity] = 0.0
    return scores


def update_preference_score(db: Session, user_id: str, activity: str, score: float) -> Dict[str, float]:
    """Merge a single activity score into the stored mapping."""
    row = db.get(PreferenceScores, user_id)
    if row is None:
        row = PreferenceScores(user_id=user_id, scores={})
        db.add(row)
    merged = dict(row.scores or {})
    merged[activity] = float(score)
    row.scores = merged
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Failed to update preference score for {activity}") from exc
    logger.info("Preference score for %s updated for user %s", activity, user_id)
    return merged
