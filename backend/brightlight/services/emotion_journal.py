"""Daily emotion snapshots."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brightlight.core.errors import PersistenceError
from brightlight.db.models.daily_emotion import DailyEmotion

logger = logging.getLogger(__name__)

LAST_STORED_MARKER = "lastStoredDate"
LAST_LAUNCH_MARKER = "lastLaunchDate"


@dataclass
class EmotionScore:
    name: str
    value: float


def top_emotions(scores: Dict[str, float], limit: int = 3) -> List[EmotionScore]:
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [EmotionScore(name=name, value=value) for name, value in ranked]


def store_daily_emotions(
    db: Session,
    user_id: str,
    *,
    emotions: Sequence[EmotionScore],
    summary: str,
    greeting_texts: Sequence[str],
    now: Optional[datetime] = None,
) -> DailyEmotion:
    record = DailyEmotion(
        user_id=user_id,
        date=now or datetime.now(timezone.utc),
        emotions=[emotion.name for emotion in emotions],
        emotions_values=[emotion.value for emotion in emotions],
        summary=summary,
        greeting_texts={str(index): text for index, text in enumerate(greeting_texts)},
    )
    db.add(record)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Failed to store daily emotions") from exc
    db.refresh(record)
    logger.info("Stored %d daily emotions for user %s", len(emotions), user_id)
    return record


def fetch_latest_summary(db: Session, user_id: str) -> Optional[str]:
    record = (
        db.query(DailyEmotion)
        .filter(DailyEmotion.user_id == user_id)
        .order_by(DailyEmotion.date.desc())
        .first()
    )
    return record.summary if record and record.summary else None


def marker_key(user_id: str, marker: str) -> str:
    return f"{user_id}:{marker}"
