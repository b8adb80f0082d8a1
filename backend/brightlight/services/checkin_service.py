"""Two-week GAD/PHQ check-ins and the plan regeneration they trigger."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brightlight.core.errors import PersistenceError
from brightlight.db.models.two_week_check import TwoWeekCheckRecord
from brightlight.services.assessment import Assessment, gad_level_label, is_check_due, phq_level_label
from brightlight.services.plan.generator import PlanGenerator
from brightlight.services.plan.store import PlanStore
from brightlight.services.plan.types import Plan
from brightlight.services.preferences_service import fetch_preference_scores

logger = logging.getLogger(__name__)

CheckStatus = Literal["Due", "Complete"]


@dataclass
class CheckInResult:
    record: TwoWeekCheckRecord
    plan: Plan


def record_two_week_check(
    db: Session,
    user_id: str,
    *,
    gad_score: int,
    phq_score: int,
    now: Optional[datetime] = None,
) -> TwoWeekCheckRecord:
    if not user_id:
        raise ValueError("User ID is empty")
    record = TwoWeekCheckRecord(
        user_id=user_id,
        date=now or datetime.now(timezone.utc),
        gad_score=gad_score,
        gad_score_level=gad_level_label(gad_score),
        phq_score=phq_score,
        phq_score_level=phq_level_label(phq_score),
    )
    db.add(record)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Failed to store two-week check") from exc
    db.refresh(record)
    logger.info("Stored two-week check for user %s (gad=%d, phq=%d)", user_id, gad_score, phq_score)
    return record


def fetch_latest_two_week_check(db: Session, user_id: str) -> TwoWeekCheckRecord | None:
    return (
        db.query(TwoWeekCheckRecord)
        .filter(TwoWeekCheckRecord.user_id == user_id)
        .order_by(TwoWeekCheckRecord.date.desc())
        .first()
    )


def two_week_status(db: Session, user_id: str, now: Optional[datetime] = None) -> CheckStatus:
    latest = fetch_latest_two_week_check(db, user_id)
    return "Due" if is_check_due(latest.date if latest else None, now) else "Complete"


def generate_plan_for_user(
    db: Session,
    user_id: str,
    *,
    gad_score: int,
    phq_score: int,
    generator: PlanGenerator,
    store: PlanStore,
) -> Plan:
    """Generate from the user's scores and stored preferences, then persist."""
    assessment = Assessment(
        gad_score=gad_score,
        phq_score=phq_score,
        preferences=fetch_preference_scores(db, user_id),
    )
    plan = generator.generate_14_day_plan(assessment, user_id=user_id)
    return store.save(plan)


def store_check_and_generate_plan(
    db: Session,
    user_id: str,
    *,
    gad_score: int,
    phq_score: int,
    generator: PlanGenerator,
    store: PlanStore,
    now: Optional[datetime] = None,
) -> CheckInResult:
    """
    Append the check record, then replace the current plan.

    The record stays stored when generation fails; the failure propagates.
    """
    record = record_two_week_check(db, user_id, gad_score=gad_score, phq_score=phq_score, now=now)
    plan = generate_plan_for_user(
        db,
        user_id,
        gad_score=gad_score,
        phq_score=phq_score,
        generator=generator,
        store=store,
    )
    return CheckInResult(record=record, plan=plan)
