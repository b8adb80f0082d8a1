from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from brightlight.core.errors import StructureValidationError
from brightlight.db.models.plan_document import PlanDocument
from brightlight.db.models.preference_scores import PreferenceScores
from brightlight.db.models.two_week_check import TwoWeekCheckRecord
from brightlight.services.checkin_service import (
    fetch_latest_two_week_check,
    record_two_week_check,
    store_check_and_generate_plan,
    two_week_status,
)
from brightlight.services.local_cache import LocalCache
from brightlight.services.plan.store import PlanStore
from brightlight.services.plan.types import Activity, DayPlan, Plan, TimeSlot
from brightlight.services.preferences_service import fetch_preference_scores, update_preference_score

NOW = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    for model in (PlanDocument, PreferenceScores, TwoWeekCheckRecord):
        model.__table__.create(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class _StubGenerator:
    def __init__(self, error: Exception | None = None):
        self.assessments = []
        self._error = error

    def generate_14_day_plan(self, assessment, *, user_id=None):
        self.assessments.append(assessment)
        if self._error:
            raise self._error
        activity = Activity(title="Breathing", content="Slow breaths.", time_slot=TimeSlot.MORNING)
        return Plan(days=[DayPlan(day_number=day, activities=[activity]) for day in range(1, 15)])


def test_record_stores_level_labels(session_factory) -> None:
    with session_factory() as db:
        record = record_two_week_check(db, "user-1", gad_score=18, phq_score=14, now=NOW)

    assert record.gad_score_level == "Severe Anxiety"
    assert record.phq_score_level == "Moderate Depression"


def test_record_requires_user_id(session_factory) -> None:
    with session_factory() as db:
        with pytest.raises(ValueError):
            record_two_week_check(db, "", gad_score=1, phq_score=1)


def test_latest_check_and_status(session_factory) -> None:
    with session_factory() as db:
        assert two_week_status(db, "user-1", NOW) == "Due"
        record_two_week_check(db, "user-1", gad_score=3, phq_score=4, now=NOW - timedelta(days=20))
        record_two_week_check(db, "user-1", gad_score=9, phq_score=2, now=NOW - timedelta(days=2))

        assert fetch_latest_two_week_check(db, "user-1").gad_score == 9
        assert two_week_status(db, "user-1", NOW) == "Complete"
        assert two_week_status(db, "user-1", NOW + timedelta(days=12)) == "Due"


def test_store_check_generates_with_preferences(session_factory) -> None:
    generator = _StubGenerator()
    with session_factory() as db:
        update_preference_score(db, "user-1", "Walking", 80)
        result = store_check_and_generate_plan(
            db,
            "user-1",
            gad_score=12,
            phq_score=6,
            generator=generator,
            store=PlanStore(db, "user-1", LocalCache(), clock=lambda: NOW),
            now=NOW,
        )

    assert generator.assessments[0].preferences == {"Walking": 80.0}
    assert result.plan.creation_date == NOW
    assert result.record.gad_score == 12


def test_generation_failure_keeps_check_record(session_factory) -> None:
    generator = _StubGenerator(StructureValidationError(1, 14))
    with session_factory() as db:
        with pytest.raises(StructureValidationError):
            store_check_and_generate_plan(
                db,
                "user-1",
                gad_score=12,
                phq_score=6,
                generator=generator,
                store=PlanStore(db, "user-1", LocalCache()),
            )

    with session_factory() as db:
        assert fetch_latest_two_week_check(db, "user-1") is not None
        assert db.get(PlanDocument, "user-1") is None


def test_preference_updates_merge(session_factory) -> None:
    with session_factory() as db:
        assert fetch_preference_scores(db, "user-1") == {}
        update_preference_score(db, "user-1", "Walking", 80)
        update_preference_score(db, "user-1", "Reading", 55.5)
        update_preference_score(db, "user-1", "Walking", 60)

        assert fetch_preference_scores(db, "user-1") == {"Walking": 60.0, "Reading": 55.5}
