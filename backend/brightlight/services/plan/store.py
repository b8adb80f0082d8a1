"""Persistence of the current wellness plan and its completion state."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from brightlight.core.errors import NotFoundError, PersistenceError, TransportError
from brightlight.db.models.plan_document import PlanDocument
from brightlight.services.local_cache import LocalCache
from brightlight.services.plan.types import Activity, ActivityCategory, DayPlan, Plan, TimeSlot

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CachedPlan(BaseModel):
    plan: Plan
    creation_date: Optional[datetime] = None


class PlanStore:
    """
    Owns the persisted plan of one user: a `plans` row plus a local cache mirror.

    Updates are read-modify-write without a version check, so concurrent writers
    race and the last one wins.
    """

    def __init__(
        self,
        db: Session,
        user_id: str,
        cache: LocalCache,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._db = db
        self.user_id = user_id
        self._cache = cache
        self._clock = clock

    @property
    def cache_key(self) -> str:
        return f"{self.user_id}:cachedPlan"

    def save(self, plan: Plan) -> Plan:
        """Store plan as the current plan with a fresh creation date."""
        stamped = plan.model_copy(update={"creation_date": self._clock()})
        # The local copy stays authoritative for this session even if the write fails.
        self.cache_locally(stamped)

        try:
            row = self._db.get(PlanDocument, self.user_id)
            if row is None:
                row = PlanDocument(user_id=self.user_id)
                self._db.add(row)
            row.creation_date = stamped.creation_date
            row.plan = plan_to_document(stamped)
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Failed to store plan for user %s: %s", self.user_id, exc)
            raise PersistenceError("Failed to store plan") from exc

        logger.info("Stored plan for user %s", self.user_id)
        return stamped

    def load(self) -> Optional[Plan]:
        """Return the stored plan, or None when the user has none yet."""
        row = self._fetch_row()
        if row is None:
            return None
        plan = plan_from_document(row.plan or [], _as_utc(row.creation_date))
        self.cache_locally(plan)
        return plan

    def load_with_fallback(self, max_age: Optional[timedelta] = None) -> Optional[Plan]:
        """
        Like `load`, but serve the local copy while the store is unreachable.

        The TransportError propagates when no fresh local copy exists, so callers
        never mistake an outage for "no plan yet".
        """
        try:
            return self.load()
        except TransportError:
            cached = self.load_cached(max_age)
            if cached is None:
                raise
            logger.warning("Document store unreachable; serving cached plan for user %s", self.user_id)
            return cached

    def update_completion(self, activity_id: str, completed: bool) -> bool:
        """
        Set is_completed on one activity.

        Returns False when no activity has that id. The stored creation date is
        carried over untouched.
        """
        row = self._fetch_row()
        if row is None:
            raise NotFoundError("Plan not found")

        plan = plan_from_document(row.plan or [], _as_utc(row.creation_date))
        target = next((activity for activity in plan.iter_activities() if activity.id == activity_id), None)
        if target is None:
            return False
        target.is_completed = completed
        self._write_existing(row, plan)
        return True

    def update_plan(self, plan: Plan) -> Plan:
        """Replace the stored schedule, keeping the creation date already on record."""
        row = self._fetch_row()
        if row is None:
            raise NotFoundError("Plan not found")
        return self._write_existing(row, plan)

    def cache_locally(self, plan: Plan) -> None:
        self._cache.set_model(
            self.cache_key,
            CachedPlan(plan=plan, creation_date=plan.creation_date),
            now=self._clock(),
        )

    def load_cached(self, max_age: Optional[timedelta] = None) -> Optional[Plan]:
        if max_age is not None and self._cache.is_stale(self.cache_key, max_age, now=self._clock()):
            return None
        cached = self._cache.get_model(self.cache_key, CachedPlan)
        if cached is None:
            return None
        return cached.plan.model_copy(update={"creation_date": cached.creation_date})

    def _fetch_row(self) -> Optional[PlanDocument]:
        try:
            return self._db.get(PlanDocument, self.user_id)
        except OperationalError as exc:
            self._db.rollback()
            raise TransportError("Document store unreachable") from exc

    def _write_existing(self, row: PlanDocument, plan: Plan) -> Plan:
        creation_date = _as_utc(row.creation_date)
        merged = plan.model_copy(update={"creation_date": creation_date})
        try:
            # A new list object so the JSON column is flagged dirty.
            row.plan = plan_to_document(merged)
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Failed to update plan for user %s: %s", self.user_id, exc)
            raise PersistenceError("Failed to update plan") from exc
        self.cache_locally(merged)
        return merged


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def plan_to_document(plan: Plan) -> List[Dict[str, Any]]:
    return [
        {
            "dayNumber": day_plan.day_number,
            "activities": [
                {
                    "id": activity.id,
                    "timeSlot": activity.time_slot.value,
                    "duration": activity.duration,
                    "title": activity.title,
                    "content": activity.content,
                    "category": activity.category.value,
                    "isCompleted": activity.is_completed,
                }
                for activity in day_plan.activities
            ],
        }
        for day_plan in plan.days
    ]


def plan_from_document(document: List[Dict[str, Any]], creation_date: Optional[datetime]) -> Plan:
    """Rebuild a Plan, skipping days and activities that no longer decode."""
    days: List[DayPlan] = []
    for day_data in document:
        if not isinstance(day_data, dict) or not isinstance(day_data.get("activities"), list):
            continue
        activities = [activity for activity in map(_activity_from_document, day_data["activities"]) if activity]
        try:
            days.append(DayPlan(day_number=day_data.get("dayNumber"), activities=activities))
        except ValidationError:
            logger.debug("Skipping malformed stored day %r", day_data.get("dayNumber"))
    return Plan(days=days, creation_date=creation_date)


def _activity_from_document(data: Any) -> Optional[Activity]:
    if not isinstance(data, dict):
        return None
    try:
        return Activity(
            id=data["id"],
            title=data["title"],
            content=data["content"],
            duration=data["duration"],
            category=ActivityCategory(data["category"]),
            time_slot=TimeSlot(data["timeSlot"]),
            is_completed=data["isCompleted"],
        )
    except (KeyError, ValueError, ValidationError):
        logger.debug("Skipping malformed stored activity %r", data.get("id"))
        return None
