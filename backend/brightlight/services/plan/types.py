"""Typed wellness plan schedule."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterator, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

PLAN_LENGTH_DAYS = 14


class TimeSlot(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"

    @classmethod
    def from_label(cls, label: str) -> Optional["TimeSlot"]:
        normalized = label.strip().lower()
        for slot in cls:
            if slot.value.lower() == normalized:
                return slot
        return None


class ActivityCategory(str, Enum):
    MINDFULNESS = "Mindfulness"
    EXERCISE = "Exercise"
    SOCIAL = "Social"
    CREATIVE = "Creative"
    REST = "Rest"
    NUTRITION = "Nutrition"
    LEARNING = "Learning"
    OTHER = "Other"


# Checked in order; the first category with a word in the title starting with one of its keywords wins.
CATEGORY_KEYWORDS: List[tuple[ActivityCategory, tuple[str, ...]]] = [
    (
        ActivityCategory.MINDFULNESS,
        ("meditat", "mindful", "breath", "body scan", "gratitude", "grounding", "affirmation", "visualiz"),
    ),
    (
        ActivityCategory.EXERCISE,
        ("walk", "run", "jog", "yoga", "stretch", "exercise", "workout", "dance", "hike", "cycl", "swim", "movement"),
    ),
    (ActivityCategory.SOCIAL, ("friend", "family", "call", "connect", "social", "volunteer", "kindness", "loved one")),
    (ActivityCategory.CREATIVE, ("draw", "paint", "journal", "writ", "music", "craft", "creative", "sketch", "sing", "doodle")),
    (ActivityCategory.REST, ("sleep", "rest", "nap", "relax", "bath", "wind down", "wind-down", "bedtime", "unplug")),
    (ActivityCategory.NUTRITION, ("meal", "breakfast", "lunch", "dinner", "snack", "hydrat", "water", "cook", "herbal tea")),
    (ActivityCategory.LEARNING, ("read", "learn", "podcast", "book", "study")),
]


_CATEGORY_PATTERNS = [
    (category, re.compile(r"\b(?:" + "|".join(re.escape(keyword) for keyword in keywords) + ")"))
    for category, keywords in CATEGORY_KEYWORDS
]


def categorize_activity(title: str) -> ActivityCategory:
    lowered = title.lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return ActivityCategory.OTHER


class Activity(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    content: str
    duration: int = 30
    category: ActivityCategory = ActivityCategory.OTHER
    time_slot: TimeSlot
    is_completed: bool = False


class DayPlan(BaseModel):
    day_number: int = Field(ge=1)
    activities: List[Activity] = Field(default_factory=list)

    def activities_in(self, slot: TimeSlot) -> List[Activity]:
        return [activity for activity in self.activities if activity.time_slot == slot]


class Plan(BaseModel):
    days: List[DayPlan]
    creation_date: Optional[datetime] = None

    def day(self, day_number: int) -> Optional[DayPlan]:
        for day_plan in self.days:
            if day_plan.day_number == day_number:
                return day_plan
        return None

    def iter_activities(self) -> Iterator[Activity]:
        for day_plan in self.days:
            yield from day_plan.activities


@dataclass(frozen=True)
class DayRange:
    """Inclusive range of plan days requested in one completion call."""

    first: int
    last: int

    def __post_init__(self) -> None:
        if self.first < 1 or self.last < self.first:
            raise ValueError(f"Invalid day range {self.first}-{self.last}")

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.first, self.last + 1))

    def __len__(self) -> int:
        return self.last - self.first + 1


def split_day_ranges(total_days: int = PLAN_LENGTH_DAYS, chunk_size: int = PLAN_LENGTH_DAYS) -> List[DayRange]:
    """Cover days 1..total_days with contiguous chunks of at most chunk_size days."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    ranges: List[DayRange] = []
    first = 1
    while first <= total_days:
        last = min(first + chunk_size - 1, total_days)
        ranges.append(DayRange(first, last))
        first = last + 1
    return ranges


@dataclass
class PlanProgress:
    current_day: int
    days_remaining: int
    expired: bool


def plan_progress(plan: Plan, today: date) -> PlanProgress:
    """Locate today within the 14-day window that starts on the plan's creation date."""
    if plan.creation_date is None:
        raise ValueError("Plan has no creation date")
    elapsed = (today - plan.creation_date.date()).days
    current_day = min(max(elapsed + 1, 1), PLAN_LENGTH_DAYS)
    return PlanProgress(
        current_day=current_day,
        days_remaining=PLAN_LENGTH_DAYS - current_day,
        expired=elapsed >= PLAN_LENGTH_DAYS,
    )
