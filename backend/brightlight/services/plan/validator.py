"""Structural sanity check for generated plan text."""
from __future__ import annotations

from typing import List

from brightlight.services.plan.types import DayRange, TimeSlot

SLOT_HEADERS = tuple(f"{slot.value}:" for slot in TimeSlot)


def required_markers(day_range: DayRange) -> List[str]:
    return [f"Day {day}:" for day in day_range] + list(SLOT_HEADERS)


def missing_markers(text: str, day_range: DayRange) -> List[str]:
    return [marker for marker in required_markers(day_range) if marker not in text]


def validate_plan_structure(text: str, day_range: DayRange) -> bool:
    """
    True when every day header of the range and all four slot headers appear somewhere in text.

    Presence only: activity content and per-day slot coverage are not inspected.
    """
    return not missing_markers(text, day_range)
