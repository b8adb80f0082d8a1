"""Best-effort scanner turning generated plan text into a typed schedule."""
from __future__ import annotations

import logging
import string
from typing import Iterable, List, Optional

from brightlight.services.plan.types import Activity, DayPlan, TimeSlot, categorize_activity

logger = logging.getLogger(__name__)

DAY_MARKER = "Day "
ACTIVITY_PREFIX = "- "
DEFAULT_DURATION_MIN = 30

# Markdown emphasis the model likes to wrap headers in ("**Morning:**").
_STRIP_CHARS = string.punctuation + string.whitespace


def parse_plan(raw_text: str) -> List[DayPlan]:
    """
    Split raw text on "Day " markers and read slotted activities out of each block.

    Blocks without a leading integer day number and malformed activity lines are
    dropped silently. The result follows text order, not day order, and may hold
    repeated or out-of-range day numbers; callers decide what a complete plan is.
    """
    day_plans: List[DayPlan] = []
    for block in raw_text.split(DAY_MARKER)[1:]:
        lines = block.split("\n")
        day_number = _parse_day_number(lines[0])
        if day_number is None:
            continue
        day_plans.append(DayPlan(day_number=day_number, activities=_parse_activities(lines[1:])))

    logger.debug("Parsed %d day blocks from %d characters", len(day_plans), len(raw_text))
    return day_plans


def _parse_day_number(header: str) -> Optional[int]:
    token = header.strip(_STRIP_CHARS)
    if not token.isdigit():
        return None
    day_number = int(token)
    return day_number if day_number >= 1 else None


def _parse_activities(lines: Iterable[str]) -> List[Activity]:
    activities: List[Activity] = []
    current_slot: Optional[TimeSlot] = None
    for raw_line in lines:
        line = raw_line.strip()
        if line.startswith(ACTIVITY_PREFIX):
            if current_slot is None:
                continue
            activity = _parse_activity_line(line[len(ACTIVITY_PREFIX):], current_slot)
            if activity is not None:
                activities.append(activity)
        elif line.rstrip("*_").endswith(":"):
            current_slot = TimeSlot.from_label(line.strip(_STRIP_CHARS))
    return activities


def _parse_activity_line(body: str, slot: TimeSlot) -> Optional[Activity]:
    """Read `Title (Duration unit): Description`."""
    fields = body.split(":")
    if len(fields) != 2:
        return None
    title_and_duration = fields[0].split("(")
    if len(title_and_duration) != 2:
        return None

    title = title_and_duration[0].strip()
    content = fields[1].strip()
    if not title:
        return None
    return Activity(
        title=title,
        content=content,
        duration=_parse_duration(title_and_duration[1]),
        category=categorize_activity(title),
        time_slot=slot,
    )


def _parse_duration(text: str) -> int:
    tokens = text.strip(_STRIP_CHARS).split()
    if tokens and tokens[0].isdigit():
        return int(tokens[0])
    return DEFAULT_DURATION_MIN


def render_plan(days: Iterable[DayPlan]) -> str:
    """Write days back in the canonical generation format."""
    blocks: List[str] = []
    for day_plan in days:
        lines = [f"Day {day_plan.day_number}:"]
        for slot in TimeSlot:
            lines.append(f"{slot.value}:")
            for activity in day_plan.activities_in(slot):
                lines.append(f"- {activity.title} ({activity.duration} minutes): {activity.content}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
