from __future__ import annotations

from brightlight.services.plan.parser import DEFAULT_DURATION_MIN, parse_plan, render_plan
from brightlight.services.plan.types import Activity, ActivityCategory, DayPlan, TimeSlot

SAMPLE = """Here is your plan.

Day 1:
Morning:
- Mindful Breathing (10 minutes): Sit comfortably and follow your breath.
Afternoon:
- Gentle Walk (20 minutes): Step outside and notice the sounds around you.
Evening:
- Gratitude Journaling (15 minutes): Write three things you appreciated today.
Night:
- Warm Bath (25 minutes): Let the warmth ease the tension of the day.

Day 2:
**Morning:**
- Stretching (short): Loosen up your shoulders and back.
**Night:**
- Read a Book (30 mins): Settle into a calm story.
"""


def test_parse_reads_days_and_slots() -> None:
    days = parse_plan(SAMPLE)

    assert [day.day_number for day in days] == [1, 2]
    first = days[0]
    assert [activity.time_slot for activity in first.activities] == [
        TimeSlot.MORNING,
        TimeSlot.AFTERNOON,
        TimeSlot.EVENING,
        TimeSlot.NIGHT,
    ]
    walk = first.activities[1]
    assert walk.title == "Gentle Walk"
    assert walk.duration == 20
    assert walk.content == "Step outside and notice the sounds around you."
    assert walk.category is ActivityCategory.EXERCISE
    assert walk.is_completed is False


def test_parse_handles_emphasis_and_non_numeric_duration() -> None:
    second = parse_plan(SAMPLE)[1]

    assert [activity.time_slot for activity in second.activities] == [TimeSlot.MORNING, TimeSlot.NIGHT]
    assert second.activities[0].duration == DEFAULT_DURATION_MIN
    assert second.activities[1].duration == 30


def test_parse_assigns_unique_ids() -> None:
    ids = [activity.id for day in parse_plan(SAMPLE) for activity in day.activities]

    assert len(ids) == len(set(ids))


def test_parse_drops_malformed_lines() -> None:
    text = (
        "Day 3:\n"
        "Morning:\n"
        "- No duration here: just text\n"
        "- Too (many) (parens): text\n"
        "- Breathing (5 minutes): in: out\n"
        "- Body Scan (10 minutes): Relax each muscle group.\n"
    )

    activities = parse_plan(text)[0].activities

    assert [activity.title for activity in activities] == ["Body Scan"]


def test_parse_ignores_activities_outside_known_slot() -> None:
    text = (
        "Day 4:\n"
        "- Orphan (5 minutes): No slot yet.\n"
        "Midday:\n"
        "- Lost (5 minutes): Unknown slot.\n"
        "Evening:\n"
        "- Call a Friend (15 minutes): Share a small win.\n"
    )

    activities = parse_plan(text)[0].activities

    assert [(activity.title, activity.time_slot) for activity in activities] == [("Call a Friend", TimeSlot.EVENING)]


def test_parse_skips_blocks_without_day_number() -> None:
    text = "Day X:\nMorning:\n- A (5 minutes): b\n\nDay 7:\nMorning:\n- B (5 minutes): c\n"

    assert [day.day_number for day in parse_plan(text)] == [7]


def test_parse_keeps_text_order_and_duplicates() -> None:
    text = "Day 2:\nMorning:\n\nDay 1:\nMorning:\n\nDay 2:\nNight:\n"

    assert [day.day_number for day in parse_plan(text)] == [2, 1, 2]


def test_render_then_parse_keeps_days_and_activity_counts() -> None:
    days = [
        DayPlan(
            day_number=day,
            activities=[
                Activity(title=f"Activity {day}-{slot.value}", content="Take it slow.", duration=10, time_slot=slot)
                for slot in TimeSlot
                for _ in range(1 + day % 2)
            ],
        )
        for day in range(1, 15)
    ]

    parsed = parse_plan(render_plan(days))

    assert [day.day_number for day in parsed] == list(range(1, 15))
    assert [len(day.activities) for day in parsed] == [len(day.activities) for day in days]
