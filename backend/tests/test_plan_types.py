from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from brightlight.services.plan.types import (
    Activity,
    ActivityCategory,
    DayPlan,
    DayRange,
    Plan,
    TimeSlot,
    categorize_activity,
    plan_progress,
    split_day_ranges,
)


def test_split_day_ranges_single_chunk_by_default() -> None:
    assert split_day_ranges() == [DayRange(1, 14)]


def test_split_day_ranges_covers_all_days_contiguously() -> None:
    ranges = split_day_ranges(14, 5)

    assert ranges == [DayRange(1, 5), DayRange(6, 10), DayRange(11, 14)]
    assert [day for day_range in ranges for day in day_range] == list(range(1, 15))


def test_day_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        DayRange(5, 4)


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Morning Meditation", ActivityCategory.MINDFULNESS),
        ("Gentle Yoga Flow", ActivityCategory.EXERCISE),
        ("Call a Friend", ActivityCategory.SOCIAL),
        ("Gratitude Journaling", ActivityCategory.MINDFULNESS),
        ("Free Writing", ActivityCategory.CREATIVE),
        ("Warm Bath", ActivityCategory.REST),
        ("Cook a Healthy Dinner", ActivityCategory.NUTRITION),
        ("Read a Chapter", ActivityCategory.LEARNING),
        ("Start your Day", ActivityCategory.OTHER),
        ("Heartfelt Reflection", ActivityCategory.OTHER),
    ],
)
def test_categorize_activity(title, expected) -> None:
    assert categorize_activity(title) is expected


def test_time_slot_from_label_is_case_insensitive() -> None:
    assert TimeSlot.from_label(" night ") is TimeSlot.NIGHT
    assert TimeSlot.from_label("Midday") is None


def _plan(created: datetime) -> Plan:
    activity = Activity(title="Walk", content="Outside", time_slot=TimeSlot.MORNING)
    return Plan(days=[DayPlan(day_number=1, activities=[activity])], creation_date=created)


def test_plan_progress_first_day() -> None:
    plan = _plan(datetime(2024, 5, 1, 22, 0, tzinfo=timezone.utc))

    progress = plan_progress(plan, date(2024, 5, 1))

    assert (progress.current_day, progress.days_remaining, progress.expired) == (1, 13, False)


def test_plan_progress_clamps_after_window() -> None:
    plan = _plan(datetime(2024, 5, 1, tzinfo=timezone.utc))

    last_day = plan_progress(plan, date(2024, 5, 14))
    after = plan_progress(plan, date(2024, 5, 20))

    assert (last_day.current_day, last_day.expired) == (14, False)
    assert (after.current_day, after.days_remaining, after.expired) == (14, 0, True)


def test_plan_lookup_helpers() -> None:
    plan = _plan(datetime(2024, 5, 1, tzinfo=timezone.utc))

    assert plan.day(1).activities_in(TimeSlot.MORNING)[0].title == "Walk"
    assert plan.day(2) is None
    assert len(list(plan.iter_activities())) == 1
