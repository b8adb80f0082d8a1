"""Prompt templates for wellness plan generation."""
from __future__ import annotations

from typing import List, Mapping, Tuple

from brightlight.services.assessment import Assessment
from brightlight.services.plan.types import DayRange, TimeSlot

TOP_PREFERENCE_COUNT = 5

PLAN_FORMAT_BLOCK = "\n".join(
    ["Day X:"]
    + [line for slot in TimeSlot for line in (f"{slot.value}:", "- Activity Title (Duration): Description")]
)


def top_preferences(preferences: Mapping[str, float], limit: int = TOP_PREFERENCE_COUNT) -> List[Tuple[str, float]]:
    """Highest affinity first; equal scores keep insertion order (sorted is stable)."""
    return sorted(preferences.items(), key=lambda item: item[1], reverse=True)[:limit]


def format_preferences(preferences: Mapping[str, float]) -> str:
    return ", ".join(f"{name}: {score:.1f}%" for name, score in top_preferences(preferences))


def build_plan_prompt(assessment: Assessment) -> str:
    """Describe the user to the model: scores, preferences, tone and output format."""
    described_format = PLAN_FORMAT_BLOCK.replace("Description", "Description (25-40 words)")
    return (
        "As Bryan, a compassionate and caring wellness guide, create a personalized 14-day wellness plan "
        "for a user with the following characteristics:\n\n"
        f"GAD-7 score: {assessment.gad_score}\n"
        f"PHQ-9 score: {assessment.phq_score}\n"
        f"Top 5 activity preferences: {format_preferences(assessment.preferences)}\n\n"
        "Create a plan that addresses the user's anxiety and depression levels while incorporating their "
        "preferred activities. Include a mix of activities that address mental, emotional, and physical "
        "well-being, drawing inspiration from various therapeutic approaches like CBT, mindfulness, and "
        "person-centered therapy.\n\n"
        "For each day, provide one or two morning, afternoon, evening, and nighttime activities, each lasting "
        "within 30 minutes. These should be practical, engaging, and aimed at improving the user's overall "
        "wellness.\n\n"
        "Use language that is encouraging and empowering. Offer brief insights into why certain activities "
        "are beneficial, in a natural, conversational manner. Encourage self-reflection and gentle "
        "self-awareness throughout the plan.\n\n"
        "Important: Each activity description should be between 25 and 40 words long and must not contain "
        "a colon.\n\n"
        "Format the plan as follows for each day:\n\n"
        f"{described_format}\n"
    )


def build_chunk_prompt(requirements: str, day_range: DayRange) -> str:
    """Wrap the caller's requirements with the day list and the strict output format."""
    days = ", ".join(f"Day {day}" for day in day_range)
    return (
        f"Generate a detailed wellness plan for the following days: {days}. "
        "Each day MUST include morning, afternoon, evening, and night activities. "
        "Format the plan as follows:\n\n"
        f"{PLAN_FORMAT_BLOCK}\n\n"
        "Additional requirements:\n"
        f"{requirements}"
    )
