"""GAD/PHQ scoring, severity bands and check-in cadence."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

MAX_SCALE_SCORE = 20
QUESTIONS_PER_SCALE = 5
CHECK_INTERVAL_DAYS = 14


class SeverityLevel(str, Enum):
    MINIMAL = "Minimal"
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"


# Upper bound (inclusive) of each band.
SEVERITY_BANDS: List[Tuple[int, SeverityLevel]] = [
    (5, SeverityLevel.MINIMAL),
    (10, SeverityLevel.MILD),
    (15, SeverityLevel.MODERATE),
    (20, SeverityLevel.SEVERE),
]


class Assessment(BaseModel):
    gad_score: int = Field(ge=0, le=MAX_SCALE_SCORE)
    phq_score: int = Field(ge=0, le=MAX_SCALE_SCORE)
    preferences: Dict[str, float] = Field(default_factory=dict)

    @property
    def gad_level(self) -> str:
        return gad_level_label(self.gad_score)

    @property
    def phq_level(self) -> str:
        return phq_level_label(self.phq_score)


def severity_level(score: int) -> SeverityLevel:
    if score < 0 or score > MAX_SCALE_SCORE:
        raise ValueError(f"Score {score} outside 0-{MAX_SCALE_SCORE}")
    for upper, level in SEVERITY_BANDS:
        if score <= upper:
            return level
    raise AssertionError("unreachable")  # pragma: no cover


def gad_level_label(score: int) -> str:
    return f"{severity_level(score).value} Anxiety"


def phq_level_label(score: int) -> str:
    return f"{severity_level(score).value} Depression"


def score_answers(answers: Sequence[int]) -> Tuple[int, int]:
    """Sum the five anxiety answers and the five depression answers (each 0-4)."""
    if len(answers) != 2 * QUESTIONS_PER_SCALE:
        raise ValueError(f"Expected {2 * QUESTIONS_PER_SCALE} answers, got {len(answers)}")
    if any(answer < 0 or answer > 4 for answer in answers):
        raise ValueError("Answers must be between 0 and 4")
    return sum(answers[:QUESTIONS_PER_SCALE]), sum(answers[QUESTIONS_PER_SCALE:])


_ANXIETY_SUMMARIES = {
    SeverityLevel.MINIMAL: (
        "Your anxiety levels are minimal. It's great that you're experiencing low anxiety! "
        "Continue practicing good habits to maintain your well-being."
    ),
    SeverityLevel.MILD: (
        "You have mild anxiety, which can be managed with some focused self-care. "
        "Let's explore simple techniques to help you stay calm."
    ),
    SeverityLevel.MODERATE: (
        "Your anxiety levels are moderate, indicating a need for more structured support. "
        "We can work on strategies to manage your anxiety effectively."
    ),
    SeverityLevel.SEVERE: (
        "You're experiencing severe anxiety, and it's important to seek professional help. "
        "Let's make sure you have access to the necessary support."
    ),
}

_DEPRESSION_SUMMARIES = {
    SeverityLevel.MINIMAL: (
        "Your depression levels are minimal. It's wonderful that you're feeling good. "
        "Keep up the positive lifestyle choices."
    ),
    SeverityLevel.MILD: (
        "You have mild depression, which can be addressed with some targeted self-care strategies. "
        "Let's find ways to uplift your mood."
    ),
    SeverityLevel.MODERATE: (
        "Your depression is moderate, indicating that you could benefit from more structured help. "
        "We can focus on improving your mood together."
    ),
    SeverityLevel.SEVERE: (
        "You're experiencing severe depression, and it's important to seek professional help. "
        "Let's make sure you have access to the necessary support."
    ),
}


def assessment_summary(gad_score: int, phq_score: int) -> str:
    return f"{_ANXIETY_SUMMARIES[severity_level(gad_score)]}\n\n{_DEPRESSION_SUMMARIES[severity_level(phq_score)]}"


def is_check_due(last_check_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """A check is due with no prior record, or once 14 whole days have passed (day 14 included)."""
    if last_check_at is None:
        return True
    current = now or datetime.now(timezone.utc)
    if last_check_at.tzinfo is None:
        last_check_at = last_check_at.replace(tzinfo=timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return (current - last_check_at).days >= CHECK_INTERVAL_DAYS
