"""ORM models exposed for metadata discovery."""
from brightlight.db.models.daily_emotion import DailyEmotion
from brightlight.db.models.plan_document import PlanDocument
from brightlight.db.models.preference_scores import PreferenceScores
from brightlight.db.models.two_week_check import TwoWeekCheckRecord

__all__ = [
    "DailyEmotion",
    "PlanDocument",
    "PreferenceScores",
    "TwoWeekCheckRecord",
]
