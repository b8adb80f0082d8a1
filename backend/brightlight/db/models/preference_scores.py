"""Latest activity preference scores per user."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, func

from brightlight.db.base import Base
from brightlight.db.types import JSONBCompat


class PreferenceScores(Base):
    __tablename__ = "preference_scores"

    user_id = Column(String(length=128), primary_key=True)
    # activity name -> affinity score (0-100)
    scores = Column(JSONBCompat, nullable=False, default=dict)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
