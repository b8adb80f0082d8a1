"""Current wellness plan document, one per user."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, func

from brightlight.db.base import Base
from brightlight.db.types import JSONBCompat


class PlanDocument(Base):
    __tablename__ = "plans"

    user_id = Column(String(length=128), primary_key=True)
    creation_date = Column(DateTime(timezone=True), nullable=False)
    # [{dayNumber, activities: [{id, timeSlot, duration, title, content, category, isCompleted}]}]
    plan = Column(JSONBCompat, nullable=False, default=list)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
