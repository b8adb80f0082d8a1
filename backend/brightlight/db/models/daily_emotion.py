"""Append-only daily emotion snapshots."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID

from brightlight.db.base import Base
from brightlight.db.types import JSONBCompat


class DailyEmotion(Base):
    __tablename__ = "daily_emotions"
    __table_args__ = (Index("ix_daily_emotions_user_date", "user_id", "date"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(String(length=128), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    emotions = Column(JSONBCompat, nullable=False, default=list)
    emotions_values = Column(JSONBCompat, nullable=False, default=list)
    summary = Column(Text, nullable=False, default="")
    # {"0": greeting, "1": greeting, ...}
    greeting_texts = Column(JSONBCompat, nullable=False, default=dict)
