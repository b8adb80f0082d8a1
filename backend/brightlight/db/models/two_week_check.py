"""Append-only GAD/PHQ two-week check records."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID

from brightlight.db.base import Base


class TwoWeekCheckRecord(Base):
    __tablename__ = "twoweek_check_records"
    __table_args__ = (Index("ix_twoweek_check_records_user_date", "user_id", "date"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(String(length=128), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    gad_score = Column(Integer, nullable=False)
    gad_score_level = Column(String(length=50), nullable=False)
    phq_score = Column(Integer, nullable=False)
    phq_score_level = Column(String(length=50), nullable=False)
