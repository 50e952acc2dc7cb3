"""
SQLAlchemy model for daily devotional logs: one row per user per date.
"""
from sqlalchemy import Column, String, Date, DateTime, Integer, Boolean, Numeric, Text, UniqueConstraint

from companion.core.db import Base
from companion.core.models import _utc_now


class DailyLog(Base):
    """One day's fasting, prayer, Quran, zikr and charity record. Upserted on (user_id, date)."""
    __tablename__ = "daily_logs"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_logs_user_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    date = Column(Date, nullable=False)

    roza_kept = Column(Boolean, default=False, nullable=False)
    missed_reason = Column(Text, nullable=True)  # only meaningful when roza_kept is false
    sehri_taken = Column(Boolean, default=False, nullable=False)
    iftar_done = Column(Boolean, default=False, nullable=False)
    taraweeh_prayed = Column(Boolean, default=False, nullable=False)
    quran_pages = Column(Integer, default=0, nullable=False)
    zikr_count = Column(Integer, default=0, nullable=False)
    charity_amount = Column(Numeric(12, 2), default=0, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
