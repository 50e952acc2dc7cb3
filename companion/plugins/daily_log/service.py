"""
Service layer: upsert and load daily logs.

Upsert relies on SQLite's INSERT ... ON CONFLICT(user_id, date) DO UPDATE, so
a row is replaced atomically and id/created_at survive the update.
"""
import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from companion.core.db import session_scope
from companion.core.errors import PersistenceError
from companion.core.models import _utc_now
from companion.plugins.daily_log.models import DailyLog
from companion.plugins.daily_log.schemas import DailyLogPayload

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = (
    "roza_kept",
    "missed_reason",
    "sehri_taken",
    "iftar_done",
    "taraweeh_prayed",
    "quran_pages",
    "zikr_count",
    "charity_amount",
    "notes",
    "updated_at",
)


def upsert_daily_log(payload: Union[DailyLogPayload, Mapping[str, Any]]) -> None:
    """Insert the log or replace every mutable field of the existing (user_id, date) row."""
    if not isinstance(payload, DailyLogPayload):
        try:
            payload = DailyLogPayload.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Rejected daily log: {e.errors()}")
            raise PersistenceError(f"Invalid daily log: {e}") from e

    now = _utc_now()
    values = payload.model_dump()
    values.update(created_at=now, updated_at=now)

    stmt = sqlite_insert(DailyLog).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[DailyLog.user_id, DailyLog.date],
        set_={name: stmt.excluded[name] for name in MUTABLE_FIELDS},
    )
    try:
        with session_scope() as session:
            session.execute(stmt)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to upsert daily log for {payload.user_id} on {payload.date}")
        raise PersistenceError(str(e)) from e
    logger.info(f"Saved daily log for {payload.user_id} on {payload.date}")


def list_daily_logs(user_id: str) -> List[DailyLog]:
    """Return all DailyLog rows for a user, most recent date first."""
    try:
        with session_scope() as session:
            stmt = (
                select(DailyLog)
                .where(DailyLog.user_id == user_id)
                .order_by(DailyLog.date.desc())
            )
            return list(session.execute(stmt).scalars().all())
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load daily logs for {user_id}")
        raise PersistenceError(str(e), user_message="Failed to load logs") from e


def get_daily_log(user_id: str, log_date: date) -> Optional[DailyLog]:
    """Return the user's log for one date, or None."""
    try:
        with session_scope() as session:
            return (
                session.execute(
                    select(DailyLog).where(DailyLog.user_id == user_id, DailyLog.date == log_date)
                )
                .scalars().first()
            )
    except SQLAlchemyError as e:
        logger.exception(f"Failed to load daily log for {user_id} on {log_date}")
        raise PersistenceError(str(e), user_message="Failed to load logs") from e
