import datetime as dt
import re
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DailyLogPayload(BaseModel):
    """A submitted daily log. Omitted fields take their defaults; they are not merged with the stored row."""

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(min_length=1)
    date: dt.date
    roza_kept: bool = False
    missed_reason: Optional[str] = None
    sehri_taken: bool = False
    iftar_done: bool = False
    taraweeh_prayed: bool = False
    quran_pages: int = Field(default=0, ge=0)
    zikr_count: int = Field(default=0, ge=0)
    charity_amount: Decimal = Field(default=Decimal("0"), ge=0)
    notes: Optional[str] = None

    @field_validator("user_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("user_id must not be blank")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _iso_date(cls, value: Any) -> Any:
        # only YYYY-MM-DD; timestamps and datetimes are not calendar dates
        if isinstance(value, dt.datetime):
            raise ValueError("date must be a calendar date, not a datetime")
        if isinstance(value, dt.date):
            return value
        if isinstance(value, str) and _ISO_DATE_RE.match(value):
            return dt.date.fromisoformat(value)
        raise ValueError("date must be formatted as YYYY-MM-DD")


class DailyLogResponse(DailyLogPayload):
    """Stored daily log, serialized from the ORM row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
