"""
Per-plugin API for prayer times. Mounted at /api/.
- /prayer-times, /calendar: provider JSON passed through verbatim.
- /next-prayer: next prayer and countdown from the live monitor.
- /sehri-alert: reminder lead time and recent notifications.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from .prayer_base import DEFAULT_METHOD


class SehriNotificationResponse(BaseModel):
    message: str
    imsak: datetime
    created_at: datetime


class SehriAlertResponse(BaseModel):
    """Response for GET/PUT /sehri-alert."""

    lead_minutes: int
    notified: bool
    notifications: List[SehriNotificationResponse] = []


class SehriAlertUpdate(BaseModel):
    lead_minutes: int = Field(ge=0, le=180)


def get_router(companion_app: Any) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api."""
    router = APIRouter(tags=["Prayer Times"])

    @router.get("/prayer-times")
    def get_prayer_times(
        city: Optional[str] = None,
        country: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        method: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Today's timings by coordinates when both are given, else by city (configured location by default)."""
        location = companion_app.config.section("location")
        if latitude is None or longitude is None:
            city = city or location.get("city")
            country = country or location.get("country")
        return companion_app.prayer_backend.get_timings(
            city=city,
            country=country,
            latitude=latitude,
            longitude=longitude,
            method=method if method is not None else location.get("method", DEFAULT_METHOD),
        )

    @router.get("/calendar")
    def get_calendar(
        month: int,
        year: int,
        city: Optional[str] = None,
        country: Optional[str] = None,
        method: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Monthly calendar of timings for a city."""
        location = companion_app.config.section("location")
        return companion_app.prayer_backend.get_calendar(
            city=city or location.get("city"),
            country=country or location.get("country"),
            month=month,
            year=year,
            method=method if method is not None else location.get("method", DEFAULT_METHOD),
        )

    @router.get("/next-prayer")
    def get_next_prayer() -> Dict[str, Any]:
        return companion_app.prayer_monitor.status()

    def _sehri_state() -> SehriAlertResponse:
        monitor = companion_app.prayer_monitor
        return SehriAlertResponse(
            lead_minutes=monitor.reminder.lead_minutes,
            notified=monitor.reminder.notified,
            notifications=monitor.recent_notifications(),
        )

    @router.get("/sehri-alert", response_model=SehriAlertResponse)
    def get_sehri_alert() -> SehriAlertResponse:
        return _sehri_state()

    @router.put("/sehri-alert", response_model=SehriAlertResponse)
    def update_sehri_alert(body: SehriAlertUpdate) -> SehriAlertResponse:
        """Change the lead time; the reminder may fire again for the new window."""
        companion_app.prayer_monitor.reminder.lead_minutes = body.lead_minutes
        return _sehri_state()

    return router
