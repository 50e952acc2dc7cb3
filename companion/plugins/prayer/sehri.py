"""
Sehri reminder: one notification per Imsak crossing, `lead_minutes` before Imsak.
"""
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from .schedule import instant_on


class SehriReminder:
    def __init__(self, lead_minutes: int = 15, notify: Optional[Callable[[int, datetime], None]] = None):
        if lead_minutes < 0:
            raise ValueError("lead_minutes must not be negative")
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lead_minutes = int(lead_minutes)
        self.notify = notify
        self._lock = threading.Lock()
        self.notified = False

    @property
    def lead_minutes(self) -> int:
        return self._lead_minutes

    @lead_minutes.setter
    def lead_minutes(self, value: int) -> None:
        value = int(value)
        if value < 0:
            raise ValueError("lead_minutes must not be negative")
        with self._lock:
            if value != self._lead_minutes:
                self.logger.info(f"Sehri alert lead time changed: {self._lead_minutes} -> {value} minutes")
            self._lead_minutes = value
            # New lead time gets its own window, even later the same night
            self.notified = False

    def check(self, imsak: Optional[str], now: datetime) -> bool:
        """Fire the notification if `now` is inside the alert window. Returns True when it fired."""
        if not imsak:
            return False
        imsak_at = instant_on(now, imsak)
        if imsak_at is None:
            self.logger.warning(f"Cannot parse Imsak time {imsak!r}")
            return False

        with self._lock:
            lead = timedelta(minutes=self._lead_minutes)
            if now >= imsak_at:
                # tomorrow's window can open before midnight (Imsak shortly after 00:00)
                imsak_at += timedelta(days=1)
                if now < imsak_at - lead:
                    self.notified = False
                    return False

            alert_at = imsak_at - lead
            if now < alert_at or self.notified:
                return False
            self.notified = True
            lead = self._lead_minutes

        self.logger.info(f"Sehri ends at {imsak} ({lead} minutes)")
        if self.notify is not None:
            self.notify(lead, imsak_at)
        return True
