"""
Live prayer state for the configured location: today's times, the next
prayer with its countdown, and the Sehri reminder.

Refreshes are sequenced: every refresh takes a request id and a response is
only applied while its id is still the latest issued, so a slow response can
never overwrite a newer one.
"""
import itertools
import logging
import threading
from collections import deque
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from companion.core.errors import UpstreamServiceError

from .prayer_base import PrayerBackend
from .schedule import Countdown, NextPrayer, countdown, resolve_next
from .sehri import SehriReminder


class PrayerMonitor:
    def __init__(
        self,
        backend: PrayerBackend,
        location: Dict[str, Any],
        reminder: Optional[SehriReminder] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_notifications: int = 20,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.backend = backend
        self.location = dict(location)
        self.clock = clock or datetime.now
        self.reminder = reminder or SehriReminder()
        if self.reminder.notify is None:
            self.reminder.notify = self._on_sehri_alert
        self.notifications = deque(maxlen=max_notifications)

        self._lock = threading.Lock()
        self._request_ids = itertools.count(1)
        self._latest_request = 0
        self._times: Optional[Dict[str, str]] = None
        self.fetched_at: Optional[datetime] = None
        self.next_prayer: Optional[NextPrayer] = None
        self.countdown: Optional[Countdown] = None

    @property
    def times(self) -> Optional[Dict[str, str]]:
        with self._lock:
            return dict(self._times) if self._times is not None else None

    def begin_request(self) -> int:
        """Issue a new request id; responses for older ids are discarded."""
        with self._lock:
            self._latest_request = next(self._request_ids)
            return self._latest_request

    def apply(self, request_id: int, times: Dict[str, str]) -> bool:
        """Store times fetched by request_id unless a newer request was issued since."""
        with self._lock:
            if request_id != self._latest_request:
                self.logger.info(
                    f"Discarding stale prayer times (request {request_id}, latest {self._latest_request})"
                )
                return False
            self._times = dict(times)
            self.fetched_at = self.clock()
        self.logger.info(f"Prayer times updated: {times}")
        return True

    def refresh(self) -> bool:
        """Fetch today's times for the configured location. Failures keep the previous times."""
        request_id = self.begin_request()
        location = {
            "city": self.location.get("city"),
            "country": self.location.get("country"),
            "latitude": self.location.get("latitude"),
            "longitude": self.location.get("longitude"),
            "method": self.location.get("method"),
        }
        try:
            times = self.backend.get_prayer_times(**location)
        except UpstreamServiceError as e:
            self.logger.error(f"Prayer times refresh failed: {e}")
            return False
        return self.apply(request_id, times)

    def update_location(self, location: Dict[str, Any]) -> None:
        with self._lock:
            self.location = dict(location)

    def tick(self, now: Optional[datetime] = None) -> Optional[NextPrayer]:
        """Re-resolve the next prayer and countdown. None while no times are loaded."""
        now = now or self.clock()
        nxt = resolve_next(self.times, now)
        self.next_prayer = nxt
        self.countdown = countdown(nxt.at, now) if nxt else None
        return nxt

    def check_sehri(self, now: Optional[datetime] = None) -> bool:
        times = self.times
        if not times:
            return False
        return self.reminder.check(times.get("Imsak"), now or self.clock())

    def _on_sehri_alert(self, lead_minutes: int, imsak_at: datetime) -> None:
        message = f"Sehri ends in {lead_minutes} minutes (Imsak {imsak_at:%H:%M})"
        self.logger.warning(message)
        self.notifications.append({"message": message, "imsak": imsak_at, "created_at": self.clock()})

    def status(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Snapshot for the API: loading state or the next prayer with its countdown."""
        now = now or self.clock()
        nxt = self.tick(now)
        if nxt is None:
            return {"status": "loading"}
        left = countdown(nxt.at, now)
        return {
            "status": "ok",
            "name": nxt.name,
            "time": nxt.time,
            "countdown": str(left),
            "hours": left.hours,
            "minutes": left.minutes,
            "seconds": left.seconds,
        }

    def recent_notifications(self) -> List[Dict[str, Any]]:
        return list(self.notifications)
