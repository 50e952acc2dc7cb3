"""
Next-prayer resolution and countdown.

Pure functions over a {name: "HH:MM"} mapping and an injected `now`; nothing
here reads the wall clock.
"""
import logging
import re
from collections import namedtuple
from datetime import datetime, timedelta
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

PRAYER_NAMES = (
    "Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha", "Imsak", "Midnight", "Sunset",
)

# Aladhan may append a timezone, e.g. "05:12 (+06)"
_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})")

NextPrayer = namedtuple("NextPrayer", ["name", "time", "at"])


class Countdown(namedtuple("Countdown", ["hours", "minutes", "seconds"])):
    """Whole hours, minutes and seconds left (floored)."""

    __slots__ = ()

    def __str__(self) -> str:
        return f"{self.hours}h {self.minutes}m {self.seconds}s"


def instant_on(day: datetime, hh_mm: str) -> Optional[datetime]:
    """Combine `day`'s date with an "HH:MM" string. None if the string is not a time of day."""
    match = _TIME_RE.match(str(hh_mm))
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


def resolve_next(times: Optional[Mapping[str, str]], now: datetime) -> Optional[NextPrayer]:
    """
    Return the next prayer after `now`, or None when there is nothing to resolve.

    Times already passed today are taken as tomorrow's. On equal instants the
    first entry in iteration order wins.
    """
    if not times:
        return None

    best = None
    for name, hh_mm in times.items():
        at = instant_on(now, hh_mm)
        if at is None:
            logger.warning(f"Skipping {name}: unparseable time {hh_mm!r}")
            continue
        if at < now:
            at += timedelta(days=1)
        if best is None or at < best.at:
            best = NextPrayer(name, hh_mm, at)
    return best


def countdown(target: datetime, now: datetime) -> Countdown:
    """Time left until target, floored to whole seconds. Never negative."""
    total = int((target - now).total_seconds())
    if total < 0:
        total = 0
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return Countdown(hours, minutes, seconds)
