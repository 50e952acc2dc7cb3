"""
Background tasks driving the prayer monitor: daily refresh, countdown, Sehri check.
"""
from typing import Any, Dict

from companion.core.task import BaseTask, TaskType, parse_hh_mm
from companion.plugins.prayer.monitor import PrayerMonitor


class PrayerTimesRefreshTask(BaseTask):
    """Fetch today's prayer times once a day (prayer.refresh_time)."""

    def __init__(self, monitor: PrayerMonitor, config: Dict[str, Any]):
        super().__init__("prayer_times_refresh", *self._schedule_from_config(config))
        self.monitor = monitor

    def _schedule_from_config(self, config: Dict[str, Any]) -> tuple:
        try:
            hour, minute = parse_hh_mm(config.get("refresh_time", "00:05"))
        except (ValueError, TypeError):
            return TaskType.DAILY, {"time": "00:05"}
        return TaskType.DAILY, {"time": f"{hour:02d}:{minute:02d}"}

    def run(self) -> None:
        if self.monitor.refresh():
            self.logger.info("Prayer times refreshed")


class CountdownTask(BaseTask):
    """Re-evaluate the next prayer countdown."""

    def __init__(self, monitor: PrayerMonitor, config: Dict[str, Any]):
        interval = config.get("countdown_interval", 1)
        super().__init__("prayer_countdown", TaskType.INTERVAL_SECONDS, {"interval_seconds": interval})
        self.monitor = monitor

    def run(self) -> None:
        nxt = self.monitor.tick()
        if nxt is not None:
            self.logger.debug(f"Next prayer {nxt.name} at {nxt.time}, in {self.monitor.countdown}")


class SehriAlertTask(BaseTask):
    """Check the Sehri reminder window."""

    def __init__(self, monitor: PrayerMonitor, config: Dict[str, Any]):
        interval = config.get("sehri_check_interval", 30)
        super().__init__("sehri_alert", TaskType.INTERVAL_SECONDS, {"interval_seconds": interval})
        self.monitor = monitor

    def run(self) -> None:
        self.monitor.check_sehri()
