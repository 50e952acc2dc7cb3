"""
Base task type and abstract BaseTask. Schedules are computed from the clock
passed in by the TaskManager, never from the wall clock directly.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional


class TaskType:
    """Schedule kind for tasks."""
    DAILY = "daily"
    INTERVAL_SECONDS = "interval_seconds"


def parse_hh_mm(value: Any) -> tuple:
    """Parse "HH:MM" into (hour, minute). Raises ValueError on bad input."""
    parts = str(value).strip().split(":")
    hour = int(parts[0])
    minute = int(parts[1]) if len(parts) > 1 else 0
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hour, minute


def compute_next_run(
    schedule_type: str,
    schedule_config: Optional[Dict[str, Any]],
    last_run: datetime,
) -> datetime:
    """Compute next run datetime from schedule_type, schedule_config, and last_run."""
    if schedule_type == TaskType.DAILY and schedule_config:
        hour, minute = parse_hh_mm(schedule_config.get("time", "00:00"))
        next_run = last_run.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if next_run <= last_run:
            next_run += timedelta(days=1)
        return next_run

    if schedule_type == TaskType.INTERVAL_SECONDS and schedule_config:
        sec = float(schedule_config.get("interval_seconds", 86400))
        return last_run + timedelta(seconds=sec)

    return last_run + timedelta(days=1)


class BaseTask(ABC):
    """
    Abstract base for background tasks. Subclasses implement run();
    the TaskManager asks get_next_run() after every run to reschedule.
    """

    def __init__(self, name: str, schedule_type: str, schedule_config: Optional[Dict[str, Any]] = None):
        self.name = name
        self.schedule_type = schedule_type
        self.schedule_config = schedule_config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_next_run(self, last_run: datetime) -> datetime:
        """Compute next run time from schedule_type and schedule_config."""
        return compute_next_run(self.schedule_type, self.schedule_config, last_run)

    @abstractmethod
    def run(self) -> None:
        """Execute the task once."""
        pass
