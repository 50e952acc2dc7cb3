"""
Single place for scheduling: in-memory timers driven by an injectable clock.
"""
import logging
import threading
from datetime import datetime, timedelta
from threading import Timer
from typing import Any, Callable, Dict, List, Optional

from companion.core.task import BaseTask

Clock = Callable[[], datetime]


class TaskManager:
    def __init__(self, clock: Optional[Clock] = None):
        self.tasks: Dict[str, Timer] = {}
        self.clock: Clock = clock or datetime.now
        self.logger = logging.getLogger("TaskManager")
        self._lock = threading.Lock()
        self._stopped = False

    def schedule_task(self, name: str, callback: Callable[[], Any], delay: float, one_time: bool = True) -> None:
        """Schedule a task to run after delay seconds."""
        with self._lock:
            if self._stopped:
                self.logger.debug(f"Not scheduling {name}: task manager stopped")
                return
            if name in self.tasks:
                self.logger.debug(f"Cancelling existing task {name}")
                self.tasks[name].cancel()

            delay = max(0.0, float(delay))
            timer = Timer(delay, self._run_task, args=(name, callback, delay, one_time))
            timer.daemon = True
            timer.scheduled_time = self.clock() + timedelta(seconds=delay)

            self.tasks[name] = timer
            timer.start()
        self.logger.debug(f"Timer started for {name}, scheduled for {timer.scheduled_time}")

    def _run_task(self, name: str, callback: Callable[[], Any], delay: float, one_time: bool) -> None:
        """Run the task and reschedule if needed."""
        try:
            callback()
        except Exception as e:
            self.logger.error(f"Error running task {name}: {e}", exc_info=True)
        if one_time:
            with self._lock:
                timer = self.tasks.get(name)
                if timer is not None and timer is threading.current_thread():
                    del self.tasks[name]
        else:
            self.schedule_task(name, callback, delay, one_time)

    def schedule_recurring(self, task: BaseTask, run_now: bool = False) -> None:
        """
        Schedule a BaseTask at its next run time (or immediately with run_now).
        After each run the task is rescheduled from its own get_next_run().
        """
        now = self.clock()
        if run_now:
            delay = 0.0
        else:
            delay = (task.get_next_run(now) - now).total_seconds()
        self.logger.info(f"Scheduling {task.name} ({task.schedule_type}) in {delay:.0f} seconds")
        self.schedule_task(task.name, lambda: self._run_recurring(task), delay, one_time=True)

    def _run_recurring(self, task: BaseTask) -> None:
        try:
            task.run()
        except Exception as e:
            self.logger.exception(f"Task {task.name} failed: {e}")
        self.schedule_recurring(task)

    def get_active_timers(self) -> List[Dict[str, Any]]:
        """Return list of active timer names and their next run time (for API)."""
        with self._lock:
            return [
                {"name": name, "next_run_at": timer.scheduled_time}
                for name, timer in self.tasks.items()
                if getattr(timer, "scheduled_time", None) is not None
            ]

    def stop(self) -> None:
        """Stop all scheduled tasks."""
        with self._lock:
            self._stopped = True
            for task in self.tasks.values():
                task.cancel()
            self.tasks.clear()
