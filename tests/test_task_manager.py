import threading
from datetime import datetime, timedelta

import pytest

from companion.core.task import BaseTask, TaskType, compute_next_run, parse_hh_mm
from companion.core.task_manager import TaskManager

NOW = datetime(2025, 3, 10, 19, 0)


class CountingTask(BaseTask):
    def __init__(self, runs_wanted, interval=0.01):
        super().__init__("counting", TaskType.INTERVAL_SECONDS, {"interval_seconds": interval})
        self.runs = 0
        self.runs_wanted = runs_wanted
        self.done = threading.Event()

    def run(self):
        self.runs += 1
        if self.runs >= self.runs_wanted:
            self.done.set()


class FailingTask(CountingTask):
    def run(self):
        super().run()
        raise RuntimeError("task failed")


@pytest.fixture
def manager():
    tm = TaskManager(clock=lambda: NOW)
    yield tm
    tm.stop()


def test_daily_next_run_later_today():
    assert compute_next_run(TaskType.DAILY, {"time": "20:30"}, NOW) == datetime(2025, 3, 10, 20, 30)


def test_daily_next_run_rolls_to_tomorrow():
    assert compute_next_run(TaskType.DAILY, {"time": "00:05"}, NOW) == datetime(2025, 3, 11, 0, 5)
    assert compute_next_run(TaskType.DAILY, {"time": "19:00"}, NOW) == datetime(2025, 3, 11, 19, 0)


def test_interval_next_run():
    assert compute_next_run(TaskType.INTERVAL_SECONDS, {"interval_seconds": 30}, NOW) == NOW + timedelta(seconds=30)


def test_unknown_schedule_defaults_to_a_day():
    assert compute_next_run("weekly", None, NOW) == NOW + timedelta(days=1)


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", ""])
def test_parse_hh_mm_rejects_bad_times(value):
    with pytest.raises(ValueError):
        parse_hh_mm(value)


def test_schedule_task_runs_callback(manager):
    ran = threading.Event()

    manager.schedule_task("once", ran.set, 0)

    assert ran.wait(2)


def test_active_timers_use_injected_clock(manager):
    manager.schedule_task("later", lambda: None, 60)

    assert manager.get_active_timers() == [{"name": "later", "next_run_at": NOW + timedelta(seconds=60)}]


def test_rescheduling_same_name_replaces_timer(manager):
    ran = []
    manager.schedule_task("job", lambda: ran.append("first"), 60)
    manager.schedule_task("job", lambda: ran.append("second"), 60)

    assert len(manager.get_active_timers()) == 1


def test_recurring_task_runs_repeatedly(manager):
    task = CountingTask(runs_wanted=3)

    manager.schedule_recurring(task, run_now=True)

    assert task.done.wait(5)
    assert task.runs >= 3


def test_failing_task_keeps_being_rescheduled(manager):
    task = FailingTask(runs_wanted=2)

    manager.schedule_recurring(task, run_now=True)

    assert task.done.wait(5)


def test_stop_cancels_pending_timers(manager):
    ran = threading.Event()
    manager.schedule_task("pending", ran.set, 0.2)

    manager.stop()

    assert not ran.wait(0.5)
    assert manager.get_active_timers() == []


def test_no_scheduling_after_stop(manager):
    manager.stop()

    manager.schedule_task("late", lambda: None, 0)

    assert manager.get_active_timers() == []
