import logging
import os
import sys
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .config import Config
from .db import dispose_db, init_db
from .task_manager import TaskManager


class CompanionApp:
    """
    Owns configuration, the database, external clients and background tasks.
    Routes reach their collaborators through this object (see companion.api.server).
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        watch_config: bool = True,
        db_url: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
        prayer_backend: Any = None,
        quran_backend: Any = None,
        coach_client: Any = None,
    ):
        from companion.plugins.coach.client import CoachClient
        from companion.plugins.prayer.monitor import PrayerMonitor
        from companion.plugins.prayer.prayer_base import AladhanBackend
        from companion.plugins.prayer.sehri import SehriReminder
        from companion.plugins.quran.quran_base import AlQuranCloudBackend
        from companion.plugins.tasbih.counter import TasbihRegistry

        self.logger = logging.getLogger(self.__class__.__name__)

        self.config = Config(config_path=config_path, watch=watch_config)
        self.config.register_change_callback(self.handle_config_change)

        # Database before anything that might persist
        init_db(self.config.data, db_url=db_url)

        self.task_manager = TaskManager(clock=clock)

        # External clients are created once here and shared by the routes
        prayer_config = self.config.section("prayer")
        self.prayer_backend = prayer_backend or AladhanBackend(prayer_config)
        self.quran_backend = quran_backend or AlQuranCloudBackend(self.config.section("quran"))
        self.coach_client = coach_client or CoachClient.from_config(self.config.section("coach"))

        self.prayer_monitor = PrayerMonitor(
            self.prayer_backend,
            self.config.section("location"),
            reminder=SehriReminder(int(prayer_config.get("sehri_alert_minutes", 15))),
            clock=self.task_manager.clock,
        )
        self.tasbih_counters = TasbihRegistry()

    def _setup_logging(self) -> None:
        """Configure logging to write to both file and stdout"""
        root_logger = logging.getLogger()
        if root_logger.handlers:
            root_logger.handlers.pop()
        log_config = self.config.section("logging")
        root_logger.setLevel(getattr(logging, str(log_config.get("level", "INFO")).upper(), logging.INFO))

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
        )

        log_file = log_config.get("file")
        if log_file:
            log_file = os.path.expanduser(log_file)
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        logging.info("Ramadan companion starting...")

    def start_tasks(self) -> None:
        """Start the prayer refresh, countdown and Sehri check timers."""
        from companion.plugins.prayer.task import CountdownTask, PrayerTimesRefreshTask, SehriAlertTask

        prayer_config = self.config.section("prayer")
        self.task_manager.schedule_task("prayer_times_initial", self.prayer_monitor.refresh, 0)
        self.task_manager.schedule_recurring(PrayerTimesRefreshTask(self.prayer_monitor, prayer_config))
        self.task_manager.schedule_recurring(CountdownTask(self.prayer_monitor, prayer_config), run_now=True)
        self.task_manager.schedule_recurring(SehriAlertTask(self.prayer_monitor, prayer_config), run_now=True)

    def handle_config_change(self, new_config: Dict[str, Any]) -> None:
        """Apply reloaded config to the running monitor"""
        self.logger.info("Handling config change")
        try:
            prayer_config = self.config.section("prayer")
            lead = int(prayer_config.get("sehri_alert_minutes", 15))
            if lead != self.prayer_monitor.reminder.lead_minutes:
                self.prayer_monitor.reminder.lead_minutes = lead

            location = self.config.section("location")
            if location != self.prayer_monitor.location:
                self.prayer_monitor.update_location(location)
                self.task_manager.schedule_task("prayer_times_location_change", self.prayer_monitor.refresh, 0)
        except Exception as e:
            self.logger.error(f"Error handling config change: {e}", exc_info=True)

    def shutdown(self) -> None:
        self.task_manager.stop()
        self.config.cleanup()
        dispose_db()

    def run(self) -> None:
        from companion.api import run_api_server

        self._setup_logging()
        try:
            self.start_tasks()
            run_api_server(self)
        finally:
            self.shutdown()
