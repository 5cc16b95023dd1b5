from __future__ import annotations
import logging, threading, datetime as dt
from typing import Callable, List, Optional

from . import storage
from .guard import SWEEP_WINDOW
from .notifications import alarm
from .recurrence import next_reminder_time
from .settings import Settings, load_settings
from .tasks import materialize_next
from .utils import now as _now

logger = logging.getLogger(__name__)

SNOOZE_MINUTES = 10


class ReminderScheduler(threading.Thread):
    """
    Background thread that wakes at the top of every hour, raises a reminder
    for overdue tasks and stores the next occurrence of overdue repeating ones.
    A snooze moves the next wake-up to a few minutes from now.
    """

    def __init__(
        self,
        max_wait_seconds: float = 3600,
        clock: Callable[[], dt.datetime] = _now,
        settings_loader: Callable[[], Settings] = load_settings,
    ):
        super().__init__(daemon=True, name="reminder-scheduler")
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._snoozed_until: Optional[dt.datetime] = None
        self.max_wait_seconds = max_wait_seconds
        self.clock = clock
        self.settings_loader = settings_loader

    def stop(self):
        self._stop_event.set()
        self._wake_event.set()

    def snooze(self, minutes: float = SNOOZE_MINUTES) -> dt.datetime:
        """Run the next sweep minutes from now instead of at the top of the hour."""
        self._snoozed_until = self.clock() + dt.timedelta(minutes=minutes)
        logger.info("Reminder snoozed until %s", self._snoozed_until)
        self._wake_event.set()
        return self._snoozed_until

    def seconds_until_next_tick(self, current: Optional[dt.datetime] = None) -> float:
        current = current or self.clock()
        target = self._snoozed_until or next_reminder_time(current)
        delay = (target - current).total_seconds()
        return max(0.0, min(self.max_wait_seconds, delay))

    def _wait_for_next_tick(self) -> None:
        # a snooze wakes the wait early so the delay is recomputed
        while not self._stop_event.is_set():
            self._wake_event.clear()
            if not self._wake_event.wait(self.seconds_until_next_tick()):
                break
        self._snoozed_until = None

    def run(self):
        logger.info("Hourly reminders scheduled")
        while not self._stop_event.is_set():
            try:
                self.tick(self.clock())
            except Exception:
                # storage may be locked or gone; the next hour tries again
                logger.exception("Error in reminder sweep")
            self._wait_for_next_tick()
        logger.info("Reminders cancelled")

    def tick(self, now: dt.datetime) -> List[int]:
        settings = self.settings_loader()
        if not settings.reminders_enabled:
            logger.debug("Reminders disabled, skipping sweep")
            return []
        overdue = storage.overdue_tasks(now)
        if not overdue:
            return []
        logger.info("Found %d overdue tasks", len(overdue))
        alarm(overdue, settings.custom_alarm_sound)
        return self.sweep_repeating(now)

    def sweep_repeating(self, now: dt.datetime) -> List[int]:
        created = []
        for task in storage.repeating_tasks():
            if task.due_at >= now:
                continue
            try:
                new_id = materialize_next(task, SWEEP_WINDOW, now)
            except Exception:
                logger.exception("Error handling repeating task %s", task.id)
                continue
            if new_id is not None:
                created.append(new_id)
        return created
