"""
Reminder controller: state of the single reminder screen and the wiring
between user actions, the interval scheduler and the notification service.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from interval_reminder.config import Settings, get_settings
from interval_reminder.notifications.base import (
    NotificationService,
    NotificationTemplate,
    PermissionKind,
)
from interval_reminder.scheduler import (
    IDLE_DISPLAY,
    IntervalScheduler,
    InvalidIntervalError,
    ScheduledNotification,
    ScheduleState,
)

logger = logging.getLogger("interval_reminder.reminder_service")

LABEL_PREFIX = "Time until next notification: "
INVALID_INPUT_TITLE = "Invalid Input"
INVALID_INPUT_MESSAGE = "Please enter a positive number of hours."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _default_text(hours: float) -> str:
    return f"{hours:g}"


class ReminderController:
    def __init__(
        self,
        notifier: NotificationService,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings or get_settings()
        self.notifier = notifier
        self.clock = clock
        self.core = IntervalScheduler(batch_size=self.settings.notification_batch_size)
        self.template = NotificationTemplate.from_settings(self.settings)

        self.interval_hours: float = self.settings.default_interval_hours
        self.interval_text: str = str(self.settings.default_interval_hours)
        self.state: ScheduleState = ScheduleState.idle()
        self.countdown: str = IDLE_DISPLAY
        self.last_batch: List[ScheduledNotification] = []
        self._permission_task: Optional[asyncio.Future] = None

    @property
    def label(self) -> str:
        return f"{LABEL_PREFIX}{self.countdown}"

    # -----------------------------------------------------------------------
    # User actions
    # -----------------------------------------------------------------------
    def start(self, text: Optional[str]) -> ScheduleState:
        """Validate the interval and (re)start the schedule.

        Invalid input resets the interval to the default and re-raises
        InvalidIntervalError; the running schedule is left alone.
        """
        now = self.clock()
        try:
            hours = self.core.validate(text, now)
        except InvalidIntervalError:
            self.interval_hours = self.settings.default_interval_hours
            self.interval_text = _default_text(self.settings.default_interval_hours)
            logger.warning("Rejected interval %r; reset to %s hour(s)", text, self.interval_text)
            raise

        # Build the new schedule before touching the pending one
        state, batch = self.core.start(hours, now)

        self.interval_hours = hours
        self.interval_text = str(text).strip()

        self.notifier.cancel_all()
        self.state, self.last_batch = state, batch
        self.notifier.schedule(self.last_batch, self.template, hours)
        self.refresh()
        logger.info(
            "Started %s-hour reminders; next at %s",
            hours,
            self.state.next_fire_time.isoformat() if self.state.next_fire_time else None,
        )
        return self.state

    def cancel(self) -> ScheduleState:
        self.notifier.cancel_all()
        self.state = self.core.cancel()
        self.last_batch = []
        self.refresh()
        logger.info("All notifications canceled")
        return self.state

    # -----------------------------------------------------------------------
    # Countdown
    # -----------------------------------------------------------------------
    def refresh(self) -> str:
        self.state, self.countdown = self.core.tick(self.state, self.clock())
        return self.label

    # -----------------------------------------------------------------------
    # Permission (fire-and-forget)
    # -----------------------------------------------------------------------
    def request_permission(self) -> asyncio.Future:
        """Ask the notifier for permission without waiting on the answer.

        Must be called from a running event loop. The result is only logged.
        """
        kinds = [PermissionKind.alert, PermissionKind.sound]
        task = asyncio.ensure_future(self.notifier.request_permission(kinds))
        task.add_done_callback(_log_permission_result)
        self._permission_task = task
        return task

    def snapshot(self) -> dict:
        return {
            "status": self.state.status,
            "interval_hours": self.interval_hours,
            "interval_text": self.interval_text,
            "next_fire_time": self.state.next_fire_time,
            "countdown": self.countdown,
            "label": self.label,
            "pending_notifications": len(self.notifier.pending()),
        }


def _log_permission_result(task: asyncio.Future) -> None:
    if task.cancelled():
        logger.warning("Notification permission request was cancelled")
        return
    error = task.exception()
    if error is not None:
        logger.error("Error requesting notification permission: %s", error)
        return
    if task.result():
        logger.info("Notification permission granted")
    else:
        logger.warning("Notification permission denied; reminders are still scheduled")
