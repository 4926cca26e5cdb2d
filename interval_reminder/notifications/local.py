"""
Local notification service: one APScheduler job per fire time, delivered
on the application's event loop.
"""
import logging
from typing import Dict, Iterable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from interval_reminder.config import Settings
from interval_reminder.notifications.base import (
    NotificationService,
    NotificationTemplate,
    PendingNotification,
    PermissionKind,
)
from interval_reminder.scheduler import ScheduledNotification
from interval_reminder.utils.push import send_push_notification

logger = logging.getLogger("interval_reminder.notifications.local")

JOB_PREFIX = "notification_"


class LocalNotificationService(NotificationService):
    def __init__(self, scheduler: AsyncIOScheduler, settings: Settings):
        self.scheduler = scheduler
        self.settings = settings
        self.permission_granted: Optional[bool] = None
        self.categories: List[str] = []
        self._pending: Dict[str, PendingNotification] = {}

    def set_categories(self, categories: Iterable[str]) -> None:
        self.categories = list(categories)

    async def request_permission(self, kinds: Iterable[PermissionKind]) -> bool:
        kinds = list(kinds)
        self.permission_granted = bool(self.settings.notifications_permitted)
        logger.debug(
            "Permission for %s: %s",
            ", ".join(k.value for k in kinds),
            "granted" if self.permission_granted else "denied",
        )
        return self.permission_granted

    def cancel_all(self) -> None:
        removed = 0
        for job in self.scheduler.get_jobs():
            if job.id.startswith(JOB_PREFIX):
                job.remove()
                removed += 1
        self._pending.clear()
        if removed:
            logger.info("Removed %d pending notification(s)", removed)

    def schedule(
        self,
        batch: List[ScheduledNotification],
        template: NotificationTemplate,
        interval_hours: float,
    ) -> None:
        for entry in batch:
            notification = PendingNotification.build(entry, template, interval_hours)
            self.scheduler.add_job(
                self.deliver,
                trigger=DateTrigger(run_date=entry.fire_time),
                args=[notification],
                id=notification.identifier,
                name=f"Deliver {notification.identifier}",
                replace_existing=True,
                misfire_grace_time=None,  # late is better than never
                coalesce=True,
            )
            self._pending[notification.identifier] = notification
        logger.info("Scheduled %d notification(s) every %s hour(s)", len(batch), interval_hours)

    def pending(self) -> List[PendingNotification]:
        return sorted(self._pending.values(), key=lambda n: n.fire_time)

    async def deliver(self, notification: PendingNotification) -> bool:
        """Deliver one due notification. Returns whether it was shown."""
        self._pending.pop(notification.identifier, None)

        if self.permission_granted is False:
            logger.warning("Notification %s suppressed: permission denied", notification.identifier)
            return False

        logger.info(
            "%s | %s | %s",
            notification.title,
            notification.subtitle,
            notification.body,
        )

        if self.settings.push_url:
            try:
                await send_push_notification(
                    self.settings.push_url,
                    notification.model_dump(),
                    token=self.settings.push_token,
                )
            except Exception as e:
                logger.error("Failed to push notification %s: %s", notification.identifier, e)
        return True
