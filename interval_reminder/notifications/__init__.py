"""
Notification delivery collaborators.
"""
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from interval_reminder.config import Settings
from .base import NotificationService, NotificationTemplate, PendingNotification, PermissionKind
from .local import LocalNotificationService
from .memory import InMemoryNotificationService


def get_notification_service(
    settings: Settings, scheduler: Optional[AsyncIOScheduler] = None
) -> NotificationService:
    backend = settings.notification_backend.strip().lower()
    if backend == "memory":
        return InMemoryNotificationService(permitted=settings.notifications_permitted)
    if backend == "local":
        if scheduler is None:
            raise ValueError("The local notification backend needs a scheduler")
        return LocalNotificationService(scheduler, settings)
    raise ValueError(f"Unknown notification backend: {settings.notification_backend!r}")


__all__ = [
    "NotificationService",
    "NotificationTemplate",
    "PendingNotification",
    "PermissionKind",
    "LocalNotificationService",
    "InMemoryNotificationService",
    "get_notification_service",
]
