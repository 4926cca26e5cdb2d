"""
Notification service contract consumed by the reminder controller.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List

from pydantic import BaseModel, Field

from interval_reminder.config import Settings
from interval_reminder.scheduler import ScheduledNotification


class PermissionKind(str, Enum):
    alert = "alert"
    sound = "sound"


class NotificationTemplate(BaseModel):
    title: str = Field(..., description="Notification title")
    subtitle: str = Field("", description="Notification subtitle")
    body_template: str = Field(..., description="Body text, formatted with {interval}")
    sound: str = Field("default", description="Sound name played on delivery")
    category: str = Field("customNotification", description="Notification category identifier")

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationTemplate":
        return cls(
            title=settings.notification_title,
            subtitle=settings.notification_subtitle,
            body_template=settings.notification_body_template,
            sound=settings.notification_sound,
            category=settings.notification_category,
        )

    def render_body(self, interval_hours: float) -> str:
        return self.body_template.format(interval=interval_hours)


class PendingNotification(BaseModel):
    """A batch entry bound to its rendered content."""

    identifier: str
    fire_time: str
    title: str
    subtitle: str
    body: str
    sound: str
    category: str

    @classmethod
    def build(
        cls, entry: ScheduledNotification, template: NotificationTemplate, interval_hours: float
    ) -> "PendingNotification":
        return cls(
            identifier=entry.identifier,
            fire_time=entry.fire_time.isoformat(),
            title=template.title,
            subtitle=template.subtitle,
            body=template.render_body(interval_hours),
            sound=template.sound,
            category=template.category,
        )


class NotificationService(ABC):
    """
    Delivery collaborator.

    Owns OS-level permission state and actual delivery; the caller only
    supplies fire times and content.
    """

    @abstractmethod
    async def request_permission(self, kinds: Iterable[PermissionKind]) -> bool:
        """Ask for permission to deliver; resolves to whether it was granted."""
        ...

    @abstractmethod
    def cancel_all(self) -> None:
        """Remove every pending notification owned by this service."""
        ...

    @abstractmethod
    def schedule(
        self,
        batch: List[ScheduledNotification],
        template: NotificationTemplate,
        interval_hours: float,
    ) -> None:
        ...

    @abstractmethod
    def pending(self) -> List[PendingNotification]:
        ...
