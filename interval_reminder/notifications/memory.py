import logging
from typing import Iterable, List, Optional

from interval_reminder.notifications.base import (
    NotificationService,
    NotificationTemplate,
    PendingNotification,
    PermissionKind,
)
from interval_reminder.scheduler import ScheduledNotification

logger = logging.getLogger("interval_reminder.notifications.memory")


class InMemoryNotificationService(NotificationService):
    """Records pending notifications without delivering them."""

    def __init__(self, permitted: bool = True):
        self.permitted = permitted
        self.permission_granted: Optional[bool] = None
        self.requested_kinds: List[PermissionKind] = []
        self._pending: List[PendingNotification] = []

    async def request_permission(self, kinds: Iterable[PermissionKind]) -> bool:
        self.requested_kinds = list(kinds)
        self.permission_granted = self.permitted
        return self.permitted

    def cancel_all(self) -> None:
        if self._pending:
            logger.debug("Cleared %d pending notification(s)", len(self._pending))
        self._pending.clear()

    def schedule(
        self,
        batch: List[ScheduledNotification],
        template: NotificationTemplate,
        interval_hours: float,
    ) -> None:
        for entry in batch:
            self._pending.append(PendingNotification.build(entry, template, interval_hours))

    def pending(self) -> List[PendingNotification]:
        return list(self._pending)
