import contextlib
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import TypeAlias
from uuid import UUID

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from expense_tracker.models.enums import NotificationPriority, NotificationType
from expense_tracker.schemas.notifications import NotificationSchema
from expense_tracker.services.providers.protocols.clock import IClock

logger = logging.getLogger(__name__)

NotificationListener: TypeAlias = Callable[[list[NotificationSchema]], None]

# milliseconds; 0 means the notification stays until dismissed
DEFAULT_DURATIONS: dict[NotificationType, int] = {
    NotificationType.SUCCESS: 3000,
    NotificationType.INFO: 5000,
    NotificationType.WARNING: 0,
    NotificationType.ERROR: 0,
}


@dataclass(frozen=True)
class NotificationOptions:
    auto_close: bool = True
    duration_ms: int | None = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    is_limit_notification: bool = False


class NotificationDispatcher:
    """Publish/subscribe registry of the notifications of one user session.

    Every change is pushed to the listeners as the full current list. Auto-close
    is driven by one-shot jobs on ``scheduler``; without a scheduler the
    notifications stay until dismissed.
    """

    def __init__(self, clock: IClock, scheduler: BaseScheduler | None = None):
        self.clock = clock
        self.scheduler = scheduler
        self._notifications: list[NotificationSchema] = []
        self._listeners: list[NotificationListener] = []

    @property
    def notifications(self) -> list[NotificationSchema]:
        return list(self._notifications)

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, notification: NotificationSchema) -> NotificationSchema:
        self._notifications.append(notification)
        self._schedule_expiry(notification)
        self._notify_listeners()
        return notification

    def notify(
        self,
        type: NotificationType,
        title: str,
        message: str,
        options: NotificationOptions | None = None,
    ) -> NotificationSchema:
        options = options or NotificationOptions()
        duration_ms = options.duration_ms
        if duration_ms is None:
            duration_ms = DEFAULT_DURATIONS[type]
        notification = NotificationSchema(
            id=uuid.uuid4(),
            type=type,
            title=title,
            message=message,
            created_at=self.clock.now(),
            auto_close=options.auto_close and duration_ms > 0,
            duration_ms=duration_ms,
            priority=options.priority,
            is_limit_notification=options.is_limit_notification,
        )
        return self.publish(notification)

    def dismiss(self, notification_id: UUID) -> bool:
        remaining = [n for n in self._notifications if n.id != notification_id]
        found = len(remaining) != len(self._notifications)
        self._notifications = remaining
        self._cancel_expiry(notification_id)
        self._notify_listeners()
        return found

    def clear(self) -> None:
        for notification in self._notifications:
            self._cancel_expiry(notification.id)
        self._notifications = []
        self._notify_listeners()

    def clear_limit_notifications(self) -> int:
        stale = [n for n in self._notifications if n.is_limit_notification]
        if not stale:
            return 0
        for notification in stale:
            self._cancel_expiry(notification.id)
        self._notifications = [
            n for n in self._notifications if not n.is_limit_notification
        ]
        self._notify_listeners()
        return len(stale)

    def by_type(self, type: NotificationType) -> list[NotificationSchema]:
        return [n for n in self._notifications if n.type == type]

    def high_priority(self) -> list[NotificationSchema]:
        return [
            n for n in self._notifications if n.priority == NotificationPriority.HIGH
        ]

    def has_active_limit_notifications(self) -> bool:
        return any(n.is_limit_notification for n in self._notifications)

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def has_sticky_notifications(self) -> bool:
        return any(not n.auto_close for n in self._notifications)

    def destroy(self) -> None:
        for notification in self._notifications:
            self._cancel_expiry(notification.id)
        self._notifications = []
        self._listeners = []

    async def expire(self, notification_id: UUID) -> None:
        logger.debug("Notification %s expired", notification_id)
        self.dismiss(notification_id)

    @staticmethod
    def _job_id(notification_id: UUID) -> str:
        return f"notification-expiry-{notification_id}"

    def _schedule_expiry(self, notification: NotificationSchema) -> None:
        if self.scheduler is None or not notification.auto_close:
            return
        self.scheduler.add_job(
            self.expire,
            trigger="date",
            run_date=notification.created_at
            + timedelta(milliseconds=notification.duration_ms),
            args=(notification.id,),
            id=self._job_id(notification.id),
            replace_existing=True,
        )

    def _cancel_expiry(self, notification_id: UUID) -> None:
        if self.scheduler is None:
            return
        with contextlib.suppress(JobLookupError):
            self.scheduler.remove_job(self._job_id(notification_id))

    def _notify_listeners(self) -> None:
        snapshot = self.notifications
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Notification listener failed")
