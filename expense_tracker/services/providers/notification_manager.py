import logging
from datetime import datetime, timedelta
from uuid import UUID

from apscheduler.schedulers.base import BaseScheduler

from expense_tracker.services.providers.notification_dispatcher import NotificationDispatcher
from expense_tracker.services.providers.protocols.clock import IClock
from expense_tracker.services.providers.protocols.notification_manager import INotificationManager

logger = logging.getLogger(__name__)


class NotificationHub(INotificationManager):
    """Owns one dispatcher per user session for the lifetime of the application.

    A session opens on first access. It is closed when its last socket goes away
    and nothing sticky is left to show, or when nobody touched it for a while.
    """

    def __init__(self, clock: IClock, scheduler: BaseScheduler):
        self.clock = clock
        self.scheduler = scheduler
        self._dispatchers: dict[UUID, NotificationDispatcher] = {}
        self._last_seen: dict[UUID, datetime] = {}

    def for_user(self, user_id: UUID, touch: bool = True) -> NotificationDispatcher:
        dispatcher = self._dispatchers.get(user_id)
        if dispatcher is None:
            dispatcher = NotificationDispatcher(self.clock, self.scheduler)
            self._dispatchers[user_id] = dispatcher
            logger.debug("Notification session opened (user_id=%s)", user_id)
        if touch or user_id not in self._last_seen:
            self._last_seen[user_id] = self.clock.now()
        return dispatcher

    def active_users(self) -> list[UUID]:
        return list(self._dispatchers)

    def release(self, user_id: UUID) -> bool:
        dispatcher = self._dispatchers.get(user_id)
        if dispatcher is None:
            return False
        if dispatcher.has_listeners or dispatcher.has_sticky_notifications():
            return False
        self.close(user_id)
        return True

    def evict_idle(self, idle_for: timedelta) -> int:
        deadline = self.clock.now() - idle_for
        idle = [
            user_id
            for user_id, dispatcher in self._dispatchers.items()
            if not dispatcher.has_listeners and self._last_seen[user_id] <= deadline
        ]
        for user_id in idle:
            self.close(user_id)
        if idle:
            logger.info("Evicted %d idle notification sessions", len(idle))
        return len(idle)

    def close(self, user_id: UUID) -> None:
        dispatcher = self._dispatchers.pop(user_id, None)
        self._last_seen.pop(user_id, None)
        if dispatcher is not None:
            dispatcher.destroy()
            logger.debug("Notification session closed (user_id=%s)", user_id)

    def close_all(self) -> None:
        for user_id in self.active_users():
            self.close(user_id)
