from datetime import timedelta
from typing import Protocol
from uuid import UUID

from expense_tracker.services.providers.notification_dispatcher import NotificationDispatcher


class INotificationManager(Protocol):
    def for_user(self, user_id: UUID, touch: bool = True) -> NotificationDispatcher: ...

    def active_users(self) -> list[UUID]: ...

    def release(self, user_id: UUID) -> bool: ...

    def evict_idle(self, idle_for: timedelta) -> int: ...

    def close(self, user_id: UUID) -> None: ...
