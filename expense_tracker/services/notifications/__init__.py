import logging
from datetime import timedelta
from typing import Iterable
from uuid import UUID

from apscheduler.schedulers.base import BaseScheduler
from dishka import Provider, Scope, provide

from expense_tracker.models.enums import NotificationPriority, NotificationType
from expense_tracker.schemas.limits import MonthlyLimitSchema
from expense_tracker.schemas.transactions import TransactionSchema
from expense_tracker.services.formatting import format_currency
from expense_tracker.services.limits import ExpenseLimitTracker
from expense_tracker.services.providers.notification_dispatcher import (
    NotificationOptions,
)
from expense_tracker.services.providers.notification_manager import NotificationHub
from expense_tracker.services.providers.protocols.clock import IClock
from expense_tracker.services.providers.protocols.notification_manager import (
    INotificationManager,
)
from expense_tracker.settings.app import AppSettings
from expense_tracker.settings.notifications import NotificationSettings

logger = logging.getLogger(__name__)

TRANSACTION_NOTIFICATION_MS = 2000
LIMIT_UPDATE_NOTIFICATION_MS = 3000

LIMIT_ALERT_OPTIONS = NotificationOptions(
    auto_close=False,
    priority=NotificationPriority.HIGH,
    is_limit_notification=True,
)


class LimitAlertNotifier:
    """Turns transaction and limit events into notifications for a user session."""

    def __init__(
        self,
        notifications: INotificationManager,
        tracker: ExpenseLimitTracker,
        settings: AppSettings,
    ):
        self.notifications = notifications
        self.tracker = tracker
        self.currency = settings.currency

    async def check_limits(self, user_id: UUID, touch: bool = True) -> bool:
        """Replace the user's limit alerts with the current ones.

        Returns whether any alert is active afterwards. Running it twice with
        unchanged data leaves exactly the same alerts in place. Background
        callers pass ``touch=False`` so an idle session can still expire.
        """
        alerts = await self.tracker.check_breach_notifications(user_id)
        dispatcher = self.notifications.for_user(user_id, touch=touch)
        dispatcher.clear_limit_notifications()
        for alert in alerts:
            dispatcher.notify(alert.type, alert.title, alert.message, LIMIT_ALERT_OPTIONS)
        if alerts:
            logger.info("Limit alert raised (user_id=%s, alerts=%d)", user_id, len(alerts))
        return bool(alerts)

    async def recheck(self, user_id: UUID, touch: bool = True) -> bool:
        try:
            return await self.check_limits(user_id, touch)
        except Exception:
            logger.exception("Limit recheck failed (user_id=%s)", user_id)
            return False

    async def transaction_added(self, user_id: UUID, transaction: TransactionSchema) -> None:
        amount = format_currency(abs(transaction.amount), self.currency)
        if transaction.is_expense:
            kind, title = NotificationType.INFO, "Expense Added"
        else:
            kind, title = NotificationType.SUCCESS, "Income Added"
        self.notifications.for_user(user_id).notify(
            kind,
            title,
            f"{transaction.text}: {amount}",
            NotificationOptions(duration_ms=TRANSACTION_NOTIFICATION_MS),
        )
        if transaction.is_expense:
            await self.recheck(user_id)

    async def transaction_deleted(self, user_id: UUID, transaction: TransactionSchema) -> None:
        amount = format_currency(abs(transaction.amount), self.currency)
        self.notifications.for_user(user_id).notify(
            NotificationType.INFO,
            "Transaction Deleted",
            f"{transaction.text}: {amount} removed",
            NotificationOptions(duration_ms=TRANSACTION_NOTIFICATION_MS),
        )
        await self.recheck(user_id)

    async def limit_set(self, user_id: UUID, limit: MonthlyLimitSchema) -> None:
        self.notifications.for_user(user_id).notify(
            NotificationType.SUCCESS,
            "Limit Updated",
            f"Monthly expense limit set to {format_currency(limit.amount, limit.currency, 0)}",
            NotificationOptions(duration_ms=LIMIT_UPDATE_NOTIFICATION_MS),
        )
        await self.recheck(user_id)

    async def limit_removed(self, user_id: UUID) -> None:
        dispatcher = self.notifications.for_user(user_id)
        dispatcher.clear_limit_notifications()
        dispatcher.notify(
            NotificationType.INFO,
            "Limit Removed",
            "Monthly expense limit has been removed",
            NotificationOptions(duration_ms=LIMIT_UPDATE_NOTIFICATION_MS),
        )


class BackgroundLimitChecker:
    """Periodic limit recheck for every open notification session."""

    def __init__(
        self,
        notifications: INotificationManager,
        notifier: LimitAlertNotifier,
        settings: NotificationSettings,
    ):
        self.notifications = notifications
        self.notifier = notifier
        self.idle_for = timedelta(minutes=settings.session_idle_minutes)

    async def __call__(self) -> None:
        self.notifications.evict_idle(self.idle_for)
        users = self.notifications.active_users()
        if not users:
            return
        alerted = 0
        for user_id in users:
            if await self.notifier.recheck(user_id, touch=False):
                alerted += 1
        logger.info("Periodic limit recheck done (sessions=%d, alerted=%d)", len(users), alerted)


class NotificationServicesProvider(Provider):
    scope = Scope.REQUEST

    notifier = provide(LimitAlertNotifier)
    background_checker = provide(BackgroundLimitChecker)

    @provide(scope=Scope.APP)
    def get_notification_manager(
        self, clock: IClock, scheduler: BaseScheduler
    ) -> Iterable[INotificationManager]:
        hub = NotificationHub(clock, scheduler)
        yield hub
        hub.close_all()
