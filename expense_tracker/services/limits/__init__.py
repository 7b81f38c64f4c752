import logging
import math
import uuid
from uuid import UUID

from dishka import Provider, Scope, provide
from pydantic import TypeAdapter, ValidationError

from expense_tracker.models.enums import LimitAction, LimitStatus, NotificationType
from expense_tracker.schemas.limits import (
    LimitAlertSchema,
    LimitHistoryEntrySchema,
    LimitNotificationSettingsSchema,
    LimitNotificationSettingsUpdateSchema,
    LimitProgressSchema,
    LimitStatusSchema,
    MonthlyLimitSchema,
    SpendingInsightsSchema,
)
from expense_tracker.services.analytics import current_month_expense, spending_insights
from expense_tracker.services.errors import ComputationError, InvalidLimitError
from expense_tracker.services.formatting import format_currency, format_percentage
from expense_tracker.services.providers.protocols.clock import IClock
from expense_tracker.services.providers.protocols.settings_store import ISettingsStore
from expense_tracker.services.providers.protocols.transaction_store import (
    ITransactionStore,
)
from expense_tracker.services.providers.settings_store import SqlSettingsStore
from expense_tracker.settings.app import AppSettings
from expense_tracker.settings.limits import LimitSettings

logger = logging.getLogger(__name__)

MONTHLY_LIMIT_KEY = "monthly_expense_limit"
LIMIT_HISTORY_KEY = "expense_limit_history"
NOTIFICATION_SETTINGS_KEY = "limit_notification_settings"

STATUS_COLORS = {
    LimitStatus.SAFE: "green",
    LimitStatus.WARNING: "yellow",
    LimitStatus.EXCEEDED: "red",
    LimitStatus.NO_LIMIT: "gray",
}

_history_adapter = TypeAdapter(list[LimitHistoryEntrySchema])


def evaluate_limit_status(
    current_expenses: float,
    limit_amount: float | None,
    warning_threshold: float = 80.0,
) -> LimitStatusSchema:
    """Classify the month's spend against the configured limit."""
    if not limit_amount:
        return LimitStatusSchema(
            has_limit=False,
            status=LimitStatus.NO_LIMIT,
            current_expenses=current_expenses,
        )

    percentage = current_expenses * 100 / limit_amount
    if percentage >= 100:
        status = LimitStatus.EXCEEDED
    elif percentage >= warning_threshold:
        status = LimitStatus.WARNING
    else:
        status = LimitStatus.SAFE

    return LimitStatusSchema(
        has_limit=True,
        status=status,
        current_expenses=current_expenses,
        limit_amount=limit_amount,
        percentage=round(percentage, 2),
        remaining_amount=max(0.0, limit_amount - current_expenses),
        exceeded_amount=max(0.0, current_expenses - limit_amount),
    )


def status_text(status: LimitStatusSchema) -> str:
    percentage = format_percentage(status.percentage)
    match status.status:
        case LimitStatus.SAFE:
            return f"{percentage}% of limit used"
        case LimitStatus.WARNING:
            return f"Warning: {percentage}% of limit used"
        case LimitStatus.EXCEEDED:
            return f"Limit exceeded by {status.percentage - 100:.1f}%"
        case _:
            return "No limit set"


class ExpenseLimitTracker:
    """Monthly expense limit of a user and the status derived from it.

    Nothing here is cached: every status query refetches the transactions and
    re-reads the stored limit.
    """

    def __init__(
        self,
        store: ITransactionStore,
        settings_store: ISettingsStore,
        clock: IClock,
        app_settings: AppSettings,
        limit_settings: LimitSettings,
    ):
        self.store = store
        self.settings_store = settings_store
        self.clock = clock
        self.currency = app_settings.currency
        self.limit_settings = limit_settings

    async def get_limit(self, user_id: UUID) -> MonthlyLimitSchema | None:
        raw = await self.settings_store.get(user_id, MONTHLY_LIMIT_KEY)
        if raw is None:
            return None
        try:
            return MonthlyLimitSchema.model_validate(raw)
        except ValidationError as exc:
            raise ComputationError("Stored expense limit is corrupted") from exc

    async def set_limit(self, user_id: UUID, amount: float | None) -> MonthlyLimitSchema:
        if amount is None or not math.isfinite(amount) or amount <= 0:
            raise InvalidLimitError()

        limit = MonthlyLimitSchema(
            amount=float(amount), currency=self.currency, set_at=self.clock.now()
        )
        await self.settings_store.set(
            user_id, MONTHLY_LIMIT_KEY, limit.model_dump(mode="json")
        )
        await self._append_history(user_id, LimitAction.SET, limit.amount)
        logger.info("Monthly limit set to %s (user_id=%s)", limit.amount, user_id)
        return limit

    async def remove_limit(self, user_id: UUID) -> None:
        await self.settings_store.remove(user_id, MONTHLY_LIMIT_KEY)
        await self._append_history(user_id, LimitAction.REMOVED, 0.0)
        logger.info("Monthly limit removed (user_id=%s)", user_id)

    async def history(self, user_id: UUID) -> list[LimitHistoryEntrySchema]:
        raw = await self.settings_store.get(user_id, LIMIT_HISTORY_KEY)
        if not raw:
            return []
        try:
            return _history_adapter.validate_python(raw)
        except ValidationError:
            logger.warning("Discarding unreadable limit history (user_id=%s)", user_id)
            return []

    async def _append_history(
        self, user_id: UUID, action: LimitAction, amount: float
    ) -> None:
        history = await self.history(user_id)
        history.append(
            LimitHistoryEntrySchema(
                id=uuid.uuid4(),
                action=action,
                amount=amount,
                currency=self.currency,
                timestamp=self.clock.now(),
            )
        )
        history = history[-self.limit_settings.history_size :]
        await self.settings_store.set(
            user_id,
            LIMIT_HISTORY_KEY,
            _history_adapter.dump_python(history, mode="json"),
        )

    async def get_notification_settings(
        self, user_id: UUID
    ) -> LimitNotificationSettingsSchema:
        defaults = {"warning_threshold": self.limit_settings.warning_threshold}
        raw = await self.settings_store.get(user_id, NOTIFICATION_SETTINGS_KEY)
        try:
            return LimitNotificationSettingsSchema.model_validate(
                {**defaults, **(raw or {})}
            )
        except ValidationError:
            logger.warning("Ignoring invalid limit notification settings (user_id=%s)", user_id)
            return LimitNotificationSettingsSchema.model_validate(defaults)

    async def update_notification_settings(
        self, user_id: UUID, update: LimitNotificationSettingsUpdateSchema
    ) -> LimitNotificationSettingsSchema:
        current = await self.get_notification_settings(user_id)
        updated = current.model_copy(update=update.model_dump(exclude_none=True))
        await self.settings_store.set(
            user_id, NOTIFICATION_SETTINGS_KEY, updated.model_dump(mode="json")
        )
        return updated

    async def current_month_expenses(self, user_id: UUID) -> float:
        transactions = await self.store.list(user_id)
        return current_month_expense(transactions, self.clock.now())

    async def get_status(self, user_id: UUID) -> LimitStatusSchema:
        limit = await self.get_limit(user_id)
        current = await self.current_month_expenses(user_id)
        settings = await self.get_notification_settings(user_id)
        return evaluate_limit_status(
            current,
            limit.amount if limit else None,
            settings.warning_threshold,
        )

    async def check_breach_notifications(self, user_id: UUID) -> list[LimitAlertSchema]:
        status = await self.get_status(user_id)
        if not status.has_limit:
            return []

        settings = await self.get_notification_settings(user_id)
        alerts = []
        if status.status == LimitStatus.WARNING and settings.enable_warning_notifications:
            alerts.append(
                LimitAlertSchema(
                    type=NotificationType.WARNING,
                    title="Budget Alert",
                    message=(
                        f"You have spent {format_percentage(status.percentage)}% of your "
                        f"monthly limit ({format_currency(status.current_expenses, self.currency)}"
                        f" of {format_currency(status.limit_amount, self.currency)})"
                    ),
                )
            )
        if status.status == LimitStatus.EXCEEDED and settings.enable_exceeded_notifications:
            alerts.append(
                LimitAlertSchema(
                    type=NotificationType.ERROR,
                    title="Budget Exceeded",
                    message=(
                        "You have exceeded your monthly limit by "
                        f"{format_currency(status.exceeded_amount, self.currency)}"
                    ),
                )
            )
        return alerts

    async def progress(self, user_id: UUID) -> LimitProgressSchema | None:
        status = await self.get_status(user_id)
        if not status.has_limit:
            return None
        return LimitProgressSchema(
            current=status.current_expenses,
            limit=status.limit_amount,
            percentage=status.percentage,
            remaining=status.remaining_amount,
            exceeded=status.exceeded_amount,
            status=status.status,
            color=STATUS_COLORS[status.status],
            status_text=status_text(status),
        )

    async def insights(self, user_id: UUID) -> SpendingInsightsSchema:
        return spending_insights(await self.get_status(user_id), self.clock.now())


class LimitServicesProvider(Provider):
    scope = Scope.REQUEST

    settings_store = provide(SqlSettingsStore, provides=ISettingsStore)
    tracker = provide(ExpenseLimitTracker)
