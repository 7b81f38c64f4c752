import calendar
import logging
import math
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, tzinfo
from numbers import Real
from typing import Any, TypeAlias
from uuid import UUID

from dishka import Provider, Scope, provide

from expense_tracker.models.enums import TransactionCategory, TransactionType
from expense_tracker.schemas.analytics import (
    CategoryAnalyticsSchema,
    CategorySpendingSchema,
    DailyAnalyticsSchema,
    MonthlyAnalyticsSchema,
    TransactionStatsSchema,
)
from expense_tracker.schemas.limits import LimitStatusSchema, SpendingInsightsSchema
from expense_tracker.schemas.transactions import TransactionSchema
from expense_tracker.services.providers.category_classifier import categorize
from expense_tracker.services.providers.protocols.category_classifier import (
    ICategoryClassifier,
)
from expense_tracker.services.providers.protocols.clock import IClock
from expense_tracker.services.providers.protocols.transaction_store import (
    ITransactionStore,
)

logger = logging.getLogger(__name__)

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

Classify: TypeAlias = Callable[[str], TransactionCategory]


@dataclass(frozen=True)
class ExpenseSeries:
    labels: tuple[str, ...]
    values: tuple[float, ...]

    @property
    def total(self) -> float:
        return math.fsum(self.values)

    @property
    def is_empty(self) -> bool:
        return all(value == 0 for value in self.values)


@dataclass(frozen=True)
class CategoryBreakdown:
    totals: dict[TransactionCategory, float]

    @property
    def is_empty(self) -> bool:
        return not self.totals


def _amount(transaction: Any) -> float | None:
    amount = getattr(transaction, "amount", None)
    if isinstance(amount, bool) or not isinstance(amount, Real):
        return None
    if math.isnan(amount):
        return None
    return float(amount)


def _timestamp(transaction: Any, tz: tzinfo | None) -> datetime | None:
    created_at = getattr(transaction, "created_at", None)
    if not isinstance(created_at, datetime):
        return None
    if tz is not None and created_at.tzinfo is not None:
        return created_at.astimezone(tz)
    return created_at


def iter_expenses(
    transactions: Iterable[Any], tz: tzinfo | None = None
) -> Iterable[tuple[Any, datetime, float]]:
    """Yield ``(transaction, local created_at, absolute amount)`` for expenses.

    Records without a usable amount or timestamp are skipped.
    """
    for transaction in transactions:
        amount = _amount(transaction)
        created_at = _timestamp(transaction, tz)
        if amount is None or created_at is None:
            logger.debug("Skipping malformed transaction %r", getattr(transaction, "id", None))
            continue
        if amount < 0:
            yield transaction, created_at, abs(amount)


def _bucketed(buckets: dict[int, list[float]], size: int) -> tuple[float, ...]:
    # fsum keeps the totals independent of the input order
    return tuple(math.fsum(buckets.get(index, ())) for index in range(size))


def monthly_totals(
    transactions: Iterable[Any], year: int, tz: tzinfo | None = None
) -> ExpenseSeries:
    buckets: dict[int, list[float]] = defaultdict(list)
    for _, created_at, amount in iter_expenses(transactions, tz):
        if created_at.year == year:
            buckets[created_at.month - 1].append(amount)
    return ExpenseSeries(labels=MONTH_LABELS, values=_bucketed(buckets, 12))


def daily_totals(
    transactions: Iterable[Any], year: int, month: int, tz: tzinfo | None = None
) -> ExpenseSeries:
    days_in_month = calendar.monthrange(year, month)[1]
    buckets: dict[int, list[float]] = defaultdict(list)
    for _, created_at, amount in iter_expenses(transactions, tz):
        if created_at.year == year and created_at.month == month:
            buckets[created_at.day - 1].append(amount)
    return ExpenseSeries(
        labels=tuple(str(day) for day in range(1, days_in_month + 1)),
        values=_bucketed(buckets, days_in_month),
    )


def category_totals(
    transactions: Iterable[Any], classify: Classify = categorize
) -> CategoryBreakdown:
    amounts: dict[TransactionCategory, list[float]] = defaultdict(list)
    for transaction, _, amount in iter_expenses(transactions):
        text = getattr(transaction, "text", None)
        category = classify(text if isinstance(text, str) else "")
        amounts[category].append(amount)
    return CategoryBreakdown(
        totals={
            category: math.fsum(amounts[category])
            for category in TransactionCategory
            if category in amounts
        }
    )


def top_categories(
    transactions: Iterable[Any], limit: int = 5, classify: Classify = categorize
) -> list[tuple[TransactionCategory, float]]:
    totals = category_totals(transactions, classify).totals
    order = list(TransactionCategory)
    ranked = sorted(totals.items(), key=lambda item: (-item[1], order.index(item[0])))
    return ranked[:limit]


def current_month_transactions(
    transactions: Iterable[Any], now: datetime
) -> list[Any]:
    current = []
    for transaction in transactions:
        created_at = _timestamp(transaction, now.tzinfo)
        if created_at is not None and (created_at.year, created_at.month) == (now.year, now.month):
            current.append(transaction)
    return current


def current_month_expense(transactions: Iterable[Any], now: datetime) -> float:
    """Sum of expenses whose timestamp falls in ``now``'s month, in ``now``'s timezone."""
    return math.fsum(
        amount
        for _, created_at, amount in iter_expenses(transactions, now.tzinfo)
        if created_at.year == now.year and created_at.month == now.month
    )


def filter_by_type(
    transactions: Iterable[TransactionSchema], type: TransactionType | None
) -> list[TransactionSchema]:
    if type is None:
        return list(transactions)
    if type == TransactionType.EXPENSE:
        return [t for t in transactions if t.amount < 0]
    return [t for t in transactions if t.amount >= 0]


def search_transactions(
    transactions: Iterable[TransactionSchema],
    term: str | None,
    classify: Classify = categorize,
) -> list[TransactionSchema]:
    if not term:
        return list(transactions)
    term = term.lower()
    return [
        t
        for t in transactions
        if term in t.text.lower()
        or term in classify(t.text).lower()
        or term in str(t.amount)
    ]


def transaction_stats(transactions: Iterable[Any]) -> TransactionStatsSchema:
    expenses: list[float] = []
    income: list[float] = []
    for transaction in transactions:
        amount = _amount(transaction)
        if amount is None:
            continue
        if amount < 0:
            expenses.append(abs(amount))
        else:
            income.append(amount)

    total_expenses = math.fsum(expenses)
    total_income = math.fsum(income)
    net_amount = total_income - total_expenses
    return TransactionStatsSchema(
        total_transactions=len(expenses) + len(income),
        total_expenses=total_expenses,
        total_income=total_income,
        net_amount=net_amount,
        expense_count=len(expenses),
        income_count=len(income),
        avg_expense=total_expenses / len(expenses) if expenses else 0.0,
        avg_income=total_income / len(income) if income else 0.0,
        is_profit=net_amount >= 0,
    )


def spending_insights(
    limit_status: LimitStatusSchema, now: datetime
) -> SpendingInsightsSchema:
    """Project the month-end spend from the current daily rate."""
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    daily_rate = limit_status.current_expenses / now.day
    predicted_total = daily_rate * days_in_month
    days_remaining = days_in_month - now.day

    recommended = None
    if limit_status.has_limit:
        # on the last day the whole remainder is available for today
        recommended = limit_status.remaining_amount / max(days_remaining, 1)

    return SpendingInsightsSchema(
        daily_spending_rate=daily_rate,
        predicted_month_total=predicted_total,
        is_on_track=(
            predicted_total <= limit_status.limit_amount
            if limit_status.has_limit
            else True
        ),
        days_remaining=days_remaining,
        recommended_daily_spending=recommended,
    )


class TransactionAnalyticsInteractor:
    def __init__(
        self,
        store: ITransactionStore,
        classifier: ICategoryClassifier,
        clock: IClock,
    ):
        self.store = store
        self.classifier = classifier
        self.clock = clock

    async def monthly(self, user_id: UUID, year: int | None = None) -> MonthlyAnalyticsSchema:
        year = year or self.clock.now().year
        transactions = await self.store.list(user_id)
        series = monthly_totals(transactions, year, self.clock.tz)
        return MonthlyAnalyticsSchema(
            year=year,
            labels=list(series.labels),
            data=list(series.values),
            total=series.total,
            is_empty=series.is_empty,
        )

    async def daily(
        self, user_id: UUID, year: int | None = None, month: int | None = None
    ) -> DailyAnalyticsSchema:
        now = self.clock.now()
        year = year or now.year
        month = month or now.month
        transactions = await self.store.list(user_id)
        series = daily_totals(transactions, year, month, self.clock.tz)
        return DailyAnalyticsSchema(
            year=year,
            month=month,
            labels=list(series.labels),
            data=list(series.values),
            total=series.total,
            is_empty=series.is_empty,
        )

    async def categories(self, user_id: UUID) -> CategoryAnalyticsSchema:
        transactions = await self.store.list(user_id)
        breakdown = category_totals(transactions, self.classifier.predict)
        return CategoryAnalyticsSchema(
            totals=breakdown.totals, is_empty=breakdown.is_empty
        )

    async def top_categories(self, user_id: UUID, limit: int = 5) -> list[CategorySpendingSchema]:
        transactions = await self.store.list(user_id)
        return [
            CategorySpendingSchema(category=category, amount=amount)
            for category, amount in top_categories(
                transactions, limit, self.classifier.predict
            )
        ]

    async def stats(self, user_id: UUID, current_month: bool = False) -> TransactionStatsSchema:
        transactions = await self.store.list(user_id)
        if current_month:
            transactions = current_month_transactions(transactions, self.clock.now())
        return transaction_stats(transactions)


class AnalyticsServicesProvider(Provider):
    scope = Scope.REQUEST

    analytics = provide(TransactionAnalyticsInteractor)
