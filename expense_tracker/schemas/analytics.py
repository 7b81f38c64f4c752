from expense_tracker.models.enums import TransactionCategory
from expense_tracker.schemas.base import BaseSchema


class ExpenseSeriesSchema(BaseSchema):
    """Bucketed expense totals ready for a bar chart."""

    labels: list[str]
    data: list[float]
    total: float
    is_empty: bool


class MonthlyAnalyticsSchema(ExpenseSeriesSchema):
    year: int


class DailyAnalyticsSchema(ExpenseSeriesSchema):
    year: int
    month: int


class CategoryAnalyticsSchema(BaseSchema):
    totals: dict[TransactionCategory, float]
    is_empty: bool


class CategorySpendingSchema(BaseSchema):
    category: TransactionCategory
    amount: float


class TransactionStatsSchema(BaseSchema):
    total_transactions: int
    total_expenses: float
    total_income: float
    net_amount: float
    expense_count: int
    income_count: int
    avg_expense: float
    avg_income: float
    is_profit: bool
