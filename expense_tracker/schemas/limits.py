from datetime import datetime
from typing import Annotated
from uuid import UUID

from annotated_types import Gt, Le
from pydantic import Field

from expense_tracker.models.enums import LimitAction, LimitStatus, NotificationType
from expense_tracker.schemas.base import BaseSchema


class MonthlyLimitSetSchema(BaseSchema):
    # validated by the tracker so that a non-positive amount maps to InvalidLimitError
    amount: float


class MonthlyLimitSchema(BaseSchema):
    amount: float
    currency: str
    set_at: datetime


class LimitHistoryEntrySchema(BaseSchema):
    id: UUID
    action: LimitAction
    amount: float
    currency: str
    timestamp: datetime


class LimitStatusSchema(BaseSchema):
    has_limit: bool
    status: LimitStatus
    current_expenses: float
    limit_amount: float | None = None
    percentage: float = 0.0
    remaining_amount: float = 0.0
    exceeded_amount: float = 0.0


class LimitNotificationSettingsSchema(BaseSchema):
    warning_threshold: Annotated[float, Gt(gt=0), Le(le=100)] = 80.0
    enable_warning_notifications: bool = True
    enable_exceeded_notifications: bool = True
    enable_daily_updates: bool = False


class LimitNotificationSettingsUpdateSchema(BaseSchema):
    warning_threshold: Annotated[float, Gt(gt=0), Le(le=100)] | None = None
    enable_warning_notifications: bool | None = None
    enable_exceeded_notifications: bool | None = None
    enable_daily_updates: bool | None = None


class LimitAlertSchema(BaseSchema):
    type: NotificationType
    title: str
    message: str


class LimitProgressSchema(BaseSchema):
    current: float
    limit: float
    percentage: float
    remaining: float
    exceeded: float
    status: LimitStatus
    color: str
    status_text: str


class SpendingInsightsSchema(BaseSchema):
    daily_spending_rate: float
    predicted_month_total: float
    is_on_track: bool
    days_remaining: int
    recommended_daily_spending: float | None = Field(default=None)


class RemoveLimitResponseSchema(BaseSchema):
    success: bool = True
    message: str = "Expense limit removed successfully"
