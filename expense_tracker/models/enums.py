from enum import StrEnum


class TransactionCategory(StrEnum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    OTHER = "Other"


class TransactionType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


class LimitStatus(StrEnum):
    NO_LIMIT = "no_limit"
    SAFE = "safe"
    WARNING = "warning"
    EXCEEDED = "exceeded"


class LimitAction(StrEnum):
    SET = "set"
    REMOVED = "removed"


class NotificationType(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class NotificationPriority(StrEnum):
    NORMAL = "normal"
    HIGH = "high"
