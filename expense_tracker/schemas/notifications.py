from datetime import datetime
from uuid import UUID

from expense_tracker.models.enums import NotificationPriority, NotificationType
from expense_tracker.schemas.base import BaseSchema


class NotificationSchema(BaseSchema):
    id: UUID
    type: NotificationType
    title: str
    message: str
    created_at: datetime
    auto_close: bool
    duration_ms: int
    priority: NotificationPriority = NotificationPriority.NORMAL
    is_limit_notification: bool = False


class NotificationListSchema(BaseSchema):
    total: int
    items: list[NotificationSchema]


class VisibilitySchema(BaseSchema):
    visible: bool = True


class RecheckResultSchema(BaseSchema):
    alerted: bool
