from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter

from expense_tracker.deps.auth import CurrentUser, CurrentUserDependency
from expense_tracker.schemas.limits import (
    LimitHistoryEntrySchema,
    LimitNotificationSettingsSchema,
    LimitNotificationSettingsUpdateSchema,
    LimitProgressSchema,
    LimitStatusSchema,
    MonthlyLimitSchema,
    MonthlyLimitSetSchema,
    RemoveLimitResponseSchema,
    SpendingInsightsSchema,
)
from expense_tracker.services.limits import ExpenseLimitTracker
from expense_tracker.services.notifications import LimitAlertNotifier

router = APIRouter(
    prefix="/limits",
    tags=["limits"],
    route_class=DishkaRoute,
    dependencies=[CurrentUserDependency],
)


@router.get("")
async def get_limit(
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
) -> MonthlyLimitSchema | None:
    return await tracker.get_limit(current_user.id)


@router.put("")
async def set_limit(
    data: MonthlyLimitSetSchema,
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
    notifier: FromDishka[LimitAlertNotifier],
) -> MonthlyLimitSchema:
    limit = await tracker.set_limit(current_user.id, data.amount)
    await notifier.limit_set(current_user.id, limit)
    return limit


@router.delete("")
async def remove_limit(
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
    notifier: FromDishka[LimitAlertNotifier],
) -> RemoveLimitResponseSchema:
    await tracker.remove_limit(current_user.id)
    await notifier.limit_removed(current_user.id)
    return RemoveLimitResponseSchema()


@router.get("/status")
async def limit_status(
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
) -> LimitStatusSchema:
    return await tracker.get_status(current_user.id)


@router.get("/progress")
async def limit_progress(
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
) -> LimitProgressSchema | None:
    return await tracker.progress(current_user.id)


@router.get("/insights")
async def spending_insights(
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
) -> SpendingInsightsSchema:
    return await tracker.insights(current_user.id)


@router.get("/history")
async def limit_history(
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
) -> list[LimitHistoryEntrySchema]:
    return await tracker.history(current_user.id)


@router.get("/settings")
async def get_notification_settings(
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
) -> LimitNotificationSettingsSchema:
    return await tracker.get_notification_settings(current_user.id)


@router.patch("/settings")
async def update_notification_settings(
    data: LimitNotificationSettingsUpdateSchema,
    current_user: CurrentUser,
    tracker: FromDishka[ExpenseLimitTracker],
    notifier: FromDishka[LimitAlertNotifier],
) -> LimitNotificationSettingsSchema:
    settings = await tracker.update_notification_settings(current_user.id, data)
    await notifier.recheck(current_user.id)
    return settings
