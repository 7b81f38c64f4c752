from typing import Annotated

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from fastapi.params import Query

from expense_tracker.deps.auth import CurrentUser, CurrentUserDependency
from expense_tracker.schemas.analytics import (
    CategoryAnalyticsSchema,
    CategorySpendingSchema,
    DailyAnalyticsSchema,
    MonthlyAnalyticsSchema,
    TransactionStatsSchema,
)
from expense_tracker.services.analytics import TransactionAnalyticsInteractor

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
    route_class=DishkaRoute,
    dependencies=[CurrentUserDependency],
)

Year = Annotated[int | None, Query(ge=1970, le=9999)]


@router.get("/monthly")
async def monthly_expenses(
    current_user: CurrentUser,
    analytics: FromDishka[TransactionAnalyticsInteractor],
    year: Year = None,
) -> MonthlyAnalyticsSchema:
    return await analytics.monthly(current_user.id, year)


@router.get("/daily")
async def daily_expenses(
    current_user: CurrentUser,
    analytics: FromDishka[TransactionAnalyticsInteractor],
    year: Year = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
) -> DailyAnalyticsSchema:
    return await analytics.daily(current_user.id, year, month)


@router.get("/categories")
async def category_expenses(
    current_user: CurrentUser,
    analytics: FromDishka[TransactionAnalyticsInteractor],
) -> CategoryAnalyticsSchema:
    return await analytics.categories(current_user.id)


@router.get("/top-categories")
async def top_categories(
    current_user: CurrentUser,
    analytics: FromDishka[TransactionAnalyticsInteractor],
    limit: Annotated[int, Query(ge=1, le=8)] = 5,
) -> list[CategorySpendingSchema]:
    return await analytics.top_categories(current_user.id, limit)


@router.get("/stats")
async def transaction_stats(
    current_user: CurrentUser,
    analytics: FromDishka[TransactionAnalyticsInteractor],
    current_month: bool = False,
) -> TransactionStatsSchema:
    return await analytics.stats(current_user.id, current_month)
