from apscheduler.schedulers.base import BaseScheduler
from dishka import FromDishka
from fastapi import APIRouter
from dishka.integrations.fastapi import DishkaRoute

from expense_tracker.routes.analytics import router as analytics_router
from expense_tracker.routes.auth import router as auth_router
from expense_tracker.routes.limits import router as limits_router
from expense_tracker.routes.notifications import router as notifications_router
from expense_tracker.routes.notifications import ws_router as notifications_ws_router
from expense_tracker.routes.transactions import router as transactions_router
from expense_tracker.schemas.health import HealthSchema, JobSchema
from expense_tracker.services.providers.protocols.notification_manager import (
    INotificationManager,
)


router = APIRouter(route_class=DishkaRoute)
router.include_router(auth_router)
router.include_router(transactions_router)
router.include_router(analytics_router)
router.include_router(limits_router)
router.include_router(notifications_router)
router.include_router(notifications_ws_router)


@router.get("/health")
async def health(
    scheduler: FromDishka[BaseScheduler],
    notifications: FromDishka[INotificationManager],
) -> HealthSchema:
    jobs = [
        JobSchema(id=job.id, next_run_time=job.next_run_time, name=job.name)
        for job in scheduler.get_jobs()
        if not job.id.startswith("notification-expiry-")
    ]
    return HealthSchema(
        status="ok" if scheduler.running else "error",
        jobs=jobs,
        active_sessions=len(notifications.active_users()),
    )
