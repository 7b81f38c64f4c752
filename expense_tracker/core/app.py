import contextlib
import logging
import operator
from typing import Any, Awaitable, Callable, TypeVar

from apscheduler.schedulers.base import BaseScheduler
from dishka import AsyncContainer, Scope
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from expense_tracker.core.db import create_tables
from expense_tracker.deps import create_container
from expense_tracker.routes import router as api_router
from expense_tracker.services.exception_handler import register_exception_handlers
from expense_tracker.services.notifications import BackgroundLimitChecker
from expense_tracker.settings.app import AppSettings
from expense_tracker.settings.notifications import NotificationSettings


logger = logging.getLogger(__name__)

LIMIT_RECHECK_JOB_ID = "periodic-limit-recheck"

T = TypeVar("T")


def configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


async def service_runner(
    container: AsyncContainer,
    target: type[T],
    action: Callable[[T], Awaitable[Any]],
) -> None:
    async with container(scope=Scope.REQUEST) as request_container:
        service = await request_container.get(target)
        try:
            await action(service)
        except Exception:
            logger.exception("Background service error")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    container: AsyncContainer = app.state.dishka_container
    settings = await container.get(AppSettings)
    notification_settings = await container.get(NotificationSettings)
    if settings.create_tables:
        await create_tables(await container.get(AsyncEngine))

    scheduler = await container.get(BaseScheduler)
    scheduler.start()
    scheduler.add_job(
        service_runner,
        args=(
            container,
            BackgroundLimitChecker,
            operator.methodcaller("__call__"),
        ),
        trigger="interval",
        id=LIMIT_RECHECK_JOB_ID,
        name="Periodic limit recheck",
        minutes=notification_settings.recheck_interval_minutes,
        replace_existing=True,
    )
    logger.info(
        "Limit recheck scheduled every %d minutes",
        notification_settings.recheck_interval_minutes,
    )
    yield
    scheduler.shutdown(wait=False)
    await container.close()


def create_app() -> FastAPI:
    container = create_container()
    settings = AppSettings()
    configure_logging(settings)
    app = FastAPI(lifespan=lifespan, title=settings.app_name)
    register_exception_handlers(app)
    setup_dishka(container, app=app)
    app.include_router(api_router)
    return app
