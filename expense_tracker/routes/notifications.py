import asyncio
import logging
from typing import Annotated
from uuid import UUID

from dishka import AsyncContainer, FromDishka
from dishka.integrations.fastapi import DishkaRoute, inject
from fastapi import APIRouter, WebSocket
from fastapi.params import Query
from fastapi.security import HTTPAuthorizationCredentials
from starlette import status
from starlette.websockets import WebSocketDisconnect

from expense_tracker.deps.auth import CurrentUser, CurrentUserDependency, CurrentUserFinder
from expense_tracker.schemas.notifications import (
    NotificationListSchema,
    NotificationSchema,
    RecheckResultSchema,
    VisibilitySchema,
)
from expense_tracker.services.errors import AuthError, NotFoundError
from expense_tracker.services.notifications import LimitAlertNotifier
from expense_tracker.services.providers.protocols.notification_manager import (
    INotificationManager,
)
from expense_tracker.settings.notifications import NotificationSettings

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    route_class=DishkaRoute,
)
logger = logging.getLogger(__name__)


def visible_notifications(
    notifications: list[NotificationSchema], limit: int
) -> NotificationListSchema:
    """Most recent ``limit`` notifications, oldest first."""
    return NotificationListSchema(total=len(notifications), items=notifications[-limit:])


@router.get("", dependencies=[CurrentUserDependency])
async def list_notifications(
    current_user: CurrentUser,
    notifications: FromDishka[INotificationManager],
    settings: FromDishka[NotificationSettings],
) -> NotificationListSchema:
    dispatcher = notifications.for_user(current_user.id)
    return visible_notifications(dispatcher.notifications, settings.display_limit)


@router.delete(
    "/{notification_id}",
    dependencies=[CurrentUserDependency],
    status_code=status.HTTP_204_NO_CONTENT,
)
async def dismiss_notification(
    notification_id: UUID,
    current_user: CurrentUser,
    notifications: FromDishka[INotificationManager],
) -> None:
    if not notifications.for_user(current_user.id).dismiss(notification_id):
        raise NotFoundError("Notification not found")


@router.delete(
    "", dependencies=[CurrentUserDependency], status_code=status.HTTP_204_NO_CONTENT
)
async def clear_notifications(
    current_user: CurrentUser,
    notifications: FromDishka[INotificationManager],
) -> None:
    notifications.for_user(current_user.id).clear()


@router.post("/visibility", dependencies=[CurrentUserDependency])
async def report_visibility(
    data: VisibilitySchema,
    current_user: CurrentUser,
    notifier: FromDishka[LimitAlertNotifier],
) -> RecheckResultSchema:
    if not data.visible:
        return RecheckResultSchema(alerted=False)
    return RecheckResultSchema(alerted=await notifier.recheck(current_user.id))


async def wait_for_disconnect(socket: WebSocket) -> None:
    """Drain client frames until the socket closes."""
    while True:
        message = await socket.receive()
        if message["type"] == "websocket.disconnect":
            return


ws_router = APIRouter(prefix="/notifications")


@ws_router.websocket("/ws")
@inject
async def notifications_ws(
    container: FromDishka[AsyncContainer],
    token: Annotated[str, Query()],
    socket: WebSocket,
    notifications: FromDishka[INotificationManager],
    settings: FromDishka[NotificationSettings],
):
    async with container() as request_container:
        get_user = await request_container.get(CurrentUserFinder)
        try:
            user = await get_user(
                HTTPAuthorizationCredentials(credentials=token, scheme="Bearer")
            )
        except AuthError:
            await socket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        await socket.accept()
        user_id = user.id

    logger.info("User connected to notifications socket (user_id=%s)", user_id)
    dispatcher = notifications.for_user(user_id)
    updates: asyncio.Queue[list[NotificationSchema]] = asyncio.Queue()
    unsubscribe = dispatcher.subscribe(updates.put_nowait)
    disconnected = asyncio.create_task(wait_for_disconnect(socket))
    try:
        await socket.send_json({"detail": "authenticated", "user_id": str(user_id)})
        snapshot = dispatcher.notifications
        while True:
            payload = visible_notifications(snapshot, settings.display_limit)
            await socket.send_json(payload.model_dump(mode="json"))
            update = asyncio.create_task(updates.get())
            await asyncio.wait(
                {update, disconnected}, return_when=asyncio.FIRST_COMPLETED
            )
            if disconnected.done():
                update.cancel()
                break
            snapshot = update.result()
    except WebSocketDisconnect:
        logger.debug("Socket closed while sending (user_id=%s)", user_id)
    finally:
        disconnected.cancel()
        unsubscribe()
        notifications.release(user_id)
    logger.info("User disconnected from notifications socket (user_id=%s)", user_id)
