import logging
from uuid import UUID

from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter
from starlette import status

from expense_tracker.deps.auth import CurrentUser, CurrentUserDependency
from expense_tracker.models.enums import TransactionType
from expense_tracker.schemas.transactions import (
    TransactionCreateSchema,
    TransactionReadSchema,
)
from expense_tracker.services.transactions import (
    TransactionCreateInteractor,
    TransactionDeleteInteractor,
    TransactionRetrieveInteractor,
)

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    route_class=DishkaRoute,
    dependencies=[CurrentUserDependency],
)
logger = logging.getLogger(__name__)


@router.get("")
async def list_transactions(
    current_user: CurrentUser,
    service: FromDishka[TransactionRetrieveInteractor],
    type: TransactionType | None = None,
    search: str | None = None,
) -> list[TransactionReadSchema]:
    return await service.all(current_user.id, type=type, search=search)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    data: TransactionCreateSchema,
    current_user: CurrentUser,
    create: FromDishka[TransactionCreateInteractor],
) -> TransactionReadSchema:
    return await create(current_user.id, data)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: UUID,
    current_user: CurrentUser,
    delete: FromDishka[TransactionDeleteInteractor],
) -> None:
    await delete(current_user.id, transaction_id)
