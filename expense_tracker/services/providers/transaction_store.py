import logging
from uuid import UUID

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.models import Transaction
from expense_tracker.schemas.transactions import TransactionSchema
from expense_tracker.services.errors import (
    ComputationError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
)
from expense_tracker.services.providers.protocols.clock import IClock
from expense_tracker.services.providers.protocols.transaction_store import (
    ITransactionStore,
)

logger = logging.getLogger(__name__)

_transactions_adapter = TypeAdapter(list[TransactionSchema])

STORE_UNREACHABLE = (OperationalError, InterfaceError, OSError)


class SqlTransactionStore(ITransactionStore):
    def __init__(self, session: AsyncSession, clock: IClock):
        self.session = session
        self.clock = clock

    async def list(self, user_id: UUID) -> list[TransactionSchema]:
        try:
            rows = await self.session.scalars(
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .order_by(Transaction.created_at.desc())
            )
            transactions = list(rows)
        except STORE_UNREACHABLE as exc:
            logger.warning("Failed to fetch transactions for user %s: %s", user_id, exc)
            raise NetworkError() from exc
        try:
            return _transactions_adapter.validate_python(transactions)
        except ValidationError as exc:
            logger.error("Unexpected transaction rows for user %s: %s", user_id, exc)
            raise ComputationError() from exc

    async def create(self, user_id: UUID, text: str, amount: float) -> TransactionSchema:
        transaction = Transaction(
            text=text,
            amount=amount,
            user_id=user_id,
            created_at=self.clock.now(),
        )
        try:
            self.session.add(transaction)
            await self.session.commit()
        except STORE_UNREACHABLE as exc:
            raise NetworkError() from exc
        logger.info("Transaction %s created (user_id=%s)", transaction.id, user_id)
        return TransactionSchema.model_validate(transaction)

    async def delete(self, user_id: UUID, transaction_id: UUID) -> TransactionSchema:
        try:
            transaction = await self.session.get(Transaction, transaction_id)
        except STORE_UNREACHABLE as exc:
            raise NetworkError() from exc
        if transaction is None:
            raise NotFoundError("Transaction not found")
        if transaction.user_id != user_id:
            raise PermissionDeniedError()

        deleted = TransactionSchema.model_validate(transaction)
        try:
            await self.session.delete(transaction)
            await self.session.commit()
        except STORE_UNREACHABLE as exc:
            raise NetworkError() from exc
        logger.info("Transaction %s deleted (user_id=%s)", transaction_id, user_id)
        return deleted
