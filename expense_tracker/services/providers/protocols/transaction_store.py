from typing import Protocol
from uuid import UUID

from expense_tracker.schemas.transactions import TransactionSchema


class ITransactionStore(Protocol):
    async def list(self, user_id: UUID) -> list[TransactionSchema]: ...

    async def create(self, user_id: UUID, text: str, amount: float) -> TransactionSchema: ...

    async def delete(self, user_id: UUID, transaction_id: UUID) -> TransactionSchema: ...
