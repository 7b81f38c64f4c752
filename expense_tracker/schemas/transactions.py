from datetime import datetime
from uuid import UUID

from pydantic import Field, computed_field

from expense_tracker.models.enums import TransactionCategory, TransactionType
from expense_tracker.schemas.base import BaseSchema


class TransactionCreateSchema(BaseSchema):
    text: str = Field(min_length=1, max_length=200)
    amount: float = Field(allow_inf_nan=False)


class TransactionSchema(TransactionCreateSchema):
    id: UUID
    created_at: datetime

    @computed_field
    @property
    def type(self) -> TransactionType:
        return TransactionType.EXPENSE if self.amount < 0 else TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


class TransactionReadSchema(TransactionSchema):
    category: TransactionCategory
