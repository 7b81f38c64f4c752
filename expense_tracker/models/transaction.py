from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from expense_tracker.models.base import BaseModel


if TYPE_CHECKING:
    from expense_tracker.models.user import User


class Transaction(BaseModel):
    __tablename__ = "transactions"

    text: Mapped[str]
    # positive for income, negative for expense
    amount: Mapped[float]

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    user: Mapped["User"] = relationship(back_populates="transactions")
