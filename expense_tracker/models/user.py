from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from expense_tracker.models.base import BaseModel


if TYPE_CHECKING:
    from expense_tracker.models.setting import UserSetting
    from expense_tracker.models.transaction import Transaction


class User(BaseModel):
    __tablename__ = "users"

    # stored lower-cased by the register interactor
    email: Mapped[str] = mapped_column(String(320), unique=True)
    name: Mapped[str]
    # bcrypt hash, cost factor embedded
    password: Mapped[str]

    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="user", passive_deletes=True
    )
    settings: Mapped[list["UserSetting"]] = relationship(
        back_populates="user", passive_deletes=True
    )
