from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from expense_tracker.models.base import BaseModel


if TYPE_CHECKING:
    from expense_tracker.models.user import User


class UserSetting(BaseModel):
    """Per-user key-value entry (monthly limit, limit history, alert settings)."""

    __tablename__ = "user_settings"
    __table_args__ = (UniqueConstraint("user_id", "key", name="uq_user_settings_user_key"),)

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    key: Mapped[str]
    value: Mapped[Any] = mapped_column(JSON)

    user: Mapped["User"] = relationship(back_populates="settings")
