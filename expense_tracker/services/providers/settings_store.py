import logging
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.models import UserSetting
from expense_tracker.services.errors import NetworkError
from expense_tracker.services.providers.protocols.settings_store import ISettingsStore

logger = logging.getLogger(__name__)


class SqlSettingsStore(ISettingsStore):
    """Key-value settings persisted in ``user_settings``, one row per (user, key)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: UUID, key: str) -> Any | None:
        try:
            return await self.session.scalar(
                select(UserSetting.value).where(
                    UserSetting.user_id == user_id, UserSetting.key == key
                )
            )
        except (OperationalError, InterfaceError, OSError) as exc:
            raise NetworkError() from exc

    async def set(self, user_id: UUID, key: str, value: Any) -> None:
        statement = insert(UserSetting).values(user_id=user_id, key=key, value=value)
        statement = statement.on_conflict_do_update(
            constraint="uq_user_settings_user_key",
            set_={"value": statement.excluded.value},
        )
        try:
            await self.session.execute(statement)
            await self.session.commit()
        except (OperationalError, InterfaceError, OSError) as exc:
            raise NetworkError() from exc
        logger.debug("Setting %s updated (user_id=%s)", key, user_id)

    async def remove(self, user_id: UUID, key: str) -> None:
        try:
            await self.session.execute(
                delete(UserSetting).where(
                    UserSetting.user_id == user_id, UserSetting.key == key
                )
            )
            await self.session.commit()
        except (OperationalError, InterfaceError, OSError) as exc:
            raise NetworkError() from exc
