from typing import TypeAlias

from dishka import Provider, Scope, provide
from sqlalchemy import ColumnElement, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.models import User

FilterType: TypeAlias = ColumnElement[bool]


class RetrieveUserInteractor:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, query: FilterType) -> bool:
        value = await self.session.scalar(exists(User).select().where(query))
        return bool(value)

    async def get(self, query: FilterType) -> User | None:
        return await self.session.scalar(select(User).where(query).limit(1))


class UserServicesProvider(Provider):
    scope = Scope.REQUEST

    retrieve = provide(RetrieveUserInteractor)
