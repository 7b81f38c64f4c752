from typing import Any, Protocol
from uuid import UUID


class ISettingsStore(Protocol):
    async def get(self, user_id: UUID, key: str) -> Any | None: ...

    async def set(self, user_id: UUID, key: str, value: Any) -> None: ...

    async def remove(self, user_id: UUID, key: str) -> None: ...
