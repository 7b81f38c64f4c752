from datetime import datetime, tzinfo
from typing import Protocol


class IClock(Protocol):
    @property
    def tz(self) -> tzinfo: ...

    def now(self) -> datetime: ...
