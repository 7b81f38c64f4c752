from datetime import datetime, tzinfo

from expense_tracker.services.providers.protocols.clock import IClock
from expense_tracker.settings.app import AppSettings


class SystemClock(IClock):
    """Wall clock pinned to the configured application timezone."""

    def __init__(self, settings: AppSettings) -> None:
        self._tz = settings.tzinfo

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(tz=self._tz)
