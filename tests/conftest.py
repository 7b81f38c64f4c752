import copy
import uuid
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any
from uuid import UUID

import pytest
from apscheduler.jobstores.base import JobLookupError

from expense_tracker.schemas.transactions import TransactionSchema
from expense_tracker.services.errors import NotFoundError, PermissionDeniedError
from expense_tracker.services.limits import ExpenseLimitTracker
from expense_tracker.services.notifications import LimitAlertNotifier
from expense_tracker.services.providers.notification_manager import NotificationHub
from expense_tracker.settings.app import AppSettings
from expense_tracker.settings.limits import LimitSettings


NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime = NOW):
        self._now = now

    @property
    def tz(self) -> tzinfo:
        return self._now.tzinfo

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now += timedelta(**kwargs)


class InMemoryTransactionStore:
    def __init__(self, clock: FixedClock):
        self.clock = clock
        self.rows: dict[UUID, tuple[UUID, TransactionSchema]] = {}
        self.fail_with: Exception | None = None

    def add(
        self, user_id: UUID, text: str, amount: float, created_at: datetime | None = None
    ) -> TransactionSchema:
        transaction = TransactionSchema(
            id=uuid.uuid4(),
            text=text,
            amount=amount,
            created_at=created_at or self.clock.now(),
        )
        self.rows[transaction.id] = (user_id, transaction)
        return transaction

    async def list(self, user_id: UUID) -> list[TransactionSchema]:
        if self.fail_with is not None:
            raise self.fail_with
        owned = [t for owner, t in self.rows.values() if owner == user_id]
        return sorted(owned, key=lambda t: t.created_at, reverse=True)

    async def create(self, user_id: UUID, text: str, amount: float) -> TransactionSchema:
        return self.add(user_id, text, amount)

    async def delete(self, user_id: UUID, transaction_id: UUID) -> TransactionSchema:
        if transaction_id not in self.rows:
            raise NotFoundError("Transaction not found")
        owner, transaction = self.rows[transaction_id]
        if owner != user_id:
            raise PermissionDeniedError()
        del self.rows[transaction_id]
        return transaction


class InMemorySettingsStore:
    def __init__(self):
        self.values: dict[tuple[UUID, str], Any] = {}

    async def get(self, user_id: UUID, key: str) -> Any | None:
        return copy.deepcopy(self.values.get((user_id, key)))

    async def set(self, user_id: UUID, key: str, value: Any) -> None:
        self.values[(user_id, key)] = copy.deepcopy(value)

    async def remove(self, user_id: UUID, key: str) -> None:
        self.values.pop((user_id, key), None)


class FakeJob:
    def __init__(self, func, run_date, args, id, name=None):
        self.func = func
        self.next_run_time = run_date
        self.args = args
        self.id = id
        self.name = name or id


class FakeScheduler:
    running = True

    def __init__(self):
        self.jobs: dict[str, FakeJob] = {}

    def add_job(self, func, trigger=None, run_date=None, args=(), id=None, replace_existing=False, **kwargs):
        job = FakeJob(func, run_date, args, id, kwargs.get("name"))
        self.jobs[id] = job
        return job

    def remove_job(self, job_id: str) -> None:
        if job_id not in self.jobs:
            raise JobLookupError(job_id)
        del self.jobs[job_id]

    def get_jobs(self) -> list[FakeJob]:
        return list(self.jobs.values())

    async def run_due(self, now: datetime) -> None:
        for job in [job for job in self.jobs.values() if job.next_run_time <= now]:
            self.jobs.pop(job.id, None)
            await job.func(*job.args)


@pytest.fixture
def user_id() -> UUID:
    return uuid.uuid4()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store(clock) -> InMemoryTransactionStore:
    return InMemoryTransactionStore(clock)


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(jwt_secret="test-secret", currency="INR", timezone="UTC")


@pytest.fixture
def limit_settings() -> LimitSettings:
    return LimitSettings()


@pytest.fixture
def tracker(store, settings_store, clock, app_settings, limit_settings) -> ExpenseLimitTracker:
    return ExpenseLimitTracker(store, settings_store, clock, app_settings, limit_settings)


@pytest.fixture
def hub(clock, scheduler) -> NotificationHub:
    return NotificationHub(clock, scheduler)


@pytest.fixture
def notifier(hub, tracker, app_settings) -> LimitAlertNotifier:
    return LimitAlertNotifier(hub, tracker, app_settings)
