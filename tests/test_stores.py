import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from expense_tracker.services.errors import ComputationError, NetworkError, NotFoundError
from expense_tracker.services.providers.settings_store import SqlSettingsStore
from expense_tracker.services.providers.transaction_store import SqlTransactionStore


def connection_lost():
    return OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


class FakeSession:
    """Stands in for ``AsyncSession``: fails every query or returns fixed rows."""

    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.added = []
        self.commits = 0

    def _check(self):
        if self.error is not None:
            raise self.error

    async def scalars(self, statement):
        self._check()
        return iter(self.rows)

    async def scalar(self, statement):
        self._check()
        return self.rows[0] if self.rows else None

    async def execute(self, statement):
        self._check()

    async def get(self, model, ident):
        self._check()
        return None

    def add(self, instance):
        self.added.append(instance)

    async def commit(self):
        self._check()
        self.commits += 1


def row(**overrides):
    values = {
        "id": uuid.uuid4(),
        "text": "Lunch",
        "amount": -120.0,
        "created_at": datetime(2026, 10, 1, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.asyncio
async def test_transaction_list_validates_rows(clock, user_id):
    store = SqlTransactionStore(FakeSession(rows=[row(), row(amount=5000.0)]), clock)

    transactions = await store.list(user_id)

    assert [t.amount for t in transactions] == [-120.0, 5000.0]


@pytest.mark.asyncio
async def test_unreachable_transaction_store(clock, user_id):
    store = SqlTransactionStore(FakeSession(error=connection_lost()), clock)

    with pytest.raises(NetworkError):
        await store.list(user_id)
    with pytest.raises(NetworkError):
        await store.create(user_id, "Lunch", -120)
    with pytest.raises(NetworkError):
        await store.delete(user_id, uuid.uuid4())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "bad_row",
    [
        row(amount="a lot"),
        row(created_at=None),
        row(id="not-a-uuid"),
    ],
)
async def test_malformed_transaction_rows(clock, user_id, bad_row):
    store = SqlTransactionStore(FakeSession(rows=[row(), bad_row]), clock)

    with pytest.raises(ComputationError):
        await store.list(user_id)


@pytest.mark.asyncio
async def test_delete_missing_transaction(clock, user_id):
    store = SqlTransactionStore(FakeSession(), clock)

    with pytest.raises(NotFoundError):
        await store.delete(user_id, uuid.uuid4())


@pytest.mark.asyncio
async def test_unreachable_settings_store(user_id):
    store = SqlSettingsStore(FakeSession(error=connection_lost()))

    with pytest.raises(NetworkError):
        await store.get(user_id, "monthly_expense_limit")
    with pytest.raises(NetworkError):
        await store.set(user_id, "monthly_expense_limit", {"amount": 5000})
    with pytest.raises(NetworkError):
        await store.remove(user_id, "monthly_expense_limit")


@pytest.mark.asyncio
async def test_settings_store_reads_and_writes(user_id):
    session = FakeSession(rows=[{"amount": 5000}])
    store = SqlSettingsStore(session)

    assert await store.get(user_id, "monthly_expense_limit") == {"amount": 5000}
    await store.set(user_id, "monthly_expense_limit", {"amount": 6000})
    await store.remove(user_id, "monthly_expense_limit")

    assert session.commits == 2
