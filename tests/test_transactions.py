import uuid

import pytest
from pydantic import ValidationError

from expense_tracker.models.enums import TransactionCategory, TransactionType
from expense_tracker.schemas.transactions import TransactionCreateSchema
from expense_tracker.services.errors import NotFoundError, PermissionDeniedError
from expense_tracker.services.providers.category_classifier import KeywordCategoryClassifier
from expense_tracker.services.transactions import (
    TransactionCreateInteractor,
    TransactionDeleteInteractor,
    TransactionPresenter,
    TransactionRetrieveInteractor,
)


@pytest.fixture
def present():
    return TransactionPresenter(KeywordCategoryClassifier())


@pytest.mark.asyncio
async def test_created_transaction_is_categorized(store, notifier, present, hub, user_id):
    create = TransactionCreateInteractor(store, notifier, present)

    transaction = await create(user_id, TransactionCreateSchema(text="Movie tickets", amount=-450))

    assert transaction.category == TransactionCategory.ENTERTAINMENT
    assert transaction.type == TransactionType.EXPENSE
    assert [n.title for n in hub.for_user(user_id).notifications] == ["Expense Added"]
    assert len(await store.list(user_id)) == 1


@pytest.mark.asyncio
async def test_retrieve_filters_and_searches(store, present, user_id):
    store.add(user_id, "Salary", 40000)
    store.add(user_id, "Pizza", -600)
    store.add(user_id, "Taxi", -250)
    store.add(uuid.uuid4(), "Pizza for someone else", -300)
    retrieve = TransactionRetrieveInteractor(store, present)

    everything = await retrieve.all(user_id)
    expenses = await retrieve.all(user_id, type=TransactionType.EXPENSE)
    food = await retrieve.all(user_id, search="food")

    assert len(everything) == 3
    assert {t.text for t in expenses} == {"Pizza", "Taxi"}
    assert [(t.text, t.category) for t in food] == [("Pizza", TransactionCategory.FOOD)]


@pytest.mark.asyncio
async def test_delete_transaction(store, notifier, hub, user_id):
    transaction = store.add(user_id, "Taxi", -250)
    delete = TransactionDeleteInteractor(store, notifier)

    await delete(user_id, transaction.id)

    assert await store.list(user_id) == []
    assert [n.title for n in hub.for_user(user_id).notifications] == ["Transaction Deleted"]


@pytest.mark.asyncio
async def test_delete_foreign_or_missing_transaction(store, notifier, hub, user_id):
    foreign = store.add(uuid.uuid4(), "Taxi", -250)
    delete = TransactionDeleteInteractor(store, notifier)

    with pytest.raises(PermissionDeniedError):
        await delete(user_id, foreign.id)
    with pytest.raises(NotFoundError):
        await delete(user_id, uuid.uuid4())

    assert hub.for_user(user_id).notifications == []


@pytest.mark.parametrize("amount", ["-Infinity", "Infinity", "NaN"])
def test_non_finite_amount_is_rejected(amount):
    with pytest.raises(ValidationError):
        TransactionCreateSchema.model_validate_json(f'{{"text": "Taxi", "amount": {amount}}}')
