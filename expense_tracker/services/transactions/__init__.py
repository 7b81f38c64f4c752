import logging
from uuid import UUID

from dishka import Provider, Scope, provide

from expense_tracker.models.enums import TransactionType
from expense_tracker.schemas.transactions import (
    TransactionCreateSchema,
    TransactionReadSchema,
    TransactionSchema,
)
from expense_tracker.services.analytics import filter_by_type, search_transactions
from expense_tracker.services.notifications import LimitAlertNotifier
from expense_tracker.services.providers.protocols.category_classifier import (
    ICategoryClassifier,
)
from expense_tracker.services.providers.protocols.transaction_store import (
    ITransactionStore,
)
from expense_tracker.services.providers.transaction_store import SqlTransactionStore

logger = logging.getLogger(__name__)


class TransactionPresenter:
    def __init__(self, classifier: ICategoryClassifier):
        self.classifier = classifier

    def __call__(self, transaction: TransactionSchema) -> TransactionReadSchema:
        return TransactionReadSchema(
            id=transaction.id,
            text=transaction.text,
            amount=transaction.amount,
            created_at=transaction.created_at,
            category=self.classifier.predict(transaction.text),
        )


class TransactionRetrieveInteractor:
    def __init__(self, store: ITransactionStore, present: TransactionPresenter):
        self.store = store
        self.present = present

    async def all(
        self,
        user_id: UUID,
        type: TransactionType | None = None,
        search: str | None = None,
    ) -> list[TransactionReadSchema]:
        transactions = await self.store.list(user_id)
        transactions = filter_by_type(transactions, type)
        transactions = search_transactions(
            transactions, search, self.present.classifier.predict
        )
        return [self.present(transaction) for transaction in transactions]


class TransactionCreateInteractor:
    def __init__(
        self,
        store: ITransactionStore,
        notifier: LimitAlertNotifier,
        present: TransactionPresenter,
    ):
        self.store = store
        self.notifier = notifier
        self.present = present

    async def __call__(
        self, user_id: UUID, data: TransactionCreateSchema
    ) -> TransactionReadSchema:
        transaction = await self.store.create(user_id, data.text, data.amount)
        await self.notifier.transaction_added(user_id, transaction)
        return self.present(transaction)


class TransactionDeleteInteractor:
    def __init__(self, store: ITransactionStore, notifier: LimitAlertNotifier):
        self.store = store
        self.notifier = notifier

    async def __call__(self, user_id: UUID, transaction_id: UUID) -> None:
        transaction = await self.store.delete(user_id, transaction_id)
        await self.notifier.transaction_deleted(user_id, transaction)


class TransactionServicesProvider(Provider):
    scope = Scope.REQUEST

    store = provide(SqlTransactionStore, provides=ITransactionStore)
    present = provide(TransactionPresenter)
    retrieve = provide(TransactionRetrieveInteractor)
    create = provide(TransactionCreateInteractor)
    delete = provide(TransactionDeleteInteractor)
