from typing import Protocol

from expense_tracker.models.enums import TransactionCategory


class ICategoryClassifier(Protocol):
    def predict(self, text: str) -> TransactionCategory: ...
