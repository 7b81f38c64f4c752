import pytest

from expense_tracker.models.enums import TransactionCategory
from expense_tracker.services.providers.category_classifier import (
    CATEGORY_KEYWORDS,
    KeywordCategoryClassifier,
    categorize,
)


@pytest.mark.parametrize(
    ("text", "category"),
    [
        ("Lunch at cafe", TransactionCategory.FOOD),
        ("Grocery shopping", TransactionCategory.FOOD),
        ("Uber to office", TransactionCategory.TRANSPORT),
        ("Netflix", TransactionCategory.ENTERTAINMENT),
        ("Flipkart order", TransactionCategory.SHOPPING),
        ("Electricity bill", TransactionCategory.BILLS),
        ("Pharmacy", TransactionCategory.HEALTHCARE),
        ("Python course", TransactionCategory.EDUCATION),
        ("Birthday gift", TransactionCategory.OTHER),
    ],
)
def test_categorize_by_keyword(text, category):
    assert categorize(text) == category


def test_first_matching_category_wins():
    assert categorize("Amazon Prime renewal") == TransactionCategory.ENTERTAINMENT
    assert categorize("Amazon order") == TransactionCategory.SHOPPING


def test_matching_ignores_case():
    assert categorize("DINNER WITH FRIENDS") == TransactionCategory.FOOD


@pytest.mark.parametrize("text", ["", None, "   ", "12345"])
def test_unmatched_text_is_other(text):
    assert categorize(text) == TransactionCategory.OTHER


def test_categorize_is_deterministic():
    texts = ["Pizza night", "Metro card", "Rent", "Something else"]
    assert [categorize(t) for t in texts] == [categorize(t) for t in texts]


def test_keyword_table_covers_every_category_but_other():
    categories = [category for category, _ in CATEGORY_KEYWORDS]
    assert categories == [c for c in TransactionCategory if c != TransactionCategory.OTHER]


def test_classifier_uses_keyword_table():
    classifier = KeywordCategoryClassifier()
    assert classifier.predict("Spotify family plan") == TransactionCategory.ENTERTAINMENT
    assert classifier.predict("") == TransactionCategory.OTHER
