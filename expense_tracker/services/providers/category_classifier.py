from expense_tracker.models.enums import TransactionCategory
from expense_tracker.services.providers.protocols.category_classifier import (
    ICategoryClassifier,
)

# Order matters: the first category with a matching keyword wins, so
# "amazon prime" resolves to Entertainment before Shopping sees "amazon".
CATEGORY_KEYWORDS: tuple[tuple[TransactionCategory, tuple[str, ...]], ...] = (
    (
        TransactionCategory.FOOD,
        (
            "restaurant", "food", "grocery", "cafe", "dining", "meal", "lunch",
            "dinner", "breakfast", "snack", "pizza", "burger", "coffee", "tea",
        ),
    ),
    (
        TransactionCategory.TRANSPORT,
        (
            "uber", "taxi", "bus", "train", "fuel", "petrol", "metro", "auto",
            "rickshaw", "flight", "travel", "parking", "toll",
        ),
    ),
    (
        TransactionCategory.ENTERTAINMENT,
        (
            "movie", "cinema", "game", "music", "streaming", "netflix",
            "amazon prime", "spotify", "concert", "show", "theater",
        ),
    ),
    (
        TransactionCategory.SHOPPING,
        (
            "amazon", "flipkart", "mall", "store", "clothes", "shopping", "dress",
            "shirt", "shoes", "bag", "electronics", "mobile",
        ),
    ),
    (
        TransactionCategory.BILLS,
        (
            "electricity", "water", "internet", "phone", "rent", "insurance", "gas",
            "maintenance", "wifi", "broadband", "utility",
        ),
    ),
    (
        TransactionCategory.HEALTHCARE,
        (
            "doctor", "medicine", "hospital", "pharmacy", "medical", "clinic",
            "health", "dentist", "checkup", "prescription",
        ),
    ),
    (
        TransactionCategory.EDUCATION,
        (
            "course", "book", "tuition", "school", "college", "training",
            "workshop", "certification", "study", "exam",
        ),
    ),
)


def categorize(
    text: str | None,
    keywords: tuple[tuple[TransactionCategory, tuple[str, ...]], ...] = CATEGORY_KEYWORDS,
) -> TransactionCategory:
    """Return the first category whose keywords occur in ``text``, else ``Other``."""
    if not text:
        return TransactionCategory.OTHER
    lowered = text.lower()
    for category, category_keywords in keywords:
        if any(keyword in lowered for keyword in category_keywords):
            return category
    return TransactionCategory.OTHER


class KeywordCategoryClassifier(ICategoryClassifier):
    keywords = CATEGORY_KEYWORDS

    def predict(self, text: str) -> TransactionCategory:
        return categorize(text, self.keywords)
