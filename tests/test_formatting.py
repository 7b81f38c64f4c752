import pytest

from expense_tracker.services.formatting import format_currency, format_percentage


@pytest.mark.parametrize(
    ("amount", "currency", "decimals", "expected"),
    [
        (3200, "INR", 2, "₹3,200.00"),
        (5000, "INR", 0, "₹5,000"),
        (0.5, "USD", 2, "$0.50"),
        (1234.5, "CHF", 2, "CHF 1,234.50"),
    ],
)
def test_format_currency(amount, currency, decimals, expected):
    assert format_currency(amount, currency, decimals) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(80.0, "80"), (85.5, "85.5"), (104.25, "104.25"), (0.0, "0")],
)
def test_format_percentage(value, expected):
    assert format_percentage(value) == expected
