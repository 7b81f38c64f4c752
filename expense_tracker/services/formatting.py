"""Currency formatting for notification and status messages."""

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def format_currency(amount: float, currency: str = "INR", decimals: int = 2) -> str:
    """Format ``amount`` with thousands separators and the currency symbol.

    >>> format_currency(3200)
    '₹3,200.00'
    >>> format_currency(1234.5, "CHF")
    'CHF 1,234.50'
    """
    formatted = f"{amount:,.{decimals}f}"
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol is None:
        return f"{currency} {formatted}"
    return f"{symbol}{formatted}"


def format_percentage(value: float) -> str:
    """Render a percentage without trailing zeros (``80.0`` -> ``80``)."""
    return f"{value:.2f}".rstrip("0").rstrip(".")
