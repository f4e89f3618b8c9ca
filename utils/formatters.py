"""
utils/formatters.py
-------------------
Text formatting helpers for bot replies.
"""

from config import DEFAULT_CURRENCY

_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def format_currency(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format an amount the way the dashboard shows it, e.g. ``-$1,250.00``.

    Unknown currency codes are appended instead of prefixed: ``1,250.00 CHF``.
    """
    symbol = _SYMBOLS.get(currency)
    sign = "-" if amount < 0 else ""
    body = f"{abs(amount):,.2f}"
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{body} {currency}"
