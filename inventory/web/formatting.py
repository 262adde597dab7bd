"""Display helpers for prices, dates and optional values (en-US style)."""
from __future__ import annotations

from datetime import date
from typing import Optional

from inventory.config import DEFAULT_CURRENCY

NOT_AVAILABLE = "N/A"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "JPY": "¥",
    "EUR": "€",
    "GBP": "£",
    "CNY": "CN¥",
    "KRW": "₩",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
}

ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW"}

CURRENCY_CHOICES = ("JPY", "USD", "EUR", "GBP", "CNY", "KRW", "CAD", "AUD")


def format_price(amount: Optional[float], currency: Optional[str] = None) -> str:
    if amount is None:
        return NOT_AVAILABLE
    code = (currency or "").strip().upper() or DEFAULT_CURRENCY
    decimals = 0 if code in ZERO_DECIMAL_CURRENCIES else 2
    sign = "-" if amount < 0 else ""
    number = f"{abs(amount):,.{decimals}f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{number}"
    return f"{sign}{code} {number}"


def format_date(value) -> str:
    if not value:
        return NOT_AVAILABLE
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value)
        except ValueError:
            return value
    return f"{value.month}/{value.day}/{value.year}"


def yes_no(flag) -> str:
    return "Yes" if flag else "No"


def or_na(value) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)
