"""
Form parsing and change detection for the add/edit pages.

``changed_fields`` is what keeps edits minimal: only values that differ from
the stored item are sent to the update operation.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional

from inventory.config import DEFAULT_CURRENCY

TEXT_FIELDS = (
    "received_from",
    "model_number",
    "serial_number",
    "purchase_reference",
    "notes",
)
BOOL_FIELDS = ("is_used", "future_purchase")
ITEM_FIELDS = (
    "name",
    "acquired_date",
    "purchase_price",
    "purchase_currency",
    *TEXT_FIELDS,
    *BOOL_FIELDS,
)


class FormError(ValueError):
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


def _text(form: Mapping[str, Any], key: str) -> Optional[str]:
    value = form.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _checkbox(form: Mapping[str, Any], key: str) -> bool:
    value = form.get(key)
    if value is None:
        return False
    return str(value).strip().lower() in ("on", "true", "1", "yes")


def _price(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        number = float(raw)
    except ValueError:
        raise FormError("purchase_price", f"Invalid purchase price: {raw}")
    if not number.is_integer():
        raise FormError("purchase_price", "Purchase price must be a whole number")
    return int(number)


def _date(raw: Optional[str]) -> Optional[date]:
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise FormError("acquired_date", f"Invalid date: {raw}")


def parse_item_form(form: Mapping[str, Any], default_currency: str = DEFAULT_CURRENCY) -> Dict[str, Any]:
    """Normalize submitted form fields into item values."""
    values: Dict[str, Any] = {
        "name": _text(form, "name"),
        "acquired_date": _date(_text(form, "acquired_date")),
        "purchase_price": _price(_text(form, "purchase_price")),
        "purchase_currency": (_text(form, "purchase_currency") or default_currency).upper(),
    }
    for key in TEXT_FIELDS:
        values[key] = _text(form, key)
    for key in BOOL_FIELDS:
        values[key] = _checkbox(form, key)
    return values


def _as_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _original_values(original) -> Dict[str, Any]:
    if hasattr(original, "model_dump"):
        original = original.model_dump()
    return dict(original)


def changed_fields(original, submitted: Mapping[str, Any], default_currency: str = DEFAULT_CURRENCY) -> Dict[str, Any]:
    """Return only the submitted values that differ from ``original``.

    Keys absent from ``submitted`` are left alone. Empty text compares equal
    to a missing value, flags compare as booleans and a blank currency as the
    default currency. An empty name never counts as a change.
    """
    before = _original_values(original)
    changes: Dict[str, Any] = {}

    name = submitted.get("name")
    if name and name != (before.get("name") or ""):
        changes["name"] = name

    if "acquired_date" in submitted:
        new_date = _as_date(submitted["acquired_date"])
        if new_date != _as_date(before.get("acquired_date")):
            changes["acquired_date"] = new_date

    if "purchase_price" in submitted and submitted["purchase_price"] != before.get("purchase_price"):
        changes["purchase_price"] = submitted["purchase_price"]

    if "purchase_currency" in submitted:
        currency = (submitted["purchase_currency"] or default_currency).upper()
        if currency != (before.get("purchase_currency") or default_currency):
            changes["purchase_currency"] = currency

    for key in TEXT_FIELDS + ("extra",):
        if key in submitted and (submitted[key] or "") != (before.get(key) or ""):
            changes[key] = submitted[key] or None

    for key in BOOL_FIELDS:
        if key in submitted and bool(submitted[key]) != bool(before.get(key)):
            changes[key] = bool(submitted[key])

    return changes
