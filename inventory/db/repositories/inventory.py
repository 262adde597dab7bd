"""
Inventory item repository functions.

Implements create/read/update/delete for inventory items plus the filtered,
sorted and paged listing used by every front end.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Text, cast, func, or_
from sqlalchemy.exc import DataError, SQLAlchemyError
from sqlalchemy.orm import Session

from inventory.db import models, schemas

logger = logging.getLogger(__name__)

# Columns a search pattern is matched against when no explicit field list is given.
FILTERABLE_FIELDS = (
    "name",
    "acquired_date",
    "purchase_currency",
    "purchase_price",
    "received_from",
    "model_number",
    "serial_number",
    "purchase_reference",
    "notes",
    "extra",
)

SORTABLE_FIELDS = (
    "id",
    "name",
    "acquired_date",
    "purchase_price",
    "purchase_currency",
    "is_used",
    "received_from",
    "model_number",
    "serial_number",
    "purchase_reference",
    "notes",
    "extra",
    "future_purchase",
)


class UnknownFieldError(ValueError):
    def __init__(self, field_name: str, allowed: Tuple[str, ...]):
        self.field_name = field_name
        self.allowed = allowed
        super().__init__(f"Unknown field '{field_name}'. Allowed: {', '.join(allowed)}")


def _column_lookup() -> Dict[str, str]:
    """Map lower-cased attribute and column names to attribute names."""
    lookup: Dict[str, str] = {}
    for attr in models.InventoryItem.__mapper__.column_attrs:
        lookup[attr.key.lower()] = attr.key
        lookup[attr.columns[0].name.lower()] = attr.key
    return lookup


_COLUMN_LOOKUP = _column_lookup()


def resolve_field(field_name: str, allowed: Tuple[str, ...]) -> str:
    """Accept snake_case (``acquired_date``) or column spelling (``AcquiredDate``)."""
    key = _COLUMN_LOOKUP.get((field_name or "").strip().lower())
    if key is None or key not in allowed:
        raise UnknownFieldError(field_name, allowed)
    return key


def compile_filter(pattern: Optional[str]) -> Optional[str]:
    """Return the pattern when it is a usable regular expression, else None."""
    if not pattern:
        return None
    try:
        re.compile(pattern)
    except re.error as exc:
        logger.warning("Ignoring invalid filter pattern %r: %s", pattern, exc)
        return None
    return pattern


def _apply_filter(query, pattern: Optional[str], fields: Optional[List[str]]):
    pattern = compile_filter(pattern)
    if pattern is None:
        return query
    names = [resolve_field(f, FILTERABLE_FIELDS) for f in fields] if fields else list(FILTERABLE_FIELDS)
    conditions = [
        cast(getattr(models.InventoryItem, name), Text).regexp_match(pattern)
        for name in names
    ]
    return query.filter(or_(*conditions))


def _apply_sort(query, sort_by: Optional[List[str]], order_by: Optional[str]):
    descending = (order_by or "asc") == "desc"
    for field_name in sort_by or []:
        column = getattr(models.InventoryItem, resolve_field(field_name, SORTABLE_FIELDS))
        query = query.order_by(column.desc() if descending else column.asc())
    # Stable pages regardless of duplicate sort keys
    return query.order_by(models.InventoryItem.id.asc())


def _fetch_page(q, query: schemas.ListQuery) -> Tuple[List[models.InventoryItem], int]:
    total = q.order_by(None).with_entities(func.count(models.InventoryItem.id)).scalar() or 0

    q = _apply_sort(q, query.sort_by, query.order_by)
    if query.offset:
        q = q.offset(query.offset)
    if query.limit is not None:
        q = q.limit(query.limit)
    return q.all(), int(total)


def list_items(db: Session, query: schemas.ListQuery) -> Tuple[List[models.InventoryItem], int]:
    """Return the requested page of items and the filtered total."""
    base = db.query(models.InventoryItem)
    filtered = _apply_filter(base, query.filter, query.fields)
    try:
        try:
            return _fetch_page(filtered, query)
        except DataError as e:
            # Server databases have their own regex dialect; a pattern Python
            # accepts can still be rejected there.
            if filtered is base:
                raise
            db.rollback()
            logger.warning("Database rejected filter pattern %r: %s; listing without it", query.filter, e.orig)
            return _fetch_page(base, query)
    except SQLAlchemyError as e:
        db.rollback()
        raise RuntimeError(f"Failed to list inventory items: {str(e)}")


def get_item(db: Session, item_id: str):
    try:
        return db.query(models.InventoryItem).filter(models.InventoryItem.id == item_id).first()
    except SQLAlchemyError as e:
        db.rollback()
        raise RuntimeError(f"Failed to load inventory item {item_id}: {str(e)}")


def create_item(db: Session, item: schemas.InventoryItemCreate, *, default_currency: str):
    db_item = models.InventoryItem(
        id=models.new_item_id(),
        name=item.name,
        acquired_date=(item.acquired_date.isoformat() if item.acquired_date else models.today_iso()),
        purchase_price=item.purchase_price,
        purchase_currency=item.purchase_currency or default_currency,
        is_used=bool(item.is_used),
        received_from=item.received_from,
        model_number=item.model_number,
        serial_number=item.serial_number,
        purchase_reference=item.purchase_reference,
        notes=item.notes,
        extra=item.extra,
        future_purchase=bool(item.future_purchase),
    )
    try:
        db.add(db_item)
        db.commit()
        db.refresh(db_item)
    except SQLAlchemyError as e:
        db.rollback()
        raise RuntimeError(f"Failed to create inventory item {item.name!r}: {str(e)}")
    return db_item


def update_item(db: Session, item_id: str, changes: Dict[str, Any]):
    db_item = get_item(db, item_id)
    if db_item is None:
        return None
    for key, value in changes.items():
        if key == "acquired_date" and value is not None:
            value = value.isoformat()
        setattr(db_item, key, value)
    try:
        db.commit()
        db.refresh(db_item)
    except SQLAlchemyError as e:
        db.rollback()
        raise RuntimeError(f"Failed to update inventory item {item_id}: {str(e)}")
    return db_item


def delete_item(db: Session, item_id: str):
    """Delete an item; returns a snapshot of the removed row or None when it did not exist."""
    if not item_id:
        return None
    try:
        db_item = get_item(db, item_id)
        if db_item is None:
            return None
        snapshot = schemas.InventoryItem.model_validate(db_item, from_attributes=True)
        db.delete(db_item)
        db.commit()
        return snapshot
    except SQLAlchemyError as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete inventory item {item_id}: {str(e)}")
