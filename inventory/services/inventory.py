"""
Inventory operations shared by the REST API, the web UI and the CLI.

Wraps the repository with configuration defaults and turns storage results
into the result objects returned to callers.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from inventory.config import InventoryConfig, get_config
from inventory.db import schemas
from inventory.db.repositories import inventory as repo

logger = logging.getLogger(__name__)

DEFAULT_SORT = ["name"]


class InventoryError(Exception):
    """Base class for domain errors raised by inventory operations."""


class ItemNotFoundError(InventoryError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"No item found with ID: {item_id}")


class InvalidItemIdError(InventoryError):
    def __init__(self):
        super().__init__("Invalid ID")


class NothingToUpdateError(InventoryError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__("No fields to update")


class InvalidQueryError(InventoryError):
    pass


def apply_list_defaults(query: schemas.ListQuery, config: Optional[InventoryConfig] = None) -> schemas.ListQuery:
    """Fill unset list options from the configuration."""
    config = config or get_config()
    updates = {}
    if query.limit is None and not query.all and config.default_page_limit is not None:
        updates["limit"] = config.default_page_limit
    if query.all:
        updates["limit"] = None
        updates["offset"] = None
    if not query.sort_by:
        updates["sort_by"] = list(config.default_sort_by or DEFAULT_SORT)
    if query.order_by is None:
        updates["order_by"] = config.default_order_by or "asc"
    return query.model_copy(update=updates) if updates else query


def list_items(
    db: Session,
    query: schemas.ListQuery,
    config: Optional[InventoryConfig] = None,
) -> schemas.PagedInventoryItems:
    query = apply_list_defaults(query, config)
    try:
        items, total = repo.list_items(db, query)
    except repo.UnknownFieldError as exc:
        raise InvalidQueryError(str(exc)) from exc
    return schemas.PagedInventoryItems(
        items=[schemas.InventoryItem.model_validate(i, from_attributes=True) for i in items],
        paging=schemas.PagingInfo(limit=query.limit, offset=query.offset, total=total),
    )


def list_short_items(
    db: Session,
    query: schemas.ListQuery,
    config: Optional[InventoryConfig] = None,
):
    """Same listing reduced to id, name and acquisition date."""
    paged = list_items(db, query, config)
    short = [schemas.ShortInventoryItem.model_validate(i.model_dump()) for i in paged.items]
    return short, paged.paging


def get_item(db: Session, item_id: str) -> schemas.InventoryItem:
    db_item = repo.get_item(db, item_id)
    if db_item is None:
        raise ItemNotFoundError(item_id)
    return schemas.InventoryItem.model_validate(db_item, from_attributes=True)


def add_item(
    db: Session,
    payload: schemas.InventoryItemCreate,
    config: Optional[InventoryConfig] = None,
) -> schemas.NewInventoryItem:
    config = config or get_config()
    db_item = repo.create_item(db, payload, default_currency=config.currency)
    logger.info("Added inventory item %s (%s)", db_item.id, db_item.name)
    return schemas.NewInventoryItem(id=db_item.id, name=db_item.name, acquired_date=db_item.acquired_date)


def add_named_item(db: Session, name: str, config: Optional[InventoryConfig] = None) -> schemas.NewInventoryItem:
    return add_item(db, schemas.InventoryItemCreate(name=name), config)


def remove_item(db: Session, item_id: str) -> schemas.RemovalResult:
    item_id = (item_id or "").strip()
    if not item_id:
        raise InvalidItemIdError()
    removed = repo.delete_item(db, item_id)
    if removed is None:
        logger.warning("Remove requested for unknown item %s", item_id)
        raise ItemNotFoundError(item_id)
    logger.info("Removed inventory item %s (%s)", item_id, removed.name)
    return schemas.RemovalResult(
        success=True,
        item_id=item_id,
        item_name=removed.name,
        message=f"Successfully removed item '{removed.name}' with ID: {item_id}",
    )


def edit_item(db: Session, item_id: str, update: schemas.InventoryItemUpdate) -> schemas.EditResult:
    if repo.get_item(db, item_id) is None:
        logger.warning("Edit requested for unknown item %s", item_id)
        raise ItemNotFoundError(item_id)
    changes = update.changes()
    if not changes:
        raise NothingToUpdateError(item_id)
    repo.update_item(db, item_id, changes)
    logger.info("Updated inventory item %s fields=%s", item_id, sorted(changes))
    return schemas.EditResult(
        success=True,
        item_id=item_id,
        message=f"Successfully updated item with ID: {item_id}",
    )
