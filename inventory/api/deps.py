"""
Shared FastAPI dependencies for the inventory API and web pages.
"""
from typing import Optional

from fastapi import HTTPException, Query
from pydantic import ValidationError

from inventory.config import InventoryConfig, get_config
from inventory.db import schemas


def get_inventory_config() -> InventoryConfig:
    return get_config()


def get_list_query(
    limit: Optional[int] = Query(default=None, ge=0),
    offset: Optional[int] = Query(default=None, ge=0),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    order_by: Optional[str] = Query(default=None, alias="orderBy"),
    filter: Optional[str] = Query(default=None),
    fields: Optional[str] = Query(default=None),
) -> schemas.ListQuery:
    """Translate the list/search query string into a ``ListQuery``."""
    try:
        return schemas.ListQuery(
            limit=limit,
            offset=offset,
            sort_by=sort_by,
            order_by=order_by,
            filter=filter,
            fields=fields,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))
