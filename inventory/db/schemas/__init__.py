"""
Pydantic schemas for request and response bodies.
"""

from .inventory import (
    OrderBy,
    InventoryItemBase,
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryItem,
    ShortInventoryItem,
    NewInventoryItem,
    RemovalResult,
    EditResult,
    PagingInfo,
    PagedInventoryItems,
    ListQuery,
    ItemMessage,
)

__all__ = [
    "OrderBy",
    "InventoryItemBase",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventoryItem",
    "ShortInventoryItem",
    "NewInventoryItem",
    "RemovalResult",
    "EditResult",
    "PagingInfo",
    "PagedInventoryItems",
    "ListQuery",
    "ItemMessage",
]
