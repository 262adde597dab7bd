"""
SQLAlchemy models.

Exposes `Base`, the id/date default helpers and the ORM classes.
"""

from .base import Base, new_item_id, today_iso  # re-export

from .inventory import InventoryItem

__all__ = [
    "Base",
    "new_item_id",
    "today_iso",
    "InventoryItem",
]
