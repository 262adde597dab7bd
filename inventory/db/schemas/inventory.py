from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

OrderBy = Literal["asc", "desc"]

BOOLEAN_FIELDS = ("is_used", "future_purchase")


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    return value


class InventoryItemBase(BaseModel):
    acquired_date: Optional[date] = None
    purchase_price: Optional[int] = None
    purchase_currency: Optional[str] = Field(default=None, max_length=8)
    is_used: Optional[bool] = None
    received_from: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_reference: Optional[str] = None
    notes: Optional[str] = None
    extra: Optional[str] = None
    future_purchase: Optional[bool] = None

    @field_validator("acquired_date", mode="before")
    @classmethod
    def _empty_date(cls, value):
        return _blank_to_none(value)

    @field_validator("purchase_currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value):
        value = _blank_to_none(value)
        return value.upper() if isinstance(value, str) else value


class InventoryItemCreate(InventoryItemBase):
    """Payload for a new item. A client supplied ``id`` is accepted and ignored."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    name: str = Field(min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class InventoryItemUpdate(InventoryItemBase):
    """Partial update; only fields present in the payload are applied."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    name: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.pop("id", None)
        name = data.get("name")
        if name is None or not str(name).strip():
            data.pop("name", None)
        else:
            data["name"] = str(name).strip()
        for key in BOOLEAN_FIELDS:
            if key in data and data[key] is None:
                data[key] = False
        return data


class InventoryItem(InventoryItemBase):
    id: str
    name: str
    model_config = ConfigDict(from_attributes=True)


class ShortInventoryItem(BaseModel):
    id: str
    name: str
    acquired_date: Optional[date] = None
    model_config = ConfigDict(from_attributes=True)


class NewInventoryItem(BaseModel):
    id: str
    name: str
    acquired_date: Optional[date] = None


class RemovalResult(BaseModel):
    success: bool
    item_id: str
    item_name: Optional[str] = None
    message: str


class EditResult(BaseModel):
    success: bool
    item_id: str
    message: str


class PagingInfo(BaseModel):
    limit: Optional[int] = None
    offset: Optional[int] = None
    total: int


class PagedInventoryItems(BaseModel):
    items: List[InventoryItem]
    paging: PagingInfo


class ListQuery(BaseModel):
    limit: Optional[int] = Field(default=None, ge=0)
    offset: Optional[int] = Field(default=None, ge=0)
    sort_by: Optional[List[str]] = None
    order_by: Optional[OrderBy] = None
    filter: Optional[str] = None
    fields: Optional[List[str]] = None
    all: bool = False

    @field_validator("sort_by", "fields", mode="before")
    @classmethod
    def _split_csv(cls, value):
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",")]
        if isinstance(value, list):
            value = [v for v in value if v]
            return value or None
        return value

    @field_validator("order_by", mode="before")
    @classmethod
    def _lower_order(cls, value):
        value = _blank_to_none(value)
        return value.lower() if isinstance(value, str) else value

    @field_validator("filter", mode="before")
    @classmethod
    def _empty_filter(cls, value):
        return _blank_to_none(value)


class ItemMessage(BaseModel):
    """Envelope used by the mutating API routes."""
    message: str
    output: Any = None
