"""HTTP client for the inventory API.

Mirrors what the browser page does: page/offset arithmetic for listing,
change detection before edits, and the add/edit/remove envelopes.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

import requests
from pydantic import ValidationError

from inventory.db import schemas
from inventory.web.forms import changed_fields

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = (3, 30)


class InventoryClientError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class InventoryClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        session: Optional[requests.Session] = None,
        timeout=_DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Inventory request failed: %s %s: %s", method, url, exc)
            raise InventoryClientError(f"Request to {url} failed: {exc}") from exc
        if not response.ok:
            detail = response.text
            try:
                detail = response.json().get("detail", detail)
            except ValueError:
                pass
            raise InventoryClientError(f"{method} {path} returned {response.status_code}: {detail}", response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise InventoryClientError(f"Invalid JSON from {method} {path}") from exc

    def list_items(
        self,
        page: int = 1,
        per_page: int = 10,
        sort_by: str = "name",
        order_by: str = "asc",
        search: Optional[str] = None,
        fields: Optional[Iterable[str]] = None,
    ) -> schemas.PagedInventoryItems:
        if page < 1 or per_page < 1:
            raise ValueError("page and per_page must be positive")
        params: Dict[str, Any] = {
            "limit": per_page,
            "offset": (page - 1) * per_page,
            "sortBy": sort_by,
            "orderBy": order_by,
        }
        if search:
            params["filter"] = search
        if fields:
            params["fields"] = ",".join(fields)
        data = self._request("GET", "/api/items", params=params)
        if not isinstance(data, dict) or "items" not in data:
            raise InventoryClientError("Invalid response format")
        try:
            return schemas.PagedInventoryItems.model_validate(data)
        except ValidationError as exc:
            raise InventoryClientError(f"Invalid response format: {exc}") from exc

    def get_item(self, item_id: str) -> schemas.InventoryItem:
        data = self._request("GET", f"/api/items/{item_id}")
        return schemas.InventoryItem.model_validate(data)

    def add_item(self, item: schemas.InventoryItemCreate | Mapping[str, Any]) -> schemas.NewInventoryItem:
        if not isinstance(item, schemas.InventoryItemCreate):
            item = schemas.InventoryItemCreate.model_validate(dict(item))
        body = item.model_dump(mode="json", exclude_none=True, exclude={"id"})
        data = self._request("POST", "/api/items/add", json=body)
        return schemas.NewInventoryItem.model_validate(data.get("output"))

    def edit_item(self, item_id: str, changes: Mapping[str, Any]) -> schemas.EditResult:
        update = schemas.InventoryItemUpdate.model_validate(dict(changes))
        body = update.model_dump(mode="json", exclude_unset=True)
        data = self._request("POST", f"/api/items/edit/{item_id}", json=body)
        return schemas.EditResult.model_validate(data.get("output"))

    def update_item(
        self,
        original: schemas.InventoryItem,
        values: Mapping[str, Any],
    ) -> Optional[schemas.EditResult]:
        """Send only fields of ``values`` that differ from ``original``; None if nothing changed."""
        changes = changed_fields(original, values)
        if not changes:
            logger.info("No fields were changed for item %s", original.id)
            return None
        return self.edit_item(original.id, changes)

    def remove_item(self, item_id: str) -> schemas.RemovalResult:
        data = self._request("POST", "/api/items/remove", json={"id": item_id})
        return schemas.RemovalResult.model_validate(data.get("output"))
