"""
Inventory items API endpoints.

Listing/search with paging, sorting and regex filtering, plus add, edit and
remove. Paths and envelopes match what the browser client expects.
"""
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from inventory.api.deps import get_inventory_config, get_list_query
from inventory.config import InventoryConfig
from inventory.db import schemas
from inventory.db.database import get_db
from inventory.services import inventory as service

router = APIRouter(prefix="/api/items", tags=["items"])
logger = logging.getLogger(__name__)


def _list(db: Session, query: schemas.ListQuery, config: InventoryConfig) -> schemas.PagedInventoryItems:
    try:
        return service.list_items(db, query, config)
    except service.InvalidQueryError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except RuntimeError as exc:
        logger.error("Failed to list items: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error loading inventory items")


@router.get("", response_model=schemas.PagedInventoryItems)
def list_items_endpoint(
    query: schemas.ListQuery = Depends(get_list_query),
    db: Session = Depends(get_db),
    config: InventoryConfig = Depends(get_inventory_config),
):
    return _list(db, query, config)


# Search is the same filtered listing under its own path.
@router.get("/search", response_model=schemas.PagedInventoryItems)
def search_items_endpoint(
    query: schemas.ListQuery = Depends(get_list_query),
    db: Session = Depends(get_db),
    config: InventoryConfig = Depends(get_inventory_config),
):
    return _list(db, query, config)


@router.get("/{item_id}", response_model=schemas.InventoryItem)
def get_item_endpoint(item_id: str, db: Session = Depends(get_db)):
    try:
        return service.get_item(db, item_id)
    except service.ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    except RuntimeError as exc:
        logger.error("Failed to load item %s: %s", item_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error loading item")


@router.post("/add", response_model=schemas.ItemMessage)
def add_item_endpoint(
    item: schemas.InventoryItemCreate,
    db: Session = Depends(get_db),
    config: InventoryConfig = Depends(get_inventory_config),
):
    try:
        created = service.add_item(db, item, config)
    except RuntimeError as exc:
        logger.error("Failed to add item: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add item")
    return {"message": "Item added successfully", "output": created.model_dump(mode="json")}


@router.post("/edit/{item_id}", response_model=schemas.ItemMessage)
def edit_item_endpoint(
    item_id: str,
    update: schemas.InventoryItemUpdate,
    db: Session = Depends(get_db),
):
    try:
        result = service.edit_item(db, item_id, update)
    except service.ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    except service.NothingToUpdateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except RuntimeError as exc:
        logger.error("Error executing edit for %s: %s", item_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error editing item")
    return {"message": "Item edited successfully", "output": result.model_dump(mode="json")}


@router.post("/remove", response_model=schemas.ItemMessage)
def remove_item_endpoint(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
):
    item_id = payload.get("id") if isinstance(payload, dict) else None
    if not isinstance(item_id, str):
        raise HTTPException(status_code=400, detail="Invalid ID")
    try:
        result = service.remove_item(db, item_id)
    except service.InvalidItemIdError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except service.ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    except RuntimeError as exc:
        logger.error("Failed to remove item %s: %s", item_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to remove item")
    return {"message": "Item removed successfully", "output": result.model_dump(mode="json")}
