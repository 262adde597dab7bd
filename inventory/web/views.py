"""
Server-rendered inventory pages.

List (paged, sorted, searchable), detail, add, edit and delete. Mutations
redirect back to the list carrying a notification in the query string.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Mapping
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from inventory.api.deps import get_inventory_config
from inventory.config import InventoryConfig
from inventory.db import schemas
from inventory.db.database import get_db
from inventory.services import inventory as service
from inventory.utils.feature_flags import item_delete_enabled
from inventory.web import formatting
from inventory.web.forms import FormError, changed_fields, parse_item_form
from inventory.web.pagination import DEFAULT_PER_PAGE, PER_PAGE_OPTIONS, PageState, normalize_per_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["web"], include_in_schema=False)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["price"] = formatting.format_price
templates.env.filters["display_date"] = formatting.format_date
templates.env.filters["yes_no"] = formatting.yes_no
templates.env.filters["or_na"] = formatting.or_na
templates.env.filters["qs"] = lambda params, **overrides: urlencode(
    {k: v for k, v in {**params, **overrides}.items() if v not in (None, "")}
)

SORT_CHOICES = (
    ("name", "Name"),
    ("acquired_date", "Date Acquired"),
    ("purchase_price", "Purchase Price"),
    ("purchase_currency", "Currency"),
    ("is_used", "Used"),
)
NOTICE_LEVELS = ("success", "error", "info")
STATE_KEYS = ("page", "per_page", "sort_by", "order_by", "search")


def _list_state(source: Mapping[str, Any]) -> Dict[str, Any]:
    """Extract list view state (page, sort, search) from query params or a form."""
    sort_by = str(source.get("sort_by") or "name")
    if sort_by not in dict(SORT_CHOICES):
        sort_by = "name"
    order_by = str(source.get("order_by") or "asc").lower()
    if order_by not in ("asc", "desc"):
        order_by = "asc"
    try:
        page = int(source.get("page") or 1)
    except (TypeError, ValueError):
        page = 1
    return {
        "page": max(page, 1),
        "per_page": normalize_per_page(source.get("per_page") or DEFAULT_PER_PAGE),
        "sort_by": sort_by,
        "order_by": order_by,
        "search": str(source.get("search") or "").strip(),
    }


def _redirect_to_list(request: Request, state: Mapping[str, Any], notice: str, level: str, **extra) -> RedirectResponse:
    params = {k: v for k, v in state.items() if k in STATE_KEYS and v not in (None, "")}
    params.update({"notice": notice, "level": level})
    params.update(extra)
    url = request.url_for("inventory_list").include_query_params(**params)
    return RedirectResponse(str(url), status_code=303)


def _notice(request: Request):
    notice = request.query_params.get("notice")
    if not notice:
        return None
    level = request.query_params.get("level", "info")
    return {"message": notice, "level": level if level in NOTICE_LEVELS else "info"}


@router.get("/", name="inventory_list")
def inventory_list(
    request: Request,
    db: Session = Depends(get_db),
    config: InventoryConfig = Depends(get_inventory_config),
):
    state = _list_state(request.query_params)
    query = schemas.ListQuery(
        limit=state["per_page"],
        offset=(state["page"] - 1) * state["per_page"],
        sort_by=[state["sort_by"]],
        order_by=state["order_by"],
        filter=state["search"] or None,
    )
    notice = _notice(request)
    status_code = 200
    try:
        paged = service.list_items(db, query, config)
        pages = PageState.build(state["page"], state["per_page"], paged.paging.total)
        if pages.current_page != state["page"]:
            # Requested page is past the end (e.g. after deletions); show the last one.
            state["page"] = pages.current_page
            query = query.model_copy(update={"offset": pages.offset})
            paged = service.list_items(db, query, config)
        items = paged.items
    except RuntimeError as exc:
        logger.error("Error loading inventory items: %s", exc)
        items = []
        pages = PageState.build(1, state["per_page"], 0)
        notice = {"message": "Error loading inventory items", "level": "error"}
        status_code = 500

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "items": items,
            "pages": pages,
            "state": state,
            "sort_choices": SORT_CHOICES,
            "per_page_options": PER_PAGE_OPTIONS,
            "currency_choices": formatting.CURRENCY_CHOICES,
            "default_currency": config.currency,
            "delete_enabled": item_delete_enabled(),
            "active_tab": "add" if request.query_params.get("tab") == "add" else "list",
            "notice": notice,
        },
        status_code=status_code,
    )


@router.get("/items/{item_id}", name="inventory_detail")
def inventory_detail(request: Request, item_id: str, db: Session = Depends(get_db)):
    try:
        item = service.get_item(db, item_id)
    except service.ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    return templates.TemplateResponse(
        request,
        "detail.html",
        {"item": item, "state": _list_state(request.query_params), "delete_enabled": item_delete_enabled()},
    )


@router.post("/items", name="inventory_add")
async def inventory_add(
    request: Request,
    db: Session = Depends(get_db),
    config: InventoryConfig = Depends(get_inventory_config),
):
    form = await request.form()
    state = _list_state(form)
    try:
        values = parse_item_form(form, default_currency=config.currency)
        payload = schemas.InventoryItemCreate(**values)
    except FormError as exc:
        return _redirect_to_list(request, state, str(exc), "error", tab="add")
    except ValidationError as exc:
        logger.warning("Rejected new item form: %s", exc.errors(include_url=False, include_context=False))
        return _redirect_to_list(request, state, "Error adding item: name is required", "error", tab="add")
    try:
        await run_in_threadpool(service.add_item, db, payload, config)
    except RuntimeError as exc:
        logger.error("Error adding item: %s", exc)
        return _redirect_to_list(request, state, "Error adding item", "error", tab="add")
    return _redirect_to_list(request, state, "Item added successfully", "success")


@router.get("/items/{item_id}/edit", name="inventory_edit_form")
def inventory_edit_form(
    request: Request,
    item_id: str,
    db: Session = Depends(get_db),
    config: InventoryConfig = Depends(get_inventory_config),
):
    try:
        item = service.get_item(db, item_id)
    except service.ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    return templates.TemplateResponse(
        request,
        "edit.html",
        {
            "item": item,
            "state": _list_state(request.query_params),
            "currency_choices": formatting.CURRENCY_CHOICES,
            "default_currency": config.currency,
            "error": None,
        },
    )


@router.post("/items/{item_id}/edit", name="inventory_edit")
async def inventory_edit(
    request: Request,
    item_id: str,
    db: Session = Depends(get_db),
    config: InventoryConfig = Depends(get_inventory_config),
):
    form = await request.form()
    state = _list_state(form)
    try:
        original = await run_in_threadpool(service.get_item, db, item_id)
    except service.ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")

    try:
        submitted = parse_item_form(form, default_currency=config.currency)
    except FormError as exc:
        return templates.TemplateResponse(
            request,
            "edit.html",
            {
                "item": original,
                "state": state,
                "currency_choices": formatting.CURRENCY_CHOICES,
                "default_currency": config.currency,
                "error": str(exc),
            },
            status_code=422,
        )

    changes = changed_fields(original, submitted, default_currency=config.currency)
    if not changes:
        return _redirect_to_list(request, state, "No fields were changed", "info")

    try:
        await run_in_threadpool(service.edit_item, db, item_id, schemas.InventoryItemUpdate(**changes))
    except (service.InventoryError, RuntimeError, ValidationError) as exc:
        logger.error("Error editing item %s: %s", item_id, exc)
        return _redirect_to_list(request, state, "Error updating item", "error")
    return _redirect_to_list(request, state, "Item updated successfully", "success")


@router.post("/items/{item_id}/delete", name="inventory_delete")
async def inventory_delete(request: Request, item_id: str, db: Session = Depends(get_db)):
    if not item_delete_enabled():
        raise HTTPException(status_code=404, detail="Not Found")
    form = await request.form()
    state = _list_state(form)
    try:
        await run_in_threadpool(service.remove_item, db, item_id)
    except service.ItemNotFoundError:
        return _redirect_to_list(request, state, "Item not found", "error")
    except RuntimeError as exc:
        logger.error("Error removing item %s: %s", item_id, exc)
        return _redirect_to_list(request, state, "Error removing item", "error")
    return _redirect_to_list(request, state, "Item removed successfully", "success")
