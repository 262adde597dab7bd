"""Command-line interface for the inventory manager.

Usage:
  inventory-manager list [--short] [--json] [--all] [--limit N] [--offset N]
                         [--sort-by name,acquired_date] [--order-by asc|desc]
                         [--filter REGEX] [--fields name,notes]
  inventory-manager add NAME | add -i | add --input JSON [--json]
  inventory-manager remove ID [--json]
  inventory-manager edit ID --input JSON [--json]
  inventory-manager serve [--host HOST] [--port PORT] [--reload]

Exit code is 1 when the requested item does not exist or the input is invalid.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Callable, List, Optional

from pydantic import ValidationError

from inventory.config import get_config
from inventory.db import database, models, schemas
from inventory.services import inventory as service

logger = logging.getLogger("inventory.cli")


def _csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inventory-manager", description="Manage inventory items")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List inventory items")
    detail = p_list.add_mutually_exclusive_group()
    detail.add_argument("-s", "--short", action="store_true", help="Display only ID, Name and Acquired Date")
    detail.add_argument("--long", action="store_true", help="Display all item details (default)")
    p_list.add_argument("--json", action="store_true", help="Output in JSON format")
    p_list.add_argument("--all", action="store_true", help="Return all results without paging")
    p_list.add_argument("--limit", type=int, help="Number of items per page")
    p_list.add_argument("--offset", type=int, help="Number of items to skip")
    p_list.add_argument("--order-by", choices=["asc", "desc"], help="Sort direction")
    p_list.add_argument("--sort-by", type=_csv, help="Comma-separated fields to sort by, in priority order")
    p_list.add_argument("--filter", help="Regular expression to filter results by")
    p_list.add_argument("--fields", type=_csv, help="Comma-separated fields to filter on")

    p_add = sub.add_parser("add", help="Add a new inventory item")
    p_add.add_argument("name", nargs="?", help="Name of the item")
    p_add.add_argument("-i", "--interactive", action="store_true", help="Prompt for all fields")
    p_add.add_argument("--input", help="JSON string containing item details")
    p_add.add_argument("--json", action="store_true", help="Output in JSON format")

    p_remove = sub.add_parser("remove", help="Remove an inventory item by ID")
    p_remove.add_argument("id", help="ID of the item to remove")
    p_remove.add_argument("--json", action="store_true", help="Output in JSON format")

    p_edit = sub.add_parser("edit", help="Edit an existing inventory item")
    p_edit.add_argument("id", help="ID of the item to edit")
    p_edit.add_argument("--input", required=True, help="JSON string containing fields to update")
    p_edit.add_argument("--json", action="store_true", help="Output in JSON format")

    p_serve = sub.add_parser("serve", help="Run the web UI and API")
    p_serve.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    p_serve.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    p_serve.add_argument("--reload", action="store_true")
    return parser


def _print_json(model) -> None:
    print(json.dumps(model.model_dump(mode="json") if hasattr(model, "model_dump") else model, indent=2))


def _print_range(paging: schemas.PagingInfo) -> None:
    if paging.total > 0:
        if paging.limit is not None:
            start = (paging.offset or 0) + 1
            end = min(start + paging.limit - 1, paging.total)
            print(f"Showing items {start}-{end} of {paging.total}")
        else:
            print(f"Showing all {paging.total} items")
    else:
        print("No items found")


def print_short_inventory(items, paging: schemas.PagingInfo) -> None:
    print(f"{'ID':<36} | {'Name':<30} | {'Acquired Date':<10}")
    print(f"{'':-<36}-+-{'':-<30}-+-{'':-<10}")
    _print_range(paging)
    for item in items:
        date_str = item.acquired_date.isoformat() if item.acquired_date else "N/A"
        print(f"{item.id:<36} | {item.name:<30} | {date_str:<10}")


def print_long_inventory(paged: schemas.PagedInventoryItems) -> None:
    _print_range(paged.paging)
    print()
    for item in paged.items:
        print(f"ID: {item.id}")
        print(f"Name: {item.name}")
        if item.acquired_date:
            print(f"Acquired Date: {item.acquired_date.isoformat()}")
        if item.purchase_price is not None:
            print(f"Purchase Price: {item.purchase_price}")
        if item.purchase_currency:
            print(f"Purchase Currency: {item.purchase_currency}")
        print(f"Is Used: {str(bool(item.is_used)).lower()}")
        for label, value in (
            ("Received From", item.received_from),
            ("Model Number", item.model_number),
            ("Serial Number", item.serial_number),
            ("Purchase Reference", item.purchase_reference),
            ("Notes", item.notes),
            ("Extra", item.extra),
        ):
            if value:
                print(f"{label}: {value}")
        print(f"Future Purchase: {str(bool(item.future_purchase)).lower()}")
        print("-" * 40)


def prompt_input(
    prompt: str,
    default: Optional[str] = None,
    required: bool = False,
    input_fn: Callable[[str], str] = input,
) -> str:
    """Ask until a value is given; an empty answer takes the default when there is one."""
    text = prompt
    if default is not None:
        text += f" [{default}]"
    text += ":"
    if required:
        text += " (required)"
    text += " "
    while True:
        answer = input_fn(text).strip()
        if answer:
            return answer
        if default is not None:
            return default
        if not required:
            return ""
        print("This field is required. Please provide a value.")


def collect_interactive_item(default_currency: str, input_fn: Callable[[str], str] = input) -> schemas.InventoryItemCreate:
    name = prompt_input("Name of item", None, True, input_fn)
    acquired_date = prompt_input("Date of purchase (YYYY-MM-DD)", models.today_iso(), False, input_fn)
    price_str = prompt_input("Purchase price (leave empty if unknown)", None, False, input_fn)
    try:
        purchase_price = int(price_str) if price_str else None
    except ValueError:
        logger.warning("Ignoring non-numeric purchase price %r", price_str)
        purchase_price = None
    currency = prompt_input("Purchase currency", default_currency, False, input_fn)
    is_used = prompt_input("Is this a used item? (y/n)", "n", False, input_fn).lower().startswith("y")
    received_from = prompt_input("Received from", None, False, input_fn)
    model_number = prompt_input("Model number", None, False, input_fn)
    serial_number = prompt_input("Serial number", None, False, input_fn)
    purchase_reference = prompt_input("Purchase reference", None, False, input_fn)
    notes = prompt_input("Notes", None, False, input_fn)
    extra = prompt_input("Extra information", None, False, input_fn)
    future_purchase = prompt_input("Is this a future purchase? (y/n)", "n", False, input_fn).lower().startswith("y")
    return schemas.InventoryItemCreate(
        name=name,
        acquired_date=acquired_date or None,
        purchase_price=purchase_price,
        purchase_currency=currency or None,
        is_used=is_used,
        received_from=received_from or None,
        model_number=model_number or None,
        serial_number=serial_number or None,
        purchase_reference=purchase_reference or None,
        notes=notes or None,
        extra=extra or None,
        future_purchase=future_purchase,
    )


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def cmd_list(args, db) -> int:
    try:
        query = schemas.ListQuery(
            limit=args.limit,
            offset=args.offset,
            sort_by=args.sort_by,
            order_by=args.order_by,
            filter=args.filter,
            fields=args.fields,
            all=args.all,
        )
    except ValidationError as exc:
        return _fail(f"Invalid list options: {exc}")
    try:
        if args.short:
            items, paging = service.list_short_items(db, query)
            if args.json:
                _print_json({"items": [i.model_dump(mode="json") for i in items], "paging": paging.model_dump()})
            else:
                print_short_inventory(items, paging)
            return 0
        paged = service.list_items(db, query)
    except service.InvalidQueryError as exc:
        return _fail(str(exc))
    if args.json:
        _print_json(paged)
    else:
        print_long_inventory(paged)
    return 0


def cmd_add(args, db, input_fn: Callable[[str], str] = input) -> int:
    config = get_config()
    try:
        if args.interactive:
            payload = collect_interactive_item(config.currency, input_fn)
        elif args.input:
            payload = schemas.InventoryItemCreate.model_validate_json(args.input)
        elif args.name:
            payload = None
        else:
            return _fail("A name, --interactive or --input is required")
    except ValidationError as exc:
        return _fail(f"Invalid item: {exc}")
    if payload is None:
        try:
            created = service.add_named_item(db, args.name, config)
        except ValidationError as exc:
            return _fail(f"Invalid item: {exc}")
    else:
        created = service.add_item(db, payload, config)
    if args.json:
        _print_json(created)
    else:
        print("Added new inventory item:")
        print(f"ID: {created.id}")
        print(f"Name: {created.name}")
        print(f"Acquired Date: {created.acquired_date.isoformat() if created.acquired_date else 'N/A'}")
    return 0


def cmd_remove(args, db) -> int:
    try:
        result = service.remove_item(db, args.id)
    except (service.ItemNotFoundError, service.InvalidItemIdError) as exc:
        result = schemas.RemovalResult(success=False, item_id=args.id, item_name=None, message=str(exc))
    if args.json:
        _print_json(result)
    elif result.success:
        print(result.message)
    else:
        print(result.message, file=sys.stderr)
    return 0 if result.success else 1


def cmd_edit(args, db) -> int:
    try:
        update = schemas.InventoryItemUpdate.model_validate_json(args.input)
    except ValidationError as exc:
        return _fail(f"Invalid update: {exc}")
    try:
        result = service.edit_item(db, args.id, update)
    except (service.ItemNotFoundError, service.NothingToUpdateError) as exc:
        result = schemas.EditResult(success=False, item_id=args.id, message=str(exc))
    if args.json:
        _print_json(result)
    elif result.success:
        print(result.message)
    else:
        print(result.message, file=sys.stderr)
    return 0 if result.success else 1


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("inventory.api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.WARNING))

    if args.command == "serve":
        return cmd_serve(args)

    db = database.open_session()
    try:
        if args.command == "list":
            return cmd_list(args, db)
        if args.command == "add":
            return cmd_add(args, db)
        if args.command == "remove":
            return cmd_remove(args, db)
        if args.command == "edit":
            return cmd_edit(args, db)
    except RuntimeError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return _fail(str(exc))
    finally:
        db.close()
    return 2


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
