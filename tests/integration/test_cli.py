import json

import pytest

from inventory import cli
from inventory.db import database


def _run(capsys, *argv):
    code = cli.main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


def _add_json(capsys, payload):
    code, out, _ = _run(capsys, "add", "--input", json.dumps(payload), "--json")
    assert code == 0
    return json.loads(out)


def test_add_by_name(capsys):
    code, out, _ = _run(capsys, "add", "Bicycle")
    assert code == 0
    assert out.startswith("Added new inventory item:")
    assert "Name: Bicycle" in out


def test_add_from_json_input(capsys):
    created = _add_json(capsys, {"name": "Lamp", "purchase_price": 10, "acquired_date": "2020-01-02"})
    assert created["name"] == "Lamp"
    assert created["acquired_date"] == "2020-01-02"
    assert created["id"]


def test_add_requires_something(capsys):
    code, _, err = _run(capsys, "add")
    assert code == 1
    assert "required" in err


def test_add_rejects_invalid_json_item(capsys):
    code, _, err = _run(capsys, "add", "--input", '{"name": "Lamp", "colour": "red"}')
    assert code == 1
    assert "Invalid item" in err


def test_list_long_output(capsys):
    _add_json(capsys, {"name": "Lamp", "purchase_price": 10, "notes": "desk"})
    code, out, _ = _run(capsys, "list")
    assert code == 0
    assert "Showing all 1 items" in out
    assert "Name: Lamp" in out
    assert "Purchase Price: 10" in out
    assert "Notes: desk" in out
    assert "Is Used: false" in out


def test_list_short_with_paging(capsys):
    for name in ("A", "B", "C"):
        _add_json(capsys, {"name": name, "acquired_date": "2021-01-01"})
    code, out, _ = _run(capsys, "list", "--short", "--limit", "1", "--offset", "1")
    assert code == 0
    assert "Showing items 2-2 of 3" in out
    lines = [line for line in out.splitlines() if "| B" in line]
    assert lines and "2021-01-01" in lines[0]


def test_list_json(capsys):
    _add_json(capsys, {"name": "Lamp"})
    code, out, _ = _run(capsys, "list", "--json", "--filter", "^La")
    assert code == 0
    body = json.loads(out)
    assert body["paging"]["total"] == 1
    assert body["items"][0]["name"] == "Lamp"


def test_list_empty(capsys):
    code, out, _ = _run(capsys, "list", "--short")
    assert code == 0
    assert "No items found" in out


@pytest.mark.parametrize("argv", [["--limit", "-1"], ["--sort-by", "colour"]])
def test_list_bad_options(capsys, argv):
    code, _, err = _run(capsys, "list", *argv)
    assert code == 1
    assert err


def test_edit_and_remove(capsys):
    created = _add_json(capsys, {"name": "Lamp"})

    code, out, _ = _run(capsys, "edit", created["id"], "--input", '{"notes": "moved"}')
    assert code == 0
    assert out.strip() == f"Successfully updated item with ID: {created['id']}"

    code, out, _ = _run(capsys, "remove", created["id"], "--json")
    assert code == 0
    assert json.loads(out)["item_name"] == "Lamp"


def test_edit_nothing_to_update(capsys):
    created = _add_json(capsys, {"name": "Lamp"})
    code, _, err = _run(capsys, "edit", created["id"], "--input", "{}")
    assert code == 1
    assert "No fields to update" in err


def test_remove_missing(capsys):
    code, _, err = _run(capsys, "remove", "ghost")
    assert code == 1
    assert err.strip() == "No item found with ID: ghost"


def test_prompt_input_repeats_until_required_value():
    answers = iter(["", "  ", "Tent"])
    assert cli.prompt_input("Name", required=True, input_fn=lambda _: next(answers)) == "Tent"


def test_prompt_input_uses_default():
    assert cli.prompt_input("Currency", "JPY", input_fn=lambda _: "") == "JPY"


def test_collect_interactive_item():
    answers = iter([
        "Tent",          # name
        "2022-07-04",    # date
        "12000",         # price
        "",              # currency -> default
        "y",             # used
        "Outdoor Shop",  # received from
        "",              # model
        "",              # serial
        "",              # reference
        "Blue",          # notes
        "",              # extra
        "",              # future purchase -> n
    ])
    item = cli.collect_interactive_item("USD", input_fn=lambda _: next(answers))
    assert item.name == "Tent"
    assert item.acquired_date.isoformat() == "2022-07-04"
    assert item.purchase_price == 12000
    assert item.purchase_currency == "USD"
    assert item.is_used is True
    assert item.received_from == "Outdoor Shop"
    assert item.model_number is None
    assert item.notes == "Blue"
    assert item.future_purchase is False


@pytest.mark.parametrize("argv", [("list",), ("list", "--short"), ("list", "--json")])
def test_list_storage_failure(capsys, monkeypatch, failing_session, argv):
    monkeypatch.setattr(database, "open_session", lambda: failing_session)

    code, out, err = _run(capsys, *argv)
    assert code == 1
    assert out == ""
    assert "Failed to list inventory items" in err
    assert "Traceback" not in err
