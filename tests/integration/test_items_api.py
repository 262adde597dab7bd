import json

import pytest


def _add(client, name, **fields):
    r = client.post("/api/items/add", json={"name": name, **fields})
    assert r.status_code == 200, r.text
    return r.json()["output"]


@pytest.fixture
def three_items(client):
    return [
        _add(client, "Banana Stand", acquired_date="2023-06-01", purchase_price=1200),
        _add(client, "Apple Crate", acquired_date="2024-02-10", purchase_price=800),
        _add(client, "Cherry Pitter", acquired_date="2022-11-30", purchase_price=2500, notes="gift"),
    ]


def test_add_item_envelope(client):
    r = client.post("/api/items/add", json={"name": "Widget", "purchase_price": 1200, "acquired_date": "2024-05-01"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Item added successfully"
    assert body["output"]["name"] == "Widget"
    assert body["output"]["acquired_date"] == "2024-05-01"
    assert body["output"]["id"]


@pytest.mark.parametrize(
    "payload",
    [
        {"name": ""},
        {"name": "   "},
        {"purchase_price": 5},
        {"name": "Widget", "colour": "red"},
        {"name": "Widget", "purchase_price": 12.5},
        {"name": "Widget", "acquired_date": "yesterday"},
    ],
)
def test_add_item_validation(client, payload):
    r = client.post("/api/items/add", json=payload)
    assert r.status_code == 422


def test_list_items_sorted_by_name_by_default(client, three_items):
    r = client.get("/api/items")
    assert r.status_code == 200
    body = r.json()
    assert [i["name"] for i in body["items"]] == ["Apple Crate", "Banana Stand", "Cherry Pitter"]
    assert body["paging"] == {"limit": None, "offset": None, "total": 3}


def test_list_items_paging_and_sort(client, three_items):
    r = client.get("/api/items", params={"limit": 2, "offset": 1, "sortBy": "purchase_price", "orderBy": "DESC"})
    assert r.status_code == 200
    body = r.json()
    assert [i["name"] for i in body["items"]] == ["Banana Stand", "Apple Crate"]
    assert body["paging"] == {"limit": 2, "offset": 1, "total": 3}


def test_list_uses_configured_page_limit(client, three_items, monkeypatch, tmp_path):
    from inventory.config import refresh_config_cache

    path = tmp_path / "inventory.json"
    path.write_text(json.dumps({"default_page_limit": 1}), encoding="utf-8")
    monkeypatch.setenv("INVENTORY_CONFIG", str(path))
    refresh_config_cache()

    body = client.get("/api/items").json()
    assert len(body["items"]) == 1
    assert body["paging"]["limit"] == 1
    assert body["paging"]["total"] == 3


def test_search_filters_by_regex(client, three_items):
    r = client.get("/api/items/search", params={"filter": "^(Apple|Cherry)"})
    assert r.status_code == 200
    assert [i["name"] for i in r.json()["items"]] == ["Apple Crate", "Cherry Pitter"]


def test_search_in_selected_fields(client, three_items):
    r = client.get("/api/items/search", params={"filter": "gift", "fields": "notes,Name"})
    body = r.json()
    assert body["paging"]["total"] == 1
    assert body["items"][0]["name"] == "Cherry Pitter"


def test_invalid_regex_returns_everything(client, three_items):
    r = client.get("/api/items/search", params={"filter": "[oops"})
    assert r.status_code == 200
    assert r.json()["paging"]["total"] == 3


@pytest.mark.parametrize(
    "params",
    [
        {"sortBy": "colour"},
        {"orderBy": "sideways"},
        {"limit": -1},
        {"offset": -5},
        {"filter": "x", "fields": "is_used"},
    ],
)
def test_list_rejects_bad_query(client, three_items, params):
    r = client.get("/api/items", params=params)
    assert r.status_code == 422


def test_get_item(client, three_items):
    item_id = three_items[0]["id"]
    r = client.get(f"/api/items/{item_id}")
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Banana Stand"
    assert body["purchase_currency"] == "JPY"
    assert body["is_used"] is False


def test_get_missing_item(client):
    r = client.get("/api/items/does-not-exist")
    assert r.status_code == 404
    assert r.json()["detail"] == "Item not found"


def test_edit_item(client, three_items):
    item_id = three_items[0]["id"]
    r = client.post(f"/api/items/edit/{item_id}", json={"id": item_id, "notes": "sold soon", "is_used": True})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Item edited successfully"
    assert body["output"]["success"] is True

    item = client.get(f"/api/items/{item_id}").json()
    assert item["notes"] == "sold soon"
    assert item["is_used"] is True
    assert item["name"] == "Banana Stand"


def test_edit_clears_field_with_null(client, three_items):
    item_id = three_items[2]["id"]
    assert client.post(f"/api/items/edit/{item_id}", json={"notes": None}).status_code == 200
    assert client.get(f"/api/items/{item_id}").json()["notes"] is None


def test_edit_missing_item(client):
    r = client.post("/api/items/edit/ghost", json={"notes": "x"})
    assert r.status_code == 404


def test_edit_with_nothing_to_update(client, three_items):
    r = client.post(f"/api/items/edit/{three_items[0]['id']}", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "No fields to update"


def test_remove_item(client, three_items):
    item_id = three_items[1]["id"]
    r = client.post("/api/items/remove", json={"id": item_id})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Item removed successfully"
    assert body["output"]["item_name"] == "Apple Crate"
    assert client.get(f"/api/items/{item_id}").status_code == 404
    assert client.get("/api/items").json()["paging"]["total"] == 2


@pytest.mark.parametrize("payload", [{"id": 5}, {"id": ""}, {}])
def test_remove_requires_string_id(client, payload):
    r = client.post("/api/items/remove", json=payload)
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid ID"


def test_remove_missing_item(client):
    r = client.post("/api/items/remove", json={"id": "ghost"})
    assert r.status_code == 404


def test_list_storage_failure_is_500(broken_storage, caplog):
    r = broken_storage.get("/api/items")
    assert r.status_code == 500
    assert r.json()["detail"] == "Error loading inventory items"
    assert "Failed to list items" in caplog.text

    r = broken_storage.get("/api/items/search", params={"filter": "lamp"})
    assert r.status_code == 500


def test_get_item_storage_failure_is_500(broken_storage):
    r = broken_storage.get("/api/items/some-id")
    assert r.status_code == 500
    assert r.json()["detail"] == "Error loading item"
