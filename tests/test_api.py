"""HTTP-level tests: the endpoints each registered grid and tree exposes."""

import pytest
from fastapi.testclient import TestClient

from extdata.api.main import create_app
from extdata.registry import RenderRegistry
from tests.models import Item, Order


@pytest.fixture
def client():
    registry = RenderRegistry()
    registry.grid("item", lambda g: g.column("name"))
    registry.grid("item_custom_scope", lambda g: g.column("name"), scope=lambda ctx: Item.where(value=5))

    def order_grid(g):
        g.delegate_to("item", exclude=["quantity"])
        g.column("name")
        g.column("quantity")

    registry.grid("order", order_grid)

    def item_tree(t):
        t.node("item", text="name", children="orders")
        t.node("order", text="quantity")

    registry.tree("item", item_tree)
    with TestClient(create_app(registry)) as client:
        yield client


def get_json(client, path, **params):
    response = client.get(path, params=params)
    assert response.status_code == 200, response.text
    return response.json()


def test_routes_are_registered(client):
    paths = {route.path for route in client.app.routes}
    assert {"/item_grid_metadata", "/item_grid_data", "/item_tree_data"} <= paths


def test_grid_metadata(client):
    assert get_json(client, "/item_grid_metadata") == {
        "column_model": [{"header": "Name", "sortable": True, "dataIndex": "name", "width": 100}],
        "column_mappings": [{"name": "name", "mapping": "name"}],
        "data_url": "http://testserver/item_grid_data",
    }


def test_grid_metadata_with_id(client):
    md = get_json(client, "/item_grid_metadata", id="12")
    assert md["data_url"] == "http://testserver/item_grid_data?id=12"


def test_grid_data_without_records(client):
    assert get_json(client, "/item_grid_data") == {"records": [], "total": 0}


def test_grid_data(client):
    Item.create(name="Hello1")
    Item.create(name="Hello2")
    assert get_json(client, "/item_grid_data") == {
        "records": [{"name": "Hello1", "id": "1"}, {"name": "Hello2", "id": "2"}],
        "total": 2,
    }


def test_grid_paging_and_sorting(client):
    for idx in range(1, 6):
        Item.create(name=f"Item{idx}")
    response = get_json(client, "/item_grid_data", start=2, limit=2)
    assert response["total"] == 5
    assert [x["name"] for x in response["records"]] == ["Item3", "Item4"]

    response = get_json(client, "/item_grid_data", sort="name", dir="DESC", limit=2)
    assert [x["name"] for x in response["records"]] == ["Item5", "Item4"]


def test_grid_bad_params_do_not_fail(client):
    Item.create(name="Hello")
    response = get_json(client, "/item_grid_data", sort="foo", start="x", limit="y")
    assert response["total"] == 1


def test_custom_scope_grid(client):
    Item.create(name="Item1", value=5)
    Item.create(name="Item2", value=6)
    response = get_json(client, "/item_custom_scope_grid_data")
    assert [x["name"] for x in response["records"]] == ["Item1"]


def test_delegated_grid(client):
    item = Item.create(name="Item1")
    Order.create(item_id=item.id, quantity=2)
    Order.create(item_id=item.id, quantity=3)
    assert get_json(client, "/order_grid_data") == {
        "total": 2,
        "records": [
            {"name": "Item1", "quantity": 2, "id": "1"},
            {"name": "Item1", "quantity": 3, "id": "2"},
        ],
    }


def test_tree_without_node(client):
    assert get_json(client, "/item_tree_data") == []


def test_tree_levels(client):
    item1 = Item.create(name="Hello")
    Order.create(item_id=item1.id, quantity=3)
    item2 = Item.create(name="Howdy")
    Order.create(item_id=item2.id, quantity=2)

    roots = get_json(client, "/item_tree_data", node="root")
    assert [x["text"] for x in roots] == ["Hello", "Howdy"]
    secondaries = [
        node for root in roots for node in get_json(client, "/item_tree_data", node=root["id"])
    ]
    assert [x["text"] for x in secondaries] == ["3", "2"]


def test_tree_malformed_node_is_client_error(client):
    response = client.get("/item_tree_data", params={"node": "nonsense"})
    assert response.status_code == 400
    assert "nonsense" in response.json()["detail"]


def test_root_and_health(client):
    info = get_json(client, "/")
    assert info["grids"] == ["item", "item_custom_scope", "order"]
    assert "GET /item_tree_data" in info["endpoints"]
    assert get_json(client, "/health") == {"status": "healthy", "grids_loaded": 3, "trees_loaded": 1}


@pytest.mark.parametrize("path", ["/nope_grid_data", "/nope_grid_metadata"])
def test_unknown_grid_is_not_found(client, path):
    response = client.get(path)
    assert response.status_code == 404
    detail = response.json()["detail"]
    assert detail.startswith("Grid not found: nope.")
    assert "'item'" in detail and "'order'" in detail


def test_unknown_tree_is_not_found(client):
    response = client.get("/nope_tree_data", params={"node": "root"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Tree not found: nope. Available: ['item']"


def test_delegated_grid_sort_request(client):
    bravo = Item.create(name="Bravo")
    alpha = Item.create(name="Alpha")
    Order.create(item_id=bravo.id, quantity=5)
    Order.create(item_id=alpha.id, quantity=1)
    response = get_json(client, "/order_grid_data", sort="name", dir="ASC")
    assert [x["name"] for x in response["records"]] == ["Bravo", "Alpha"]
    response = get_json(client, "/order_grid_data", sort="quantity", dir="ASC")
    assert [x["name"] for x in response["records"]] == ["Alpha", "Bravo"]


def test_grid_data_params_in_openapi_schema(client):
    paths = client.app.openapi()["paths"]
    params = {p["name"] for p in paths["/item_grid_data"]["get"]["parameters"]}
    assert {"sort", "dir", "start", "limit"} <= params
    assert "/{name}_grid_data" not in paths
