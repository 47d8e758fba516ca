"""Tests for the tree engine."""

from types import SimpleNamespace

import pytest

from extdata.accessors import Literal
from extdata.context import RequestContext
from extdata.errors import ConfigurationError, NodeIdError
from extdata.tree import Tree
from tests.models import Item, Order


def configure(t):
    t.node("item", text="name", children="orders")
    t.node("order", text="quantity")


@pytest.fixture(autouse=True)
def records(database):
    item1 = Item.create(name="Hello")
    Order.create(item_id=item1.id, quantity=3)
    item2 = Item.create(name="Howdy")
    Order.create(item_id=item2.id, quantity=2)


@pytest.fixture
def tree():
    return Tree("item", configure)


def expand(tree, node):
    return tree.get_data(RequestContext(params={"node": node}))


def test_no_node_param_returns_nothing(tree):
    assert tree.get_data() == []
    assert tree.get_data(RequestContext(params={"node": ""})) == []


def test_root_nodes(tree):
    roots = expand(tree, "root")
    assert [x["text"] for x in roots] == ["Hello", "Howdy"]
    assert [x["object_id"] for x in roots] == [1, 2]
    assert all(x["object_type"] == "item" for x in roots)
    assert all("leaf" not in x for x in roots)
    assert all("qtip" not in x and "icon" not in x for x in roots)


def test_second_level_nodes(tree):
    roots = expand(tree, "root")
    secondaries = [node for root in roots for node in expand(tree, root["id"])]
    assert [x["text"] for x in secondaries] == ["3", "2"]
    assert all(x["leaf"] is True for x in secondaries)
    assert all(x["object_type"] == "order" for x in secondaries)


def test_leaf_nodes_have_no_children(tree):
    roots = expand(tree, "root")
    order_node = expand(tree, roots[0]["id"])[0]
    assert expand(tree, order_node["id"]) == []


def test_stable_ids():
    tree = Tree("item", configure, stable_ids=True)
    roots = expand(tree, "root")
    assert [x["id"] for x in roots] == ["1-item-1", "2-item-2"]
    assert expand(tree, "root") == roots


def test_ephemeral_ids_are_unique(tree):
    first = [x["id"] for x in expand(tree, "root")]
    second = [x["id"] for x in expand(tree, "root")]
    assert len(set(first + second)) == 4
    assert all(node_id.endswith(f"-item-{n}") for node_id, n in zip(first, [1, 2]))


def test_malformed_node_id(tree):
    with pytest.raises(NodeIdError):
        expand(tree, "garbage")
    with pytest.raises(NodeIdError):
        expand(tree, "1-item")
    with pytest.raises(NodeIdError):
        expand(tree, "1-Not A Type-2")


def test_unknown_node_type_has_no_children(tree):
    assert expand(tree, "1-widget-1") == []


def test_missing_record_has_no_children(tree):
    assert expand(tree, "1-item-999") == []


def test_fallback_spec_uses_class_name():
    roots = expand(Tree("order"), "root")
    assert [x["text"] for x in roots] == ["Order", "Order"]
    assert all(x["leaf"] is True for x in roots)


def test_data_fields_keep_native_types():
    def configure(t):
        t.node("order", text="quantity", data={"qty": "quantity", "kind": Literal("order")})

    roots = expand(Tree("order", configure), "root")
    assert roots[0]["text"] == "3"
    assert roots[0]["qty"] == 3
    assert roots[0]["kind"] == "order"


def test_accessor_kinds():
    class Labels:
        def shout(self, record):
            return record.name.upper()

    def configure(t):
        t.node(
            "item",
            text=Labels().shout,
            qtip=lambda record, ctx: f"{ctx.params['node']}:{record.name}",
            icon=Literal("/icons/item.png"),
        )

    roots = expand(Tree("item", configure), "root")
    assert roots[0]["text"] == "HELLO"
    assert roots[0]["qtip"] == "root:Hello"
    assert roots[0]["icon"] == "/icons/item.png"
    assert roots[0]["leaf"] is True


def test_computed_children():
    def configure(t):
        t.node("item", text="name", children=lambda item, ctx: list(Order.where(item_id=item.id)))
        t.node("order", text="quantity")

    tree = Tree("item", configure, stable_ids=True)
    assert [x["text"] for x in expand(tree, "2-item-2")] == ["2"]


def test_roots_by_entity_name():
    roots = expand(Tree("orders_tree", configure, roots="order"), "root")
    assert [x["text"] for x in roots] == ["3", "2"]


def test_roots_from_source():
    roots = expand(Tree("howdy", configure, roots=Item.where(name="Howdy")), "root")
    assert [x["text"] for x in roots] == ["Howdy"]


def test_roots_factory_receives_context():
    def roots(ctx):
        return [SimpleNamespace(id=9, label=ctx.params["node"])]

    def configure(t):
        t.node("simple_namespace", text="label")

    nodes = expand(Tree("custom", configure, roots=roots, stable_ids=True), "root")
    assert nodes == [
        {
            "id": "9-simple_namespace-9",
            "object_id": 9,
            "object_type": "simple_namespace",
            "leaf": True,
            "text": "root",
        }
    ]


def test_invalid_roots_fails():
    with pytest.raises(ConfigurationError):
        Tree("item", roots=42)


def test_unknown_node_options_are_tolerated():
    tree = Tree("item", lambda t: t.node("item", text="name", colour="red"))
    assert [x["text"] for x in expand(tree, "root")] == ["Hello", "Howdy"]
