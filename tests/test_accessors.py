from types import SimpleNamespace

import pytest

from extdata.accessors import Attribute, BoundMethod, Computed, Literal, as_accessor, resolve
from extdata.context import RequestContext


class Widget:
    name = "gear"

    def describe(self):
        return f"a {self.name}"

    def label_for(self, record):
        return record.name.title()


def test_as_accessor_coercion():
    widget = Widget()
    assert as_accessor("name") == Attribute("name")
    assert isinstance(as_accessor(widget.label_for), BoundMethod)
    assert isinstance(as_accessor(lambda r, ctx: 1), Computed)
    assert as_accessor(3) == Literal(3)
    assert as_accessor(Literal("name")) == Literal("name")


def test_resolve_each_kind():
    record = Widget()
    context = RequestContext(params={"x": "1"})
    assert resolve(Attribute("name"), record, context) == "gear"
    assert resolve(Attribute("describe"), record, context) == "a gear"
    assert resolve(Computed(lambda r, ctx: ctx.params["x"] + r.name), record, context) == "1gear"
    assert resolve(BoundMethod(Widget().label_for), record, context) == "Gear"
    assert resolve(Literal("/icon.png"), record, context) == "/icon.png"


def test_resolve_rejects_unknown_accessor():
    with pytest.raises(TypeError):
        resolve("name", SimpleNamespace(name="x"), RequestContext())


def test_context_param_treats_empty_as_absent():
    context = RequestContext(params={"a": "", "b": "2"})
    assert context.param("a") is None
    assert context.param("a", "d") == "d"
    assert context.param("b") == "2"
    assert context.url_for("item_grid_data", 4) == "/item_grid_data?id=4"
