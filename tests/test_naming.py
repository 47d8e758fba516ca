from extdata.naming import camelize, humanize, pluralize, singularize, underscore


def test_underscore_and_camelize():
    assert underscore("Item") == "item"
    assert underscore("LineItem") == "line_item"
    assert underscore("HTTPServer") == "http_server"
    assert camelize("line_item") == "LineItem"


def test_humanize():
    assert humanize("name") == "Name"
    assert humanize("unit_price") == "Unit price"
    assert humanize("item_id") == "Item"


def test_pluralize():
    assert pluralize("item") == "items"
    assert pluralize("category") == "categories"
    assert pluralize("box") == "boxes"
    assert pluralize("line_item") == "line_items"
    assert pluralize("person") == "people"


def test_singularize():
    assert singularize("items") == "item"
    assert singularize("categories") == "category"
    assert singularize("boxes") == "box"
    assert singularize("people") == "person"
    assert singularize("item") == "item"
    assert singularize("address") == "address"
