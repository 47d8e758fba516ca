import pytest

from extdata.context import RequestContext
from extdata.store import Database, set_database
from tests.models import Item, Order


@pytest.fixture(autouse=True)
def database(tmp_path):
    """Fresh SQLite database with empty items/orders tables for every test."""
    db = Database(str(tmp_path / "records.db"))
    set_database(db)
    Item.create_table()
    Order.create_table()
    yield db
    set_database(None)


@pytest.fixture
def make_context():
    def make(**params):
        return RequestContext(params=params)

    return make
