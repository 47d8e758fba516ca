"""Entities shared by the test suite."""

from typing import Optional

from extdata.store import Record


class Item(Record):
    name: Optional[str] = None
    description: Optional[str] = None
    value: Optional[float] = None

    @property
    def orders(self):
        return Order.where(item_id=self.id)


class Order(Record):
    item_id: Optional[int] = None
    quantity: Optional[int] = None

    @property
    def item(self):
        return Item.find(self.item_id)
