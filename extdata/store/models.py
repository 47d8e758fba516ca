"""Record entities backed by SQLite tables.

Subclasses of Record register themselves as entities under their
underscored class name (``LineItem`` -> ``line_item``), which is how grids
and trees find their default record source from their own name.
"""

import logging
import types
import typing
from datetime import date, datetime
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from extdata.naming import camelize, pluralize, singularize, underscore
from extdata.store.db import Database, get_database
from extdata.store.source import QuerySource

logger = logging.getLogger(__name__)

_entities: dict[str, type["Record"]] = {}

_SQL_TYPES = {
    int: "INTEGER",
    bool: "INTEGER",
    float: "REAL",
    str: "TEXT",
    datetime: "TEXT",
    date: "TEXT",
}


def _sql_type(annotation: Any) -> str:
    """Map a field annotation (optionally Optional[...]) to a SQLite type."""
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        annotation = args[0] if len(args) == 1 else str
    return _SQL_TYPES.get(annotation, "TEXT")


class Record(BaseModel):
    """Base class for entities stored in the record database.

    Example:
        class Item(Record):
            name: Optional[str] = None
            value: Optional[float] = None

            @property
            def orders(self):
                return Order.where(item_id=self.id)
    """

    model_config = ConfigDict(extra="ignore")

    table_name: ClassVar[Optional[str]] = None
    database: ClassVar[Optional[Database]] = None

    id: Optional[int] = None

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        key = underscore(cls.__name__)
        if key in _entities and _entities[key] is not cls:
            logger.debug(f"Entity '{key}' re-registered by {cls.__module__}")
        _entities[key] = cls

    @classmethod
    def entity_key(cls) -> str:
        return underscore(cls.__name__)

    @classmethod
    def table(cls) -> str:
        return cls.table_name or pluralize(cls.entity_key())

    @classmethod
    def db(cls) -> Database:
        return cls.database or get_database()

    @classmethod
    def create_table(cls, drop: bool = False) -> None:
        """Create the entity table from the model fields."""
        columns = []
        for name, info in cls.model_fields.items():
            if name == "id":
                columns.append("id INTEGER PRIMARY KEY AUTOINCREMENT")
            else:
                columns.append(f"{name} {_sql_type(info.annotation)}")
        if drop:
            cls.db().execute(f"DROP TABLE IF EXISTS {cls.table()}")
        cls.db().execute(
            f"CREATE TABLE IF NOT EXISTS {cls.table()} ({', '.join(columns)})"
        )
        logger.debug(f"Created table {cls.table()} for entity {cls.__name__}")

    @classmethod
    def from_row(cls, row: dict) -> "Record":
        return cls.model_validate(row)

    @classmethod
    def query(cls) -> QuerySource:
        """All records of this entity, as a lazy source."""
        return QuerySource(entity=cls, database=cls.database)

    @classmethod
    def all(cls) -> QuerySource:
        return cls.query()

    @classmethod
    def where(cls, **equals: Any) -> QuerySource:
        return cls.query().filter(equals)

    @classmethod
    def find(cls, id: Any) -> Optional["Record"]:
        return cls.query().fetch_by_id(id)

    @classmethod
    def create(cls, **fields: Any) -> "Record":
        record = cls(**fields)
        record.save()
        return record

    def save(self) -> "Record":
        """Insert or update this record."""
        values = self.model_dump(mode="json", exclude={"id"})
        names = list(values.keys())
        db = self.db()
        if self.id is None:
            placeholders = ", ".join(["%s"] * len(names))
            self.id = db.execute(
                f"INSERT INTO {self.table()} ({', '.join(names)}) VALUES ({placeholders})",
                tuple(values[n] for n in names),
                fetch="lastrowid",
            )
        else:
            assignments = ", ".join(f"{n} = %s" for n in names)
            db.execute(
                f"UPDATE {self.table()} SET {assignments} WHERE id = %s",
                tuple(values[n] for n in names) + (self.id,),
            )
        return self


def lookup_entity(name: str) -> type[Record]:
    """Find an entity class by name.

    Accepts entity keys, plural table-style names and class names:
    ``item``, ``items`` and ``Item`` all resolve to the Item entity.
    """
    key = underscore(str(name))
    for candidate in (key, singularize(key)):
        if candidate in _entities:
            return _entities[candidate]
    available = sorted(_entities.keys())
    raise LookupError(
        f"Unknown entity: {name} ({camelize(singularize(key))}). Available: {available}"
    )


def list_entities() -> list[str]:
    return sorted(_entities.keys())
