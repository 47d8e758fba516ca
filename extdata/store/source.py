"""Lazy record sources.

A record source is an immutable description of a query: filtering, ordering
and paging return new sources, and nothing touches storage until count(),
fetch_all() or fetch_by_id() is called. The engines only compose these
operations, they never issue raw queries.

Two implementations ship here:
- QuerySource: SQL over a Record entity table
- ListSource: in-memory sequence of arbitrary objects
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence, runtime_checkable

from extdata.store.db import Database, get_database

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


@runtime_checkable
class RecordSource(Protocol):
    """What the grid and tree engines need from a collection of records."""

    def filter(self, predicate: Any) -> "RecordSource": ...

    def order_by(self, field: str, direction: str = "ASC") -> "RecordSource": ...

    def offset(self, n: int) -> "RecordSource": ...

    def limit(self, n: int) -> "RecordSource": ...

    def count(self) -> int: ...

    def fetch_all(self) -> list: ...

    def fetch_by_id(self, id: Any) -> Any: ...


def normalize_direction(direction: str) -> str:
    """Map a direction string to ASC or DESC (anything but ASC is DESC)."""
    return "ASC" if str(direction).upper() == "ASC" else "DESC"


def check_field(field: str) -> str:
    """Validate an ordering/filter field expression (``name`` or ``table.name``)."""
    if not _FIELD_RE.match(field):
        raise ValueError(f"Invalid field expression: {field!r}")
    return field


@dataclass(frozen=True)
class QuerySource:
    """SQL-backed record source over a Record entity.

    Filters are either a mapping of column equalities or a raw SQL clause
    with %s placeholders passed as ``(clause, params)``.
    """

    entity: type
    conditions: tuple = ()
    params: tuple = ()
    ordering: tuple = ()
    offset_value: Optional[int] = None
    limit_value: Optional[int] = None
    database: Optional[Database] = None

    @property
    def db(self) -> Database:
        return self.database or get_database()

    @property
    def table(self) -> str:
        return self.entity.table()

    def filter(self, predicate: Any) -> "QuerySource":
        if isinstance(predicate, Mapping):
            clauses = []
            values = []
            for key, value in predicate.items():
                column = f"{self.table}.{check_field(key)}"
                if value is None:
                    clauses.append(f"{column} IS NULL")
                else:
                    clauses.append(f"{column} = %s")
                    values.append(value)
            return replace(
                self,
                conditions=self.conditions + tuple(clauses),
                params=self.params + tuple(values),
            )
        clause, values = predicate
        return replace(
            self,
            conditions=self.conditions + (f"({clause})",),
            params=self.params + tuple(values),
        )

    def where(self, **equals: Any) -> "QuerySource":
        return self.filter(equals)

    def order_by(self, field: str, direction: str = "ASC") -> "QuerySource":
        entry = (check_field(field), normalize_direction(direction))
        return replace(self, ordering=self.ordering + (entry,))

    def offset(self, n: int) -> "QuerySource":
        return replace(self, offset_value=max(int(n), 0))

    def limit(self, n: int) -> "QuerySource":
        return replace(self, limit_value=max(int(n), 0))

    def _where_sql(self) -> str:
        if not self.conditions:
            return ""
        return " WHERE " + " AND ".join(self.conditions)

    def _select_sql(self) -> tuple[str, tuple]:
        sql = f"SELECT {self.table}.* FROM {self.table}{self._where_sql()}"
        params = self.params
        if self.ordering:
            sql += " ORDER BY " + ", ".join(f"{f} {d}" for f, d in self.ordering)
        if self.limit_value is not None or self.offset_value is not None:
            limit = self.limit_value if self.limit_value is not None else -1
            sql += " LIMIT %s OFFSET %s"
            params = params + (limit, self.offset_value or 0)
        return sql, params

    def count(self) -> int:
        sql, params = self._select_sql()
        row = self.db.execute(f"SELECT COUNT(*) AS n FROM ({sql})", params, fetch="one")
        return int(row["n"]) if row else 0

    def fetch_all(self) -> list:
        sql, params = self._select_sql()
        rows = self.db.execute(sql, params, fetch="all")
        return [self.entity.from_row(row) for row in rows]

    def fetch_by_id(self, id: Any) -> Any:
        sql = f"SELECT {self.table}.* FROM {self.table}{self._where_sql()}"
        sql += " AND " if self.conditions else " WHERE "
        sql += f"{self.table}.id = %s"
        row = self.db.execute(sql, self.params + (id,), fetch="one")
        return self.entity.from_row(row) if row else None

    def __iter__(self):
        return iter(self.fetch_all())


def _sort_key(attribute: str) -> Callable[[Any], tuple]:
    def key(record: Any) -> tuple:
        value = getattr(record, attribute, None)
        return (value is not None, value)

    return key


@dataclass(frozen=True)
class ListSource:
    """In-memory record source over a sequence of objects.

    Filters are callables taking a record, or a mapping of attribute
    equalities. Ordering fields may carry a ``table.`` prefix, which is
    ignored.
    """

    records: tuple = ()
    predicates: tuple = ()
    ordering: tuple = ()
    offset_value: Optional[int] = None
    limit_value: Optional[int] = None

    @classmethod
    def of(cls, records: Sequence[Any]) -> "ListSource":
        return cls(records=tuple(records))

    def filter(self, predicate: Any) -> "ListSource":
        if isinstance(predicate, Mapping):
            expected = dict(predicate)

            def predicate(record: Any) -> bool:
                return all(getattr(record, k, None) == v for k, v in expected.items())

        return replace(self, predicates=self.predicates + (predicate,))

    def order_by(self, field: str, direction: str = "ASC") -> "ListSource":
        attribute = check_field(field).rsplit(".", 1)[-1]
        entry = (attribute, normalize_direction(direction))
        return replace(self, ordering=self.ordering + (entry,))

    def offset(self, n: int) -> "ListSource":
        return replace(self, offset_value=max(int(n), 0))

    def limit(self, n: int) -> "ListSource":
        return replace(self, limit_value=max(int(n), 0))

    def _matching(self) -> list:
        return [r for r in self.records if all(p(r) for p in self.predicates)]

    def fetch_all(self) -> list:
        records = self._matching()
        # Stable sorts applied last-key-first give lexicographic ordering
        for attribute, direction in reversed(self.ordering):
            records.sort(key=_sort_key(attribute), reverse=direction == "DESC")
        start = self.offset_value or 0
        end = start + self.limit_value if self.limit_value is not None else None
        return records[start:end]

    def count(self) -> int:
        return len(self.fetch_all())

    def fetch_by_id(self, id: Any) -> Any:
        for record in self._matching():
            if str(getattr(record, "id", None)) == str(id):
                return record
        return None

    def __iter__(self):
        return iter(self.fetch_all())


def as_source(value: Any) -> RecordSource:
    """Accept a record source, or wrap a plain sequence of records."""
    if isinstance(value, RecordSource):
        return value
    if isinstance(value, (list, tuple)):
        return ListSource.of(value)
    raise TypeError(f"Expected a record source or a list of records, got {type(value).__name__}")
