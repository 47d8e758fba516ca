"""Record store: lazy record sources and SQLite-backed entities."""

from extdata.store.db import Database, get_database, set_database
from extdata.store.models import Record, list_entities, lookup_entity
from extdata.store.source import ListSource, QuerySource, RecordSource, as_source

__all__ = [
    "Database",
    "ListSource",
    "QuerySource",
    "Record",
    "RecordSource",
    "as_source",
    "get_database",
    "list_entities",
    "lookup_entity",
    "set_database",
]
