"""Tree node ids as seen by the client.

A node id has the shape ``<prefix>-<type_key>-<record_id>``. The prefix only
keeps ids unique on the client side: it is the record id itself for trees
with stable ids, or a process-local token otherwise. The record id is what
the server uses to look the record up again.

Type keys are snake_case and never contain ``-``; record ids may (the last
segment takes the rest of the string), but prefixes may not.
"""

import itertools
import logging
import re
import threading
from dataclasses import dataclass
from typing import Any

from extdata.errors import NodeIdError

logger = logging.getLogger(__name__)

ROOT_NODE = "root"

_TYPE_KEY_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


@dataclass(frozen=True)
class NodeRef:
    """A decoded node id."""

    prefix: str
    type_key: str
    record_id: Any


def encode_node_id(prefix: Any, type_key: str, record_id: Any) -> str:
    return f"{prefix}-{type_key}-{record_id}"


def decode_node_id(node_id: str) -> NodeRef:
    """Split a client node id into prefix, type key and record id.

    Integer-looking record ids are returned as ints.

    Raises:
        NodeIdError: if the id does not have three non-empty segments or
            the type segment is not a valid type key
    """
    parts = str(node_id).split("-", 2)
    if len(parts) != 3 or not all(parts):
        raise NodeIdError(node_id, "expected '<prefix>-<type>-<record id>'")

    prefix, type_key, raw_id = parts
    if not _TYPE_KEY_RE.match(type_key):
        raise NodeIdError(node_id, f"invalid node type '{type_key}'")

    record_id: Any = int(raw_id) if raw_id.isdigit() else raw_id
    logger.debug(f"Decoded node {node_id} -> {type_key}#{record_id}")
    return NodeRef(prefix=prefix, type_key=type_key, record_id=record_id)


class EphemeralTokens:
    """Monotonic id prefixes, unique for the lifetime of the process.

    Every call hands out a fresh token, so two nodes rendered for the same
    record in different requests get different client ids.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            return str(next(self._counter))
