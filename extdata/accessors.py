"""Accessor variants for reading display values off records.

Column and node declarations accept several shapes of "where does this value
come from". They are normalized into one of four tagged variants and read
through a single resolve() call:

- Attribute(name)   -> getattr(record, name), called if it is a method
- Computed(fn)      -> fn(record, context)
- BoundMethod(fn)   -> fn(record)
- Literal(value)    -> value
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Union

from extdata.context import RequestContext


@dataclass(frozen=True)
class Attribute:
    name: str


@dataclass(frozen=True)
class Computed:
    fn: Callable[[Any, RequestContext], Any]


@dataclass(frozen=True)
class BoundMethod:
    fn: Callable[[Any], Any]


@dataclass(frozen=True)
class Literal:
    value: Any


Accessor = Union[Attribute, Computed, BoundMethod, Literal]


def as_accessor(value: Any) -> Accessor:
    """Coerce a declaration value into an accessor.

    Strings name attributes, bound methods are called with the record, other
    callables are computed with (record, context), and anything else is a
    literal. Wrap a string in Literal() to use it verbatim.
    """
    if isinstance(value, (Attribute, Computed, BoundMethod, Literal)):
        return value
    if isinstance(value, str):
        return Attribute(value)
    if inspect.ismethod(value):
        return BoundMethod(value)
    if callable(value):
        return Computed(value)
    return Literal(value)


def read_attribute(record: Any, name: str) -> Any:
    """Read an attribute, calling it when it resolves to a method."""
    value = getattr(record, name)
    if inspect.ismethod(value):
        return value()
    return value


def resolve(accessor: Accessor, record: Any, context: RequestContext) -> Any:
    """Resolve an accessor against a record in the given request context."""
    if isinstance(accessor, Attribute):
        return read_attribute(record, accessor.name)
    if isinstance(accessor, Computed):
        return accessor.fn(record, context)
    if isinstance(accessor, BoundMethod):
        return accessor.fn(record)
    if isinstance(accessor, Literal):
        return accessor.value
    raise TypeError(f"Unsupported accessor: {accessor!r}")
