"""Tree engine - renders records as lazily expanded Ext JS tree nodes.

The widget asks for one level at a time: first ``node=root``, then the id
of each node the user expands. A tree declares one NodeSpec per record
type:

    def configure(t):
        t.node("item", text="name", children="orders")
        t.node("order", text="quantity", data={"qty": "quantity"})

    items = Tree("item", configure)
"""

import logging
from typing import Any, Callable, Optional

from extdata.accessors import Literal, as_accessor, resolve
from extdata.context import RequestContext
from extdata.errors import ConfigurationError
from extdata.naming import underscore
from extdata.store import RecordSource, as_source, lookup_entity
from extdata.tree.node_ids import (
    ROOT_NODE,
    EphemeralTokens,
    NodeRef,
    decode_node_id,
    encode_node_id,
)
from extdata.tree.schemas import NodeSpec

logger = logging.getLogger(__name__)

_DISPLAY_ATTRIBUTES = ("qtip", "text", "icon")


class TreeBuilder:
    """Collects node declarations for a Tree."""

    def __init__(self) -> None:
        self.specs: dict[str, NodeSpec] = {}

    def node(
        self,
        type_key: str,
        text: Any = None,
        children: Any = None,
        qtip: Any = None,
        icon: Any = None,
        data: Optional[dict[str, Any]] = None,
        **extra: Any,
    ) -> NodeSpec:
        """Declare how records of ``type_key`` render.

        Accessor values: an attribute name, a function ``fn(record, context)``,
        a bound method ``fn(record)``, or an accessors.Literal.
        """
        key = underscore(str(type_key))
        if extra:
            logger.warning(f"Tree node '{key}': ignoring unknown options {sorted(extra)}")

        def optional(value: Any) -> Any:
            return None if value is None else as_accessor(value)

        spec = NodeSpec(
            type_key=key,
            text=optional(text),
            children=optional(children),
            qtip=optional(qtip),
            icon=optional(icon),
            data={k: as_accessor(v) for k, v in (data or {}).items()},
        )
        self.specs[key] = spec
        return spec


class Tree:
    """Declarative tree bound to a root record source."""

    def __init__(
        self,
        name: str,
        configure: Optional[Callable[[TreeBuilder], None]] = None,
        *,
        roots: Any = None,
        stable_ids: bool = False,
    ):
        if roots is not None and not (
            isinstance(roots, (str, RecordSource)) or callable(roots)
        ):
            raise ConfigurationError(
                f"Tree '{name}' roots must be an entity name, a record source "
                f"or a factory, got {type(roots).__name__}"
            )

        self.name = str(name)
        self.roots = roots
        self.stable_ids = stable_ids
        builder = TreeBuilder()
        if configure is not None:
            configure(builder)
        self.specs: dict[str, NodeSpec] = dict(builder.specs)
        self._tokens = EphemeralTokens()

        logger.info(
            f"Configured tree '{self.name}' with node types {sorted(self.specs)}"
        )

    @property
    def data_endpoint(self) -> str:
        return f"{self.name}_tree_data"

    def get_data(self, context: Optional[RequestContext] = None) -> list[dict[str, Any]]:
        """Child nodes for the request's ``node`` parameter.

        No ``node`` parameter yields an empty list.

        Raises:
            NodeIdError: if ``node`` is neither "root" nor a well-formed node id
        """
        context = context or RequestContext()
        node_id = context.param("node")
        if node_id is None:
            return []

        if node_id == ROOT_NODE:
            records = self._root_records(context)
        else:
            records = self._child_records(decode_node_id(node_id), context)
        return [self.materialize(record, context) for record in records]

    def _root_records(self, context: RequestContext) -> list:
        roots = self.roots
        if roots is None:
            source = lookup_entity(self.name).all()
        elif isinstance(roots, str):
            source = lookup_entity(roots).all()
        elif isinstance(roots, RecordSource):
            source = roots
        else:
            source = as_source(roots(context))
        return source.fetch_all()

    def _child_records(self, ref: NodeRef, context: RequestContext) -> list:
        spec = self.specs.get(ref.type_key)
        if spec is None:
            logger.warning(f"Tree '{self.name}': no node type '{ref.type_key}', treating as leaf")
            return []
        if spec.is_leaf:
            return []

        try:
            entity = lookup_entity(ref.type_key)
        except LookupError:
            logger.warning(f"Tree '{self.name}': no record store for '{ref.type_key}'")
            return []

        record = entity.query().fetch_by_id(ref.record_id)
        if record is None:
            logger.info(f"Tree '{self.name}': {ref.type_key}#{ref.record_id} not found")
            return []

        children = resolve(spec.children, record, context)
        if children is None:
            return []
        if isinstance(children, RecordSource):
            return children.fetch_all()
        return list(children)

    def spec_for(self, record: Any) -> NodeSpec:
        """The spec for a record's runtime type, or a text-only fallback."""
        type_key = underscore(type(record).__name__)
        spec = self.specs.get(type_key)
        if spec is None:
            spec = NodeSpec(type_key=type_key, text=Literal(type(record).__name__))
        return spec

    def materialize(self, record: Any, context: RequestContext) -> dict[str, Any]:
        """Render one record as a tree node."""
        spec = self.spec_for(record)
        prefix = record.id if self.stable_ids else self._tokens.next()
        node: dict[str, Any] = {
            "id": encode_node_id(prefix, spec.type_key, record.id),
            "object_id": record.id,
            "object_type": spec.type_key,
        }
        if spec.is_leaf:
            node["leaf"] = True

        for attribute in _DISPLAY_ATTRIBUTES:
            accessor = getattr(spec, attribute)
            if accessor is not None:
                value = resolve(accessor, record, context)
                node[attribute] = "" if value is None else str(value)

        for key, accessor in spec.data.items():
            node[key] = resolve(accessor, record, context)
        return node
