"""Grid engine - renders records as Ext JS grid metadata and row data.

A Grid is declared once with a builder callback:

    def configure(g):
        g.delegate_to("item", exclude=["quantity"])
        g.column("name")
        g.column("quantity", width=60)
        g.column(lambda order, ctx: order.quantity * 2, label="Double")

    orders = Grid("order", configure, scope=lambda ctx: Order.query())

and then serves two kinds of request:
- metadata(): column model, field mappings and the data URL
- data(): one page of rows, honoring sort/dir/start/limit parameters
"""

import logging
import re
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from extdata.accessors import Attribute, as_accessor, read_attribute, resolve
from extdata.context import RequestContext
from extdata.errors import ConfigurationError
from extdata.grid.schemas import (
    Column,
    ColumnMapping,
    ColumnModelEntry,
    ColumnOptions,
    GridData,
    GridMetadata,
    GridOptions,
)
from extdata.naming import humanize, pluralize, underscore
from extdata.store import RecordSource, as_source, lookup_entity

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_WIDTH = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a request parameter (``"12abc"`` -> 12)."""
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _option_error(kind: str, error: ValidationError) -> ConfigurationError:
    messages = []
    for err in error.errors():
        key = ".".join(str(part) for part in err["loc"])
        if err["type"] == "extra_forbidden":
            messages.append(f"Unknown {kind} option: {key}")
        else:
            messages.append(f"Invalid {kind} option {key}: {err['msg']}")
    return ConfigurationError("; ".join(messages))


def _default_row_id(record: Any) -> Any:
    return record.id


class GridBuilder:
    """Collects column and delegation declarations for a Grid."""

    def __init__(self) -> None:
        self.columns: list[Column] = []
        self.delegate: Optional[str] = None
        self.delegate_except: frozenset[str] = frozenset()
        self.row_id_fn: Callable[[Any], Any] = _default_row_id
        self.sort_prefix: Optional[str] = None
        self._computed_count = 0

    def column(self, accessor: Any, **options: Any) -> Column:
        """Declare a column.

        ``accessor`` is either an attribute name the records respond to, or a
        function ``fn(record, context)`` computing the cell value. Options:
        label, sort, sortable, width.
        """
        try:
            opts = ColumnOptions.model_validate(options)
        except ValidationError as e:
            raise _option_error("column", e) from e

        accessor = as_accessor(accessor)
        if isinstance(accessor, Attribute):
            column_id = accessor.name
            label = opts.label if opts.label is not None else humanize(accessor.name)
        else:
            self._computed_count += 1
            column_id = f"col_{self._computed_count}"
            label = opts.label if opts.label is not None else f"Column {self._computed_count}"

        if any(c.id == column_id for c in self.columns):
            raise ConfigurationError(f"Duplicate column: {column_id}")

        column = Column(
            id=column_id,
            accessor=accessor,
            label=label,
            sort_key=opts.sort,
            sortable=opts.sortable is not False,
            width=opts.width,
        )
        self.columns.append(column)
        return column

    def delegate_to(self, attribute: str, exclude: Iterable[str] = ()) -> None:
        """Read named columns through ``record.<attribute>``.

        Columns whose id is listed in ``exclude`` keep reading off the record
        itself. Computed columns always receive the record.
        """
        self.delegate = attribute
        self.delegate_except = frozenset(str(x) for x in exclude)

    def row_id(self, fn: Callable[[Any], Any]) -> None:
        """Use ``fn(record)`` for the row id instead of ``record.id``."""
        self.row_id_fn = fn

    def default_sort_table(self, entity: Any) -> None:
        """Qualify attribute sort fields with an entity's table (None for no prefix)."""
        if entity is None:
            self.sort_prefix = ""
        elif isinstance(entity, str):
            self.sort_prefix = f"{pluralize(underscore(entity))}."
        else:
            self.sort_prefix = f"{entity.table()}."

    def hide(self, *column_ids: str) -> None:
        """Keep columns in the row data but out of the visible column model."""
        for column_id in column_ids:
            for idx, column in enumerate(self.columns):
                if column.id == column_id:
                    self.columns[idx] = column.model_copy(update={"exclude_from_metadata": True})
                    break
            else:
                raise ConfigurationError(f"Cannot hide unknown column: {column_id}")


class Grid:
    """Declarative grid bound to a record source."""

    def __init__(
        self,
        name: str,
        configure: Optional[Callable[[GridBuilder], None]] = None,
        **options: Any,
    ):
        try:
            self.options = GridOptions.model_validate(options)
        except ValidationError as e:
            raise _option_error("grid", e) from e

        scope = self.options.scope
        if scope is not None and not (isinstance(scope, RecordSource) or callable(scope)):
            raise ConfigurationError(
                f"Grid '{name}' scope must be a record source or a factory, "
                f"got {type(scope).__name__}"
            )

        self.name = str(name)
        builder = GridBuilder()
        if configure is not None:
            configure(builder)

        self.columns: tuple[Column, ...] = tuple(builder.columns)
        self.delegate = builder.delegate
        self.delegate_except = builder.delegate_except
        self.row_id_fn = builder.row_id_fn
        self._sort_prefix = builder.sort_prefix
        self._columns_by_id = {c.id: c for c in self.columns}

        logger.info(f"Configured grid '{self.name}' with {len(self.columns)} columns")

    @property
    def metadata_endpoint(self) -> str:
        return f"{self.name}_grid_metadata"

    @property
    def data_endpoint(self) -> str:
        return f"{self.name}_grid_data"

    # ── Metadata ─────────────────────────────────────────

    def metadata(self, context: Optional[RequestContext] = None, id: Any = None) -> GridMetadata:
        """Build the widget layout: data URL, field mappings, column model."""
        context = context or RequestContext()
        return GridMetadata(
            data_url=context.url_for(self.data_endpoint, id),
            column_mappings=[
                ColumnMapping(name=c.id, mapping=c.id) for c in self.columns
            ],
            column_model=[
                ColumnModelEntry(
                    header=c.label,
                    dataIndex=c.id,
                    width=c.width if c.width is not None else DEFAULT_COLUMN_WIDTH,
                    sortable=c.sortable,
                )
                for c in self.columns
                if not c.exclude_from_metadata
            ],
        )

    # ── Data ─────────────────────────────────────────────

    def data(self, context: Optional[RequestContext] = None) -> GridData:
        """Fetch one page of rows for the request's sort and paging params."""
        context = context or RequestContext()
        source = self._initial_source(context)
        source = self._with_sort(source, context)
        total = source.count()
        records = self._with_paging(source, context).fetch_all()
        return GridData(
            total=total,
            records=[self._row_for(record, context) for record in records],
        )

    def _initial_source(self, context: RequestContext) -> RecordSource:
        scope = self.options.scope
        if scope is None:
            return lookup_entity(self.name).query()
        if isinstance(scope, RecordSource):
            return scope
        return as_source(scope(context))

    def sort_prefix(self) -> str:
        """Table qualifier for attribute sort fields."""
        if self._sort_prefix is not None:
            return self._sort_prefix
        if self.options.scope is not None:
            return ""
        return f"{lookup_entity(self.name).table()}."

    def sort_options(self, params: Any) -> Optional[tuple[str, str]]:
        """Resolve sort/dir params into (field, direction), or None."""
        sort = params.get("sort")
        if not sort:
            return None
        column = self._columns_by_id.get(str(sort))
        if column is None:
            logger.warning(f"Grid '{self.name}': ignoring sort on unknown column '{sort}'")
            return None

        if column.sort_key:
            attribute = column.sort_key
        elif isinstance(column.accessor, Attribute):
            if self._is_delegated(column):
                # The value lives on the delegate, not in the base source
                logger.debug(
                    f"Grid '{self.name}': column '{sort}' is read through "
                    f"'{self.delegate}' and has no sort field"
                )
                return None
            attribute = self.sort_prefix() + column.accessor.name
        else:
            logger.debug(f"Grid '{self.name}': column '{sort}' has no sort field")
            return None

        direction = "ASC" if params.get("dir") == "ASC" else "DESC"
        return attribute, direction

    def _with_sort(self, source: RecordSource, context: RequestContext) -> RecordSource:
        options = self.sort_options(context.params)
        if options is None:
            return source
        attribute, direction = options
        return source.order_by(attribute, direction)

    def _with_paging(self, source: RecordSource, context: RequestContext) -> RecordSource:
        start = context.param("start")
        if start is not None:
            source = source.offset(max(_parse_int(start) or 0, 0))
        limit = context.param("limit")
        if limit is not None:
            count = _parse_int(limit)
            if count is not None and count >= 0:
                source = source.limit(count)
        return source

    def _is_delegated(self, column: Column) -> bool:
        return bool(self.delegate) and column.id not in self.delegate_except

    def _row_for(self, record: Any, context: RequestContext) -> dict[str, Any]:
        row = {c.id: self._column_value(c, record, context) for c in self.columns}
        row["id"] = self._row_id_for(record)
        return row

    def _column_value(self, column: Column, record: Any, context: RequestContext) -> Any:
        if not isinstance(column.accessor, Attribute):
            return resolve(column.accessor, record, context)
        target = record
        if self._is_delegated(column):
            target = read_attribute(record, self.delegate)
            if target is None:
                return None
        return resolve(column.accessor, target, context)

    def _row_id_for(self, record: Any) -> str:
        value = self.row_id_fn(record)
        return "" if value is None else str(value)
