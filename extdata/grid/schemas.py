"""Grid schemas - column declarations and the payloads sent to the widget.

Option models forbid unknown keys so that a typo in a grid declaration
fails at startup instead of being silently ignored.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from extdata.store.source import check_field


class GridOptions(BaseModel):
    """Top-level options accepted by Grid()."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    scope: Any = Field(
        default=None,
        description="Record source override: a RecordSource, or a factory "
        "called with the RequestContext that returns one",
    )


class ColumnOptions(BaseModel):
    """Options accepted by GridBuilder.column()."""

    model_config = ConfigDict(extra="forbid")

    label: Optional[str] = Field(default=None, description="Header label")
    sort: Optional[str] = Field(
        default=None,
        description="Field expression to order by when this column is sorted",
    )
    sortable: Optional[bool] = Field(default=None, description="False disables sorting in the widget")
    width: Optional[int] = Field(default=None, description="Column width in pixels (default 100)")

    @field_validator("sort")
    @classmethod
    def check_sort_field(cls, value: Optional[str]) -> Optional[str]:
        return value if value is None else check_field(value)


class Column(BaseModel):
    """A configured grid column. Immutable once the grid is built."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    # Attribute for named columns, Computed/BoundMethod/Literal otherwise
    accessor: Any
    label: str
    sort_key: Optional[str] = None
    sortable: bool = True
    width: Optional[int] = None
    exclude_from_metadata: bool = False


class ColumnMapping(BaseModel):
    """Maps a record field to the row key the widget reads it from."""

    name: str
    mapping: str


class ColumnModelEntry(BaseModel):
    """One visible column in the widget's column model."""

    header: str
    dataIndex: str
    width: int = 100
    sortable: bool = True


class GridMetadata(BaseModel):
    """Layout metadata for a grid."""

    data_url: str
    column_mappings: list[ColumnMapping] = Field(default_factory=list)
    column_model: list[ColumnModelEntry] = Field(default_factory=list)


class GridData(BaseModel):
    """One page of grid rows plus the total row count before paging."""

    total: int = 0
    records: list[dict[str, Any]] = Field(default_factory=list)
