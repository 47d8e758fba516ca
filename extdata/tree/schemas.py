"""Tree node declarations."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeSpec(BaseModel):
    """How records of one type render as tree nodes.

    Every accessor field holds an extdata.accessors variant (or None when
    the node does not declare it).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type_key: str = Field(..., description="Underscored record class name, e.g. 'line_item'")
    text: Optional[Any] = Field(default=None, description="Node label")
    children: Optional[Any] = Field(
        default=None,
        description="Child records; absent means nodes of this type are leaves",
    )
    qtip: Optional[Any] = Field(default=None, description="Tooltip text")
    icon: Optional[Any] = Field(default=None, description="Icon URL")
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra node fields, passed through without stringifying",
    )

    @property
    def is_leaf(self) -> bool:
        return self.children is None
