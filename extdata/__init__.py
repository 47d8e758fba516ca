"""extdata - server-side data rendering for Ext JS style grids and trees.

Grids and trees are declared once at startup and registered as HTTP
endpoints. Each request shapes live records into the payloads the client
widget expects:
- Grid metadata (column model, field mappings, data URL)
- Grid data (paged, sorted, column-projected rows)
- Tree data (lazily expanded child nodes)
"""

from extdata.accessors import Attribute, BoundMethod, Computed, Literal, resolve
from extdata.context import RequestContext
from extdata.errors import ConfigurationError, NodeIdError
from extdata.grid import Grid
from extdata.tree import Tree

__all__ = [
    "Attribute",
    "BoundMethod",
    "Computed",
    "ConfigurationError",
    "Grid",
    "Literal",
    "NodeIdError",
    "RequestContext",
    "Tree",
    "resolve",
]
