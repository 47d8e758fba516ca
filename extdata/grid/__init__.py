"""Grid rendering - tabular record views for the Ext JS grid widget."""

from extdata.grid.engine import DEFAULT_COLUMN_WIDTH, Grid, GridBuilder
from extdata.grid.schemas import Column, GridData, GridMetadata

__all__ = [
    "DEFAULT_COLUMN_WIDTH",
    "Column",
    "Grid",
    "GridBuilder",
    "GridData",
    "GridMetadata",
]
