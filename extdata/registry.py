"""Render registry - the grids and trees an application serves.

Follows the same pattern as the definition registries of the API layer:
- In-memory dicts keyed by name
- Global singleton via get_render_registry()
- Optional loading of definition modules named in EXTDATA_DEFINITIONS

Definition modules declare their grids and trees at import time:

    from extdata.registry import get_render_registry

    registry = get_render_registry()
    registry.grid("item", lambda g: g.column("name"))
    registry.tree("item", lambda t: t.node("item", text="name"))
"""

import importlib
import logging
import os
from typing import Any, Callable, Optional

from extdata.errors import ConfigurationError
from extdata.grid import Grid, GridBuilder
from extdata.tree import Tree, TreeBuilder

logger = logging.getLogger(__name__)

# Comma-separated modules imported to populate the global registry
DEFINITIONS_MODULES = os.environ.get("EXTDATA_DEFINITIONS", "")


class RenderRegistry:
    """Registry of named grids and trees."""

    def __init__(self) -> None:
        self._grids: dict[str, Grid] = {}
        self._trees: dict[str, Tree] = {}

    def register_grid(self, grid: Grid) -> Grid:
        if grid.name in self._grids:
            raise ConfigurationError(f"Grid already registered: {grid.name}")
        self._grids[grid.name] = grid
        logger.info(f"Registered grid: {grid.name}")
        return grid

    def register_tree(self, tree: Tree) -> Tree:
        if tree.name in self._trees:
            raise ConfigurationError(f"Tree already registered: {tree.name}")
        self._trees[tree.name] = tree
        logger.info(f"Registered tree: {tree.name}")
        return tree

    def grid(
        self,
        name: str,
        configure: Optional[Callable[[GridBuilder], None]] = None,
        **options: Any,
    ) -> Grid:
        """Build a grid and register it."""
        return self.register_grid(Grid(name, configure, **options))

    def tree(
        self,
        name: str,
        configure: Optional[Callable[[TreeBuilder], None]] = None,
        **options: Any,
    ) -> Tree:
        """Build a tree and register it."""
        return self.register_tree(Tree(name, configure, **options))

    def get_grid(self, name: str) -> Optional[Grid]:
        return self._grids.get(name)

    def get_tree(self, name: str) -> Optional[Tree]:
        return self._trees.get(name)

    def list_grids(self) -> list[Grid]:
        return list(self._grids.values())

    def list_trees(self) -> list[Tree]:
        return list(self._trees.values())

    def list_keys(self) -> dict[str, list[str]]:
        return {"grids": list(self._grids.keys()), "trees": list(self._trees.keys())}

    def count(self) -> int:
        """Total number of registered grids and trees."""
        return len(self._grids) + len(self._trees)

    def endpoints(self) -> list[str]:
        """Names of every endpoint the registered grids and trees expose."""
        names = []
        for grid in self._grids.values():
            names += [grid.metadata_endpoint, grid.data_endpoint]
        for tree in self._trees.values():
            names.append(tree.data_endpoint)
        return names

    def load_modules(self, modules: str = DEFINITIONS_MODULES) -> None:
        """Import definition modules (comma-separated dotted names)."""
        for module_name in (m.strip() for m in modules.split(",")):
            if not module_name:
                continue
            logger.info(f"Loading grid/tree definitions from {module_name}")
            importlib.import_module(module_name)

    def clear(self) -> None:
        self._grids.clear()
        self._trees.clear()


# Global registry instance
_registry: Optional[RenderRegistry] = None


def get_render_registry() -> RenderRegistry:
    """Get the global render registry instance."""
    global _registry
    if _registry is None:
        _registry = RenderRegistry()
    return _registry
