"""Tree routes.

Each registered tree gets one endpoint, named after the tree:
    GET /{name}_tree_data?node=root|<node id>    Child nodes of one node
"""

import logging
from typing import Any, Iterable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from extdata.api.dependencies import request_context
from extdata.context import RequestContext
from extdata.errors import NodeIdError
from extdata.tree import Tree

logger = logging.getLogger(__name__)


def add_tree_routes(router: APIRouter, tree: Tree) -> None:
    """Register the data endpoint for one tree."""

    def tree_data(
        node: Optional[str] = Query(None, description="'root' or the id of the node to expand"),
        context: RequestContext = Depends(request_context),
    ) -> list[dict[str, Any]]:
        try:
            return tree.get_data(context)
        except NodeIdError as e:
            logger.warning(f"Tree '{tree.name}': {e}")
            raise HTTPException(status_code=400, detail=str(e))

    router.add_api_route(
        f"/{tree.data_endpoint}",
        tree_data,
        methods=["GET"],
        name=tree.data_endpoint,
        response_model=list[dict[str, Any]],
        summary=f"Child nodes for the '{tree.name}' tree",
    )
    logger.debug(f"Mounted tree endpoint for '{tree.name}'")


def build_router(trees: Iterable[Tree]) -> APIRouter:
    trees = list(trees)
    router = APIRouter(tags=["trees"])
    for tree in trees:
        add_tree_routes(router, tree)

    available = [tree.name for tree in trees]

    # Registered after the named routes, so it only catches unknown trees
    def tree_not_found(name: str):
        logger.warning(f"Request for unknown tree '{name}'")
        raise HTTPException(
            status_code=404, detail=f"Tree not found: {name}. Available: {available}"
        )

    router.add_api_route(
        "/{name}_tree_data",
        tree_not_found,
        methods=["GET"],
        include_in_schema=False,
    )
    return router
