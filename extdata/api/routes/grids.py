"""Grid routes.

Each registered grid gets two endpoints, named after the grid:
    GET /{name}_grid_metadata     Column model, field mappings, data URL
    GET /{name}_grid_data         One page of rows (sort, dir, start, limit)
"""

import logging
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from extdata.api.dependencies import request_context
from extdata.context import RequestContext
from extdata.grid import Grid, GridData, GridMetadata

logger = logging.getLogger(__name__)


def add_grid_routes(router: APIRouter, grid: Grid) -> None:
    """Register the metadata and data endpoints for one grid."""

    def grid_metadata(
        id: Optional[str] = Query(None, description="Id passed through to the data URL"),
        context: RequestContext = Depends(request_context),
    ) -> GridMetadata:
        return grid.metadata(context, id)

    def grid_data(
        sort: Optional[str] = Query(None, description="Column id to order by"),
        dir: Optional[str] = Query(None, description="'ASC' for ascending, otherwise descending"),
        start: Optional[str] = Query(None, description="Row offset"),
        limit: Optional[str] = Query(None, description="Maximum rows"),
        context: RequestContext = Depends(request_context),
    ) -> GridData:
        """The query params are declared for the OpenAPI schema; the grid reads them from the context."""
        return grid.data(context)

    router.add_api_route(
        f"/{grid.metadata_endpoint}",
        grid_metadata,
        methods=["GET"],
        name=grid.metadata_endpoint,
        response_model=GridMetadata,
        summary=f"Metadata for the '{grid.name}' grid",
    )
    router.add_api_route(
        f"/{grid.data_endpoint}",
        grid_data,
        methods=["GET"],
        name=grid.data_endpoint,
        response_model=GridData,
        summary=f"Rows for the '{grid.name}' grid",
    )
    logger.debug(f"Mounted grid endpoints for '{grid.name}'")


def build_router(grids: Iterable[Grid]) -> APIRouter:
    grids = list(grids)
    router = APIRouter(tags=["grids"])
    for grid in grids:
        add_grid_routes(router, grid)

    available = [grid.name for grid in grids]

    # Registered after the named routes, so it only catches unknown grids
    def grid_not_found(name: str):
        logger.warning(f"Request for unknown grid '{name}'")
        raise HTTPException(
            status_code=404, detail=f"Grid not found: {name}. Available: {available}"
        )

    for suffix in ("_grid_metadata", "_grid_data"):
        router.add_api_route(
            f"/{{name}}{suffix}",
            grid_not_found,
            methods=["GET"],
            include_in_schema=False,
        )
    return router
