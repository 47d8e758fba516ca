"""extdata API - grid and tree data endpoints.

Serves every grid and tree in a RenderRegistry:
- GET /{name}_grid_metadata   Ext JS column model and data URL
- GET /{name}_grid_data       Paged, sorted rows
- GET /{name}_tree_data       Lazily expanded tree nodes
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from extdata.api.routes import grids, trees
from extdata.registry import RenderRegistry, get_render_registry
from extdata.store import get_database

LOG_LEVEL = os.environ.get("EXTDATA_LOG_LEVEL", "INFO").upper()
HOST = os.environ.get("EXTDATA_HOST", "0.0.0.0")
PORT = int(os.environ.get("EXTDATA_PORT", "8001"))

logger = logging.getLogger(__name__)


def create_app(registry: Optional[RenderRegistry] = None) -> FastAPI:
    """Build the app for a registry (the global one by default).

    Routes are fixed when the app is created, so grids and trees must be
    registered before this is called.
    """
    if registry is None:
        registry = get_render_registry()
        registry.load_modules()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        keys = registry.list_keys()
        logger.info(f"Serving {len(keys['grids'])} grids: {keys['grids']}")
        logger.info(f"Serving {len(keys['trees'])} trees: {keys['trees']}")
        logger.info(f"Record database: {get_database().path}")
        logger.info("extdata API ready")
        yield
        logger.info("Shutting down extdata API")

    app = FastAPI(
        title="extdata API",
        description="Grid and tree data endpoints for Ext JS widgets.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(grids.build_router(registry.list_grids()))
    app.include_router(trees.build_router(registry.list_trees()))

    @app.get("/")
    async def root():
        """Root endpoint with the registered endpoints."""
        return {
            "service": "extdata API",
            "version": "0.1.0",
            "docs": "/docs",
            "grids": registry.list_keys()["grids"],
            "trees": registry.list_keys()["trees"],
            "endpoints": [f"GET /{name}" for name in registry.endpoints()],
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        keys = registry.list_keys()
        return {
            "status": "healthy",
            "grids_loaded": len(keys["grids"]),
            "trees_loaded": len(keys["trees"]),
        }

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(create_app(), host=HOST, port=PORT)
