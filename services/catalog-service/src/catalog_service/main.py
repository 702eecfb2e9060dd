"""
Entry point for the catalog service.

Builds one ASGI application that serves both front-ends of the catalog:
  1. The REST routes under /catalogs (FastAPI).
  2. The MCP tools over streamable HTTP at /mcp (FastMCP).

The application lifespan starts FastMCP's session manager, makes sure the
items table exists, and closes the database pool on shutdown.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from catalog_service.app.auth_middleware import ApiKeyMiddleware, MCP_PATH
from catalog_service.app.config import settings
from catalog_service.app.db import close_pool, ensure_schema
from catalog_service.app.logging_config import configure_logging
from catalog_service.app.mcp_app import mcp
from catalog_service.routes import catalogs

# Import tool modules so their @mcp.tool decorators run at startup.
import catalog_service.tools.items  # noqa: F401

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Assemble the FastAPI application with the REST routes, the MCP app and
    the API-key middleware.

    Returns:
        FastAPI: The ready-to-serve ASGI application.
    """
    mcp_app = mcp.http_app(path=MCP_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with mcp_app.lifespan(app):
            try:
                await ensure_schema()
                logger.info("Item store schema ready")
            except Exception as e:
                # Requests will report the store as unavailable until it recovers
                logger.error(f"Failed to prepare item store: {e}")

            try:
                yield
            finally:
                await close_pool()

    app = FastAPI(title="catalog-service", lifespan=lifespan)
    app.add_middleware(ApiKeyMiddleware)
    app.include_router(catalogs.router)

    @app.get("/health")
    async def health():
        """Simple health-check endpoint."""
        return {"ok": True, "service": "catalog-service"}

    # Mounted last so the routes above take precedence.
    app.mount("/", mcp_app)
    return app


def main() -> None:
    """
    Configure logging, build the application and start the Uvicorn server.
    """
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    app = create_app()
    logger.info(f"Catalog service listening on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
