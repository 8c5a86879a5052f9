"""
Storefront Server - Main Application

FastAPI application exposing shops and products over HTTP.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings
from .database import create_store, init_database
from .routes import shops, products
from .storage import SnapshotManager, Store, StorageError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Configure logging
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn pydantic errors into one human-readable message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    missing = [
        str(error['loc'][-1]) for error in errors
        if error['type'] == 'missing' and len(error['loc']) > 1
    ]
    if missing:
        plural = 's' if len(missing) > 1 else ''
        return f"Missing required field{plural}: {', '.join(missing)}"

    first = errors[0]
    if first['type'] == 'json_invalid':
        return "Invalid JSON body"
    if first['type'] == 'missing':
        return "Request body is required"

    field = '.'.join(
        str(part) for part in first['loc']
        if part not in ('body', 'query', 'path')
    )
    message = first['msg']
    if message.startswith('Value error, '):
        message = message[len('Value error, '):]

    return f"{field}: {message}" if field else message


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    snapshots: Optional[SnapshotManager] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Server settings (read from the environment if omitted)
        store: Store to serve from (built from settings if omitted)
        snapshots: Snapshot manager for an in-memory store
    """
    settings = settings or get_settings()
    if store is None:
        store, snapshots = create_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        logger.info("Starting Storefront Server...")

        try:
            await init_database(store, snapshots)
        except StorageError as e:
            logger.critical(f"Database initialization failed: {e}")
            await store.close()
            raise

        if snapshots:
            await snapshots.start()

        logger.info("Server started successfully")

        yield

        # Shutdown
        logger.info("Shutting down...")
        if snapshots:
            await snapshots.shutdown()
        await store.close()

    app = FastAPI(
        title="Storefront API",
        description="Multi-tenant shop and product API",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store
    app.state.snapshots = snapshots

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials='*' not in settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": describe_validation_error(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if exc.status_code == 404 and detail == "Not Found":
            detail = "Endpoint not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": detail},
            headers=getattr(exc, 'headers', None)
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(
            f"Storage error on {request.method} {request.url.path}: {exc}",
            exc_info=exc
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"}
        )

    # Include routers
    app.include_router(shops.router, prefix="/api/shops", tags=["Shops"])
    app.include_router(products.router, prefix="/api/products", tags=["Products"])

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        """Root banner."""
        return f"storefront backend v{__version__} is live"

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


def main():
    """Run the server with uvicorn."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    try:
        app = create_app(settings)
    except StorageError as e:
        logger.critical(f"Cannot configure storage: {e}")
        sys.exit(1)

    logger.info(f"Storefront server listening on port {settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
