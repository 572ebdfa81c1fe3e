"""
FastAPI application entry point.

Wires the upload and health routers, middleware and error handlers, and owns
the lifecycle of the process-wide pinning manager.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from . import API_VERSION
from .routers import upload, health
from .errors import register_exception_handlers, catch_unhandled_errors
from .middleware import security_headers, access_log
from src.pinning.manager import PinningManager, resolve_config_path

logger = logging.getLogger(__name__)

# Global application state
app_state = {}

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Builds the pinning manager and its provider client once at startup and
    closes the client at shutdown.
    """
    config_path = resolve_config_path()
    logger.info(f"Starting IPFS pin relay with config {config_path}")

    pinning_manager = PinningManager(config_path=config_path)
    pinning_manager.provider  # build the shared client before serving
    app_state["pinning_manager"] = pinning_manager

    logger.info("API server ready to accept requests")

    yield  # Server runs here

    logger.info("Shutting down IPFS pin relay")
    await pinning_manager.cleanup()
    app_state.clear()

def create_app() -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    This approach allows for easy testing and configuration management.
    """

    app = FastAPI(
        title="IPFS Pin Relay API",
        description="API for uploading JSON and files to IPFS",
        version=API_VERSION,
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan
    )

    # Middleware added last runs first: CORS wraps everything, the catch-all
    # sits innermost so its 500 still gets CORS and security headers
    app.middleware("http")(catch_unhandled_errors)
    app.middleware("http")(security_headers)
    app.middleware("http")(access_log)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(upload.router, tags=["IPFS"])
    app.include_router(health.router, prefix="/health", tags=["health"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": "IPFS Pin Relay API",
            "version": API_VERSION,
            "status": "operational",
            "endpoints": {
                "upload_json": "/uploadJson",
                "upload_file": "/uploadFile",
                "health": "/health",
                "docs": "/api-docs"
            }
        }

    return app

# Create the FastAPI app instance
app = create_app()
