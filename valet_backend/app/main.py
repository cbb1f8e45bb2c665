"""
FastAPI Application Entry Point.

This is the main application file for the Valet Admin Backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from valet_backend.app.core.config import settings
from valet_backend.app.core.logging_config import configure_logging, get_logger
from valet_backend.app.core.observability import ObservabilityMiddleware
from valet_backend.app.api.v1.router import router as api_v1_router
from valet_backend.app.db.session import engine, AsyncSessionLocal
from valet_backend.app.db.init_db import init_db
from valet_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates database tables and role reference rows on startup.
    """
    await init_db(engine, AsyncSessionLocal)
    logger.info("%s started", settings.app_name)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Administrative backend for valet parking locations and owners",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


app.include_router(api_v1_router, prefix=settings.api_prefix)


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Valet Admin Backend API",
        "docs": "/docs",
        "health": "/health",
    }
