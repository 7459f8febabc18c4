"""
API Factory

Centralized API setup with middleware, CORS, datastore lifecycle and
monitoring configuration.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from src.api.errors import register_exception_handlers
from src.api.middleware import (
    BodySizeLimitMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
)
from src.api.router import build_router
from src.api.static import mount_frontend
from src.core.config import settings
from src.core.logger import get_logger
from src.models.registry import ResourceRegistry, build_registry
from src.services.provisioning_service import ProvisioningService
from src.stores.database import Database

logger = get_logger(__name__)


def setup_cors(app: FastAPI) -> None:
    """
    Setup CORS middleware with configurable origins.

    Args:
        app: FastAPI application instance
    """
    cors_origins = settings.cors_allow_origins_list
    cors_credentials = settings.cors__allow_credentials
    cors_methods = settings.cors_allow_methods_list
    cors_headers = settings.cors_allow_headers_list

    if cors_origins and cors_origins != [""]:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=cors_credentials,
            allow_methods=cors_methods,
            allow_headers=cors_headers,
        )
        logger.info("CORS middleware configured:")
        logger.info("  Origins: %s", cors_origins)
        logger.info("  Credentials: %s", cors_credentials)
        logger.info("  Methods: %s", cors_methods)
        logger.info("  Headers: %s", cors_headers)
    else:
        logger.info("CORS middleware skipped (no origins configured)")


def setup_compression(app: FastAPI) -> None:
    """
    Setup response compression middleware.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    logger.info("GZip compression middleware configured")


def setup_body_limit(app: FastAPI) -> None:
    """
    Reject oversized request bodies before they reach the handlers.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(
        BodySizeLimitMiddleware, max_body_bytes=settings.api__max_body_bytes
    )
    logger.info("Body size limit configured: %d bytes", settings.api__max_body_bytes)


def setup_logging_middleware(app: FastAPI) -> None:
    """
    Setup request logging and ID middleware.

    Args:
        app: FastAPI application instance
    """
    # Last added runs first: the request ID must exist before logging uses it.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    logger.info("Request logging and ID middleware configured")


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Setup global exception handlers.

    Args:
        app: FastAPI application instance
    """
    register_exception_handlers(app)
    logger.info("Global exception handlers configured")


def setup_logfire_instrumentation(app: FastAPI, database: Database) -> None:
    """
    Setup Logfire configuration and FastAPI/SQLAlchemy instrumentation.

    Args:
        app: FastAPI application instance
        database: Datastore whose engine should be traced
    """
    try:
        from src.core.logfire_config import initialize_logfire

        results = initialize_logfire(app, database.engine)

        if results["configured"]:
            enabled_instruments = [
                name for name, enabled in results["instrumentation"].items() if enabled
            ]
            logger.info(
                "Logfire initialized; instrumentation enabled for: %s",
                ", ".join(enabled_instruments) or "nothing",
            )
        else:
            logger.debug("Logfire initialization skipped (disabled or not available)")

    except ImportError:
        logger.debug("Logfire not available for instrumentation")


def setup_metrics_hooks(app: FastAPI) -> None:
    """
    Add a processing-time header to every response.

    Args:
        app: FastAPI application instance
    """

    @app.middleware("http")
    async def metrics_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        import time

        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    logger.info("Basic metrics hooks configured")


def _lifespan(owns_database: bool, auto_provision: bool):
    """Build the lifespan that provisions and finally disposes the datastore."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database: Database = app.state.database
        if auto_provision:
            provisioning = ProvisioningService(database, app.state.registry)
            await run_in_threadpool(provisioning.provision)
        try:
            yield
        finally:
            if owns_database:
                database.dispose()

    return lifespan


def create_api(
    title: str = "hotel-api",
    description: str = "Generic resource API for the hotel management app",
    version: str = "1.0.0",
    docs_url: str = "/docs",
    redoc_url: str = "/redoc",
    database: Optional[Database] = None,
    registry: Optional[ResourceRegistry] = None,
    auto_provision: Optional[bool] = None,
    enable_cors: bool = True,
    enable_compression: bool = True,
    enable_metrics: bool = True,
    serve_frontend: bool = True,
    mount_prefix: str = "",
) -> FastAPI:
    """
    Create and configure FastAPI application with all middleware.

    Args:
        title: API title
        description: API description
        version: API version
        docs_url: URL path for API documentation (Swagger UI)
        redoc_url: URL path for ReDoc documentation
        database: Datastore handle to use; one is created (and disposed on
            shutdown) from settings when omitted
        registry: Resource registry; built from the table metadata when omitted
        auto_provision: Provision tables and seed data at startup; defaults
            to the configured value
        enable_cors: Whether to enable CORS middleware
        enable_compression: Whether to enable GZip compression
        enable_metrics: Whether to enable metrics collection
        serve_frontend: Whether to mount the static frontend at ``/``
        mount_prefix: Prefix for mounting the API router

    Returns:
        Configured FastAPI application
    """
    owns_database = database is None
    if auto_provision is None:
        auto_provision = settings.provisioning__auto_provision

    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url=docs_url,
        redoc_url=redoc_url,
        lifespan=_lifespan(owns_database, auto_provision),
    )
    app.state.database = database or Database()
    app.state.registry = registry or build_registry()

    # Setup middleware in reverse order (last added = first executed)

    if enable_metrics:
        setup_metrics_hooks(app)

    if enable_compression:
        setup_compression(app)

    setup_body_limit(app)

    if enable_cors:
        setup_cors(app)

    # Logging middleware should be early in the chain
    setup_logging_middleware(app)

    setup_exception_handlers(app)

    setup_logfire_instrumentation(app, app.state.database)

    app.include_router(build_router(), prefix=mount_prefix)

    if serve_frontend:
        mount_frontend(app)

    logger.info(
        "API factory created: %s v%s (resources: %s)",
        title,
        version,
        ", ".join(app.state.registry.names()),
    )
    return app
