"""FastAPI application initialization and configuration module.

This module handles:
- Application lifecycle: store connectivity check, table creation and
  seeding at startup, engine disposal at shutdown
- Middleware registration in the correct order
- Exception handler registration
- Root capability listing and health check endpoints
- OpenTelemetry instrumentation

Middleware are executed in reverse order of registration.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from product_api.api.constants import PRODUCTS_PREFIX
from product_api.api.middleware.error_handler import register_exception_handlers
from product_api.api.middleware.request_context import RequestContextMiddleware
from product_api.api.middleware.request_logging import RequestLoggingMiddleware
from product_api.api.routes.products import router as products_router
from product_api.api.schemas.products import HealthResponse, RootResponse
from product_api.api.utils.responses import ORJSONResponse
from product_api.core.config import Settings, get_settings
from product_api.core.logging import setup_logging
from product_api.core.observability import instrument_app, setup_tracing
from product_api.infrastructure.database.seed import seed_products
from product_api.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_tables,
    get_async_session,
    get_engine,
)


async def seed_if_empty() -> None:
    """Seed fixture products; a failure is logged and startup continues."""
    try:
        async with get_async_session() as session:
            await seed_products(session)
    except SQLAlchemyError as e:
        logger.error("Seeding sample products failed: {}", e)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    settings = get_settings()

    is_healthy, error_msg = await check_database_connection()
    if is_healthy:
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    if settings.database_config.create_tables:
        await create_tables()

    if settings.seed_on_startup:
        await seed_if_empty()

    if settings.api_key is None:
        logger.warning("API_KEY is not set; create, update and delete are disabled")

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_exception_handlers(application)

    # 2. Request logging middleware (logs requests/responses)
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)

    # 1. Request context middleware (correlation and request IDs)
    application.add_middleware(RequestContextMiddleware)

    @application.get("/")
    async def root() -> RootResponse:
        """List the main endpoints of the API."""
        return RootResponse(
            message="Welcome to the Product API!",
            endpoints={
                "products": PRODUCTS_PREFIX,
                "search": f"{PRODUCTS_PREFIX}/search",
                "statistics": f"{PRODUCTS_PREFIX}/statistics",
            },
        )

    @application.get("/health")
    async def health() -> HealthResponse:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            HealthResponse: ``healthy`` with store connectivity, or
                ``degraded`` when the store does not answer.
        """
        is_healthy, error_msg = await check_database_connection()

        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)
            return HealthResponse(status="degraded", database=False)

        logger.bind(
            metric_type="db.pool.health",
            pool_status=get_engine().pool.status(),
        ).debug("Database pool health check")

        return HealthResponse(status="healthy", database=True)

    application.include_router(products_router)

    instrument_app(application, settings)

    return application


app = create_app()
