"""
FastAPI Application Entry Point

UaiFood Restaurant Ordering API.

Endpoints (all resource routes live under /api):
    - /api/users: registration, login, self-service, admin management
    - /api/categories, /api/items: menu catalog
    - /api/addresses: the caller's address book
    - /api/orders: order placement, listing and status workflow
    - GET /health: System health check

Run with:
    uvicorn uaifood.main:create_app --factory --port 3001

Author: UaiFood Team
Version: 1.0.0
"""

import asyncio
import logging
import sys
from datetime import datetime
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from uaifood.celery_worker import configure_celery
from uaifood.core.auth import get_app_settings
from uaifood.core.config import Settings, get_settings, setup_logging
from uaifood.core.errors import ConfigurationError, DomainError
from uaifood.core.security import TokenService
from uaifood.database import build_engine, build_session_maker, get_db, init_db
from uaifood.routers import ALL_ROUTERS
from uaifood.schemas import HealthResponse

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info(f"   Ledger export: {settings.ledger_export_enabled}")
    logger.info("=" * 60)

    await init_db(app.state.engine)
    logger.info("✅ Database initialized")
    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await app.state.engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map a tagged domain error to its status code."""
    logger.info(
        f"{request.method} {request.url.path} -> {exc.status_code} "
        f"{exc.kind.value}: {exc.message} {exc.context or ''}"
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "message": "Validation error",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    settings: Settings = request.app.state.settings
    message = "Internal server error."
    if settings.debug:
        message = f"Internal server error: {exc}"
    return JSONResponse(status_code=500, content={"message": message})


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around one Settings instance.

    Raises:
        ConfigurationError: a setting required by verified routes is missing
    """
    settings = settings or get_settings()
    setup_logging(settings)

    missing = settings.validate_security_config()
    if missing:
        logger.critical(f"Missing required configuration: {missing}")
        raise ConfigurationError(missing)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Restaurant ordering API: accounts, menu catalog, address book "
            "and order tracking with JWT authentication."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    app.state.token_service = TokenService(settings)
    configure_celery(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    for router in ALL_ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)

    _register_system_routes(app)
    return app


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

def _register_system_routes(app: FastAPI) -> None:

    @app.get("/", tags=["Root"])
    async def root(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
        """API root with navigation links."""
        return {
            "message": f"🍽️ Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.env_mode.value,
            "documentation": "/docs",
            "health": "/health",
        }

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="System Health Check",
    )
    async def health_check(
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(get_app_settings),
    ) -> HealthResponse:
        """Verify the database is reachable."""
        db_status = "healthy"
        try:
            await db.execute(select(1))
        except Exception as e:
            db_status = f"unhealthy: {e}"
            logger.error(f"Database health check failed: {e}")

        return HealthResponse(
            status="operational" if db_status == "healthy" else "degraded",
            database=db_status,
            environment=settings.env_mode.value,
            timestamp=datetime.now(),
        )


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "uaifood.main:create_app",
        factory=True,
        host=_settings.api_host,
        port=_settings.api_port,
    )
