"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from academia.core.config import get_settings
from academia.core.logging import configure_logging, get_logger
from academia.domain.exceptions import AcademiaError
from academia.infrastructure.api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from academia.infrastructure.auth.middleware import SessionAuthenticationMiddleware
from academia.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

SERVICE_NAME = "Academia Pro"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings = get_settings()

    configure_logging(settings)
    logger.info(
        "Starting Academia Pro",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down Academia Pro")
    await close_database()
    logger.info("Database connection closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Multi-tenant authentication and authorization for school management",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check
        database connectivity or other dependencies.
        """
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": get_settings().app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint, including database connectivity."""
        db_healthy = await get_db_manager().check_connection()

        if db_healthy:
            return {
                "status": "ready",
                "service": SERVICE_NAME,
                "version": get_settings().app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": SERVICE_NAME,
                "database": "disconnected",
            },
        )

    @app.get("/live", tags=["health"])
    async def liveness_check():
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": SERVICE_NAME,
            "version": get_settings().app_version,
        }


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from academia.infrastructure.api.routes import (
        auth_router,
        delegated_school_admins_router,
        iam_router,
        permissions_router,
        roles_router,
        school_router,
        schools_router,
    )

    settings = get_settings()
    prefix = settings.api_prefix

    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])

    # Super admin routes
    app.include_router(iam_router, prefix=f"{prefix}/super-admin/iam", tags=["iam"])
    app.include_router(
        permissions_router,
        prefix=f"{prefix}/super-admin/iam/permissions",
        tags=["iam"],
    )
    app.include_router(roles_router, prefix=f"{prefix}/super-admin/iam/roles", tags=["iam"])
    app.include_router(schools_router, prefix=f"{prefix}/super-admin/schools", tags=["schools"])

    # Tenant routes (must come after the more specific super admin prefixes)
    app.include_router(
        delegated_school_admins_router,
        prefix=f"{prefix}/school/delegated-admins",
        tags=["school"],
    )
    app.include_router(school_router, prefix=f"{prefix}/school", tags=["school"])

    @app.get(prefix, tags=["root"])
    async def api_root():
        """API root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "api_version": "v1",
        }


def _error_response(
    request: Request,
    status_code: int,
    message: Any,
    **extra: Any,
) -> JSONResponse:
    """Render the uniform error envelope and log the failure."""
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request failed",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        error_message=message,
    )
    content = {
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "method": request.method,
        "message": message,
        **extra,
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Every error leaves the API in the same envelope:
    ``statusCode``, ``timestamp``, ``path``, ``method`` and ``message``.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = _error_response(request, exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"][1:]) or "body",
                "message": error["msg"],
                "code": error["type"],
            }
            for error in exc.errors()
        ]
        message = errors[0]["message"] if errors else "Validation failed"
        return _error_response(request, 400, message, errors=errors)

    @app.exception_handler(AcademiaError)
    async def academia_exception_handler(request: Request, exc: AcademiaError):
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.exception(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            exc_type=type(exc).__name__,
        )
        return _error_response(request, 500, "Internal server error")


def register_middleware(app: FastAPI) -> None:
    """Register middleware.

    Starlette runs middleware in reverse order of registration, so the
    request logger sees every request first and CORS answers preflights
    before authentication runs.

    Args:
        app: FastAPI application instance.
    """
    settings = get_settings()

    app.add_middleware(SessionAuthenticationMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)


# Create the application instance
app = create_app()
