from contextlib import asynccontextmanager
from typing import AsyncGenerator
import json
from datetime import datetime, UTC

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from peniel.api.schemas import HealthResponse, ErrorResponse
from peniel.api.v1.admin import router as admin_router
from peniel.api.v1.auth import router as auth_router
from peniel.api.v1.contact import router as contact_router
from peniel.api.v1.content import router as content_router
from peniel.api.v1.inspiration import router as inspiration_router
from peniel.core import dependencies
from peniel.core.config import settings
from peniel.core.logging import setup_logging, get_logger
from peniel.core.observability import metrics_router, setup_observability
from peniel.domain.exceptions import ContentNotFoundException, DomainException
from peniel.infrastructure.db.database import Database
from peniel.infrastructure.email.resend_client import ResendEmailSender
from peniel.infrastructure.storage.file_storage import LocalFileStorage

logger = get_logger(__name__)


class CustomJSONResponse(JSONResponse):
    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
            default=jsonable_encoder,
        ).encode("utf-8")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    await startup_event(app)

    try:
        yield
    finally:
        await shutdown_event(app)


async def startup_event(app: FastAPI) -> None:
    """Initialize application dependencies."""
    logger.info("Starting up Peniel Site API", version=settings.version)

    try:
        setup_observability()

        dependencies.database = Database(settings.database_url, settings.database_echo)
        await dependencies.database.initialize()
        await dependencies.database.create_all()

        dependencies.file_storage = LocalFileStorage(
            root=settings.storage_root,
            public_base_url=settings.storage_public_base_url,
            buckets=settings.get_storage_buckets(),
        )

        if settings.email_configured():
            dependencies.email_sender = ResendEmailSender(
                api_key=settings.resend_api_key,
                api_url=settings.resend_api_url,
                timeout=settings.resend_timeout_seconds,
            )
        else:
            logger.warning("Email sending disabled: Resend settings are incomplete")

        db_healthy = await dependencies.database.health_check()
        if not db_healthy:
            raise RuntimeError("Database health check failed")

        logger.info(
            "Application startup completed successfully",
            database_healthy=db_healthy,
            environment=settings.environment,
        )

    except Exception as e:
        logger.error("Application startup failed", error=str(e))
        raise


async def shutdown_event(app: FastAPI) -> None:
    """Cleanup application resources."""
    logger.info("Shutting down Peniel Site API")

    try:
        if dependencies.database:
            await dependencies.database.close()

        logger.info("Application shutdown completed")

    except Exception as e:
        logger.error("Error during shutdown", error=str(e))


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Content API for the Peniel Global Ministry website",
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        lifespan=lifespan,
        default_response_class=CustomJSONResponse,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(inspiration_router, prefix="/api/v1")
    app.include_router(content_router, prefix="/api/v1")
    app.include_router(contact_router, prefix="/api/v1")
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")
    app.include_router(metrics_router)

    app.mount(
        "/storage",
        StaticFiles(directory=settings.storage_root, check_dir=False),
        name="storage",
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        services = {}

        if dependencies.database:
            services["database"] = await dependencies.database.health_check()
        services["email"] = dependencies.email_sender is not None

        healthy = services.get("database", False)

        return HealthResponse(
            status="healthy" if healthy else "unhealthy",
            timestamp=datetime.now(UTC),
            services=services,
            version=settings.version,
        )

    @app.exception_handler(ContentNotFoundException)
    async def not_found_handler(request, exc: ContentNotFoundException):
        return CustomJSONResponse(
            status_code=404,
            content=ErrorResponse(error="not_found", message=str(exc)).model_dump(),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request, exc: DomainException):
        logger.warning(
            "Domain error",
            error=str(exc),
            path=str(request.url.path),
            method=request.method,
        )
        return CustomJSONResponse(
            status_code=400,
            content=ErrorResponse(error="domain_error", message=str(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=str(request.url.path),
            method=request.method,
        )

        return CustomJSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="internal_server_error",
                message="An unexpected error occurred",
            ).model_dump(),
        )

    return app


# Create the application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "peniel.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
