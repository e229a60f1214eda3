"""
LaunchPad FastAPI application entry point.

Flow: wizard submission → pending startup → admin moderation → public listing
"""

import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app import __version__
from app.config import get_settings
from app.db.session import check_db_connection, engine
from app.services.errors import DependencyError, ServiceError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("LaunchPad starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise
        settings = get_settings()
        if not settings.secret_key:
            logger.warning("SECRET_KEY is not set; every bearer token will be rejected")
        logger.info("Blob storage backend: %s (bucket=%s)", settings.storage_backend, settings.storage_bucket)
        yield
    finally:
        logger.info("LaunchPad shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Map service-layer errors to ``{"detail": ...}`` with their HTTP status."""
    content: dict = {"detail": exc.message}
    if isinstance(exc, DependencyError):
        logger.error("Dependency failure on %s %s: %s", request.method, request.url.path, exc.error)
        content["error"] = exc.error or exc.message
    return JSONResponse(status_code=exc.status_code, content=content)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.add_exception_handler(ServiceError, service_error_handler)

    # Mount API routes
    from app.api.admin import router as admin_router
    from app.api.auth import router as auth_router
    from app.api.dashboard import router as dashboard_router
    from app.api.public import router as public_router
    from app.api.startups import router as startups_router

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(startups_router, prefix="/api/startups", tags=["startups"])
    app.include_router(public_router, prefix="/api/public", tags=["public"])
    app.include_router(dashboard_router, prefix="/api/dashboard", tags=["dashboard"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])

    # Internal job endpoints (cron/scripts, token-authenticated)
    from app.api.internal import router as internal_router

    app.include_router(internal_router, tags=["internal"])

    # Local blob store: serve uploaded files where their public URLs point
    if settings.storage_backend == "local":
        upload_prefix = urlparse(settings.storage_public_base_url).path.rstrip("/") or "/uploads"
        app.mount(
            upload_prefix,
            StaticFiles(directory=settings.storage_local_root, check_dir=False),
            name="uploads",
        )

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        from sqlalchemy import text

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except Exception:
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()
