"""Main FastAPI application for Learning Tracker."""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import router as api_router
from .config import get_settings
from .database.connection import db_manager
from .database.migrations import (
    create_tables,
    upgrade_add_progress_logs_unique_constraint,
)
from .observability.logging import clear_log_context, configure_logging, set_log_context

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    settings = get_settings()

    configure_logging(
        environment=settings.environment,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    db_manager.initialize()

    # Create tables if they don't exist
    await create_tables()

    # Run migrations
    await upgrade_add_progress_logs_unique_constraint()

    logger.info("%s v%s started", settings.app_name, settings.app_version)
    logger.info("Environment: %s", settings.environment)
    logger.info("Activity day zone: %s", settings.activity_timezone)

    yield

    # Shutdown
    logger.info("Shutting down %s...", settings.app_name)
    await db_manager.close()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Learning activity log and streak service",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.environment != "production" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_log_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        set_log_context(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_log_context()
        response.headers["X-Request-Id"] = request_id
        return response

    # Include API routes
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "endpoints": {
                "health": "/health",
                "record_activity": "POST /api/v1/activity",
                "streak": "GET /api/v1/streak",
                "recent_activity": "GET /api/v1/activity/recent",
            },
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get("/health/ready")
    async def health_ready():
        """Readiness probe: DB reachable."""
        try:
            from sqlalchemy import text

            from .database.connection import get_db_context
            async with get_db_context() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Readiness check failed: %s", e)
            return JSONResponse(
                {"status": "not_ready", "checks": {"database": f"error: {e}"}},
                status_code=503,
            )
        return {"status": "ready", "checks": {"database": "ok"}}

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "learning_tracker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
