"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from scopeguard.core.config import settings
from scopeguard.core.logging import configure_logging
from scopeguard.api.routes import router as api_router
from scopeguard.api.dependencies.database import get_db
from scopeguard.api.middleware.logging import LoggingMiddleware
from scopeguard.models.database import close_db, ping
from scopeguard.utils.context import RequestContextMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    logger.info("app.startup", version=settings.app_version, environment=settings.environment)

    yield

    await close_db()
    logger.info("app.shutdown")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (order matters - last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)

    # Routes
    app.include_router(api_router, prefix="/api")

    # Store faults are not denials: surface them as 500
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.exception("request.failed", path=request.url.path, error_type=type(exc).__name__)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    @app.get("/health")
    async def health_check():
        """Quick health check endpoint (for load balancers)."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    @app.get("/health/ready")
    async def readiness_check(db: AsyncSession = Depends(get_db)):
        """Readiness check: the assignment tables must be reachable."""
        try:
            await ping(db)
        except SQLAlchemyError as exc:
            logger.error("health.database_unavailable", error=str(exc))
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "database": "unavailable"},
            )
        return {"status": "ready", "database": "connected"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("scopeguard.main:app", host="0.0.0.0", port=8000)
