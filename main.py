"""
KPI Dashboard - Main Application Entry Point

Role-based KPI tracking for call-center, dispatch and support teams.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kpi_dashboard.core.config import get_settings
from kpi_dashboard.core.exceptions import KpiDashboardError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting KPI Dashboard in {settings.ENVIRONMENT} mode...")
    if settings.AUTH_PROVIDER == "local" and not settings.LOCAL_JWT_SECRET:
        raise RuntimeError("LOCAL_JWT_SECRET must be set when AUTH_PROVIDER=local")

    from kpi_dashboard.api.deps import get_kpi_factor_repository
    from kpi_dashboard.infrastructure.local.database import init_db
    from kpi_dashboard.services.kpi_factor_service import KpiFactorService

    await init_db()

    # Seed the default factor list so the first request sees a stored config
    factor_service = KpiFactorService(get_kpi_factor_repository())
    config = await factor_service.get_config()
    logger.info(f"KPI factor configuration v{config.version} loaded ({len(config.factors)} factors)")

    yield

    # Shutdown
    logger.info("Shutting down KPI Dashboard...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="KPI Dashboard",
        description="Role-based KPI tracking dashboard",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG or settings.is_local else None,
        redoc_url="/redoc" if settings.DEBUG or settings.is_local else None,
    )

    @app.exception_handler(KpiDashboardError)
    async def handle_app_error(request: Request, exc: KpiDashboardError) -> JSONResponse:
        """Errors a router did not translate itself."""
        from kpi_dashboard.api.permissions import to_http_exception

        http_exc = to_http_exception(exc)
        if http_exc.status_code >= 500:
            logger.error(f"Unhandled application error on {request.url.path}: {exc}")
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from kpi_dashboard.api import auth, factors, kpis, logs, reports, teams, users

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(kpis.router, prefix="/api")
    app.include_router(factors.router, prefix="/api")
    app.include_router(reports.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(teams.router, prefix="/api")
    app.include_router(logs.router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
