"""
Org Chart Service - Main Application
====================================

FastAPI application for the organizational hierarchy graph engine.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import settings
from shared.logging import get_logger, setup_logging
from shared.models.common import HealthResponse

from services.org_chart import __version__
from services.org_chart.builder.store import session_store
from services.org_chart.graph.errors import (
    DataError,
    ExportError,
    GraphValidationError,
    OrgChartError,
)
from services.org_chart.routes import builder, charts

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="org-chart",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "org_chart_starting",
        environment=settings.environment.value,
        port=settings.ports.org_chart,
        grid_size=settings.layout.grid_size,
    )

    yield

    # Shutdown
    logger.info("org_chart_shutting_down", open_sessions=len(session_store))
    session_store.clear()


# Create FastAPI application
app = FastAPI(
    title="Org Chart Service",
    description="Organizational hierarchy graph engine: layout, chart building and export",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Reports the in-process builder session store.
    """
    return HealthResponse(
        status="healthy",
        service="org-chart",
        version=__version__,
        components={
            "builder_sessions": {
                "status": "healthy",
                "open": len(session_store),
                "capacity": session_store.max_sessions,
            },
        },
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Org Chart Service",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    charts.router,
    prefix="/api/v1/charts",
    tags=["Charts"],
)

app.include_router(
    builder.router,
    prefix="/api/v1/builder",
    tags=["Chart Builder"],
)


# ============================================================================
# Error Handlers
# ============================================================================

_ERROR_STATUS: dict[type[OrgChartError], int] = {
    DataError: status.HTTP_400_BAD_REQUEST,
    GraphValidationError: status.HTTP_409_CONFLICT,
    ExportError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Any, exc: HTTPException) -> Any:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(OrgChartError)
async def org_chart_exception_handler(request: Any, exc: OrgChartError) -> Any:
    """Handle chart errors that escaped an operation boundary."""
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(
        "org_chart_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "error_code": type(exc).__name__,
            "status_code": status_code,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Any, exc: Exception) -> Any:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.org_chart.main:app",
        host="0.0.0.0",
        port=settings.ports.org_chart,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
