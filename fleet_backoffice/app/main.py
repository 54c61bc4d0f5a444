"""
FastAPI Application Entry Point.

This is the main application file for the Fleet Back-Office API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.api.v1.router import router as api_v1_router
from fleet_backoffice.app.db.session import engine, Base
from fleet_backoffice.app.core.observability import ObservabilityMiddleware, configure_logging
from fleet_backoffice.app.core.redis_client import ping_redis
from fleet_backoffice.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from fleet_backoffice.app.models.driver import Driver
from fleet_backoffice.app.models.vehicle import Vehicle
from fleet_backoffice.app.models.maintenance import MaintenanceRecord
from fleet_backoffice.app.models.fuel_log import FuelLog
from fleet_backoffice.app.models.alert import Alert
from fleet_backoffice.app.models.report import Report
from fleet_backoffice.app.models.checklist import Checklist
from fleet_backoffice.app.models.audit_log import AuditLog

logger = logging.getLogger("fleet.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging.
    2. Creates database tables on startup.
    """
    configure_logging(settings.log_level)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started", settings.app_name, settings.api_version)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Back-office API for fleet management: vehicles, drivers, maintenance, fuel, alerts, reports and inspections",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status, application information and cache reachability
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "cache": "up" if await ping_redis() else "down",
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to the Fleet Back-Office API",
        "docs": "/docs",
        "health": "/health",
    }
