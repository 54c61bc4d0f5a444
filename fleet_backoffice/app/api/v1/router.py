"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from fleet_backoffice.app.api.v1.endpoints import (
    vehicles, drivers, maintenance, fuel_logs,
    alerts, reports, checklists, dashboard
)

router = APIRouter()

# Fleet register
router.include_router(vehicles.router)
router.include_router(drivers.router)

# Operations
router.include_router(maintenance.router)
router.include_router(fuel_logs.router)
router.include_router(checklists.router)

# Monitoring
router.include_router(alerts.router)
router.include_router(reports.router)
router.include_router(dashboard.router)
