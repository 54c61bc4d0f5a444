"""
Dashboard service.

Builds the fleet overview (headline counters, computed alerts and the recent
activity feed) and caches it in Redis. Cache failures are logged and the
overview is computed directly.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from redis.exceptions import RedisError
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.models.alert import AlertType, AlertPriority
from fleet_backoffice.app.models.driver import Driver
from fleet_backoffice.app.models.enums import DriverStatus, MaintenanceStatus
from fleet_backoffice.app.models.fuel_log import FuelLog
from fleet_backoffice.app.models.maintenance import MaintenanceRecord
from fleet_backoffice.app.models.vehicle import Vehicle
from fleet_backoffice.app.schemas.dashboard import ActivityEntry, DashboardOverview, ImportantAlert
from fleet_backoffice.app.services.audit import get_recent_activity
from fleet_backoffice.app.services.calculations import (
    average_fuel_economy, days_until, expiring_licenses,
)

logger = logging.getLogger("fleet.dashboard")

OVERVIEW_CACHE_KEY = "dashboard:overview"
URGENT_LICENSE_DAYS = 7


def vehicle_label(vehicle: Vehicle) -> str:
    return f"{vehicle.make} {vehicle.model} {vehicle.plate}"


async def compute_important_alerts(db: AsyncSession, today: Optional[date] = None) -> List[ImportantAlert]:
    """Overdue maintenance, licenses about to expire and vehicles low on fuel."""
    today = today or date.today()
    alerts: List[ImportantAlert] = []

    overdue = await db.execute(
        select(Vehicle)
        .where(Vehicle.next_maintenance != None, Vehicle.next_maintenance < today)
        .order_by(Vehicle.next_maintenance)
    )
    for vehicle in overdue.scalars().all():
        alerts.append(ImportantAlert(
            alert_type=AlertType.OVERDUE_MAINTENANCE.value,
            priority=AlertPriority.HIGH.value,
            description=(
                f"{vehicle_label(vehicle)} - manutenção prevista para "
                f"{vehicle.next_maintenance.strftime('%d/%m/%Y')}"
            ),
            vehicle_plate=vehicle.plate,
        ))

    drivers = await db.execute(select(Driver).where(Driver.license_expiry != None))
    expiring = expiring_licenses(drivers.scalars().all(), days=settings.license_warning_days, today=today)
    for driver in sorted(expiring, key=lambda d: d.license_expiry):
        remaining = days_until(driver.license_expiry, today)
        alerts.append(ImportantAlert(
            alert_type=AlertType.LICENSE_EXPIRING.value,
            priority=(AlertPriority.HIGH if remaining <= URGENT_LICENSE_DAYS else AlertPriority.MEDIUM).value,
            description=f"{driver.name} - Categoria {driver.license_category} ({remaining} dias)",
            driver=driver.name,
            vehicle_plate=driver.vehicle_plate,
        ))

    low_fuel = await db.execute(
        select(Vehicle)
        .where(Vehicle.fuel_level <= settings.low_fuel_threshold_percent)
        .order_by(Vehicle.fuel_level)
    )
    for vehicle in low_fuel.scalars().all():
        alerts.append(ImportantAlert(
            alert_type=AlertType.LOW_FUEL.value,
            priority=AlertPriority.MEDIUM.value,
            description=f"{vehicle_label(vehicle)} - {vehicle.fuel_level:.0f}% restante",
            vehicle_plate=vehicle.plate,
        ))

    return alerts


async def build_overview(db: AsyncSession) -> DashboardOverview:
    total_vehicles = (await db.execute(select(func.count(Vehicle.id)))).scalar() or 0
    active_drivers = (await db.execute(
        select(func.count(Driver.id)).where(Driver.status == DriverStatus.ACTIVE.value)
    )).scalar() or 0
    pending_maintenance = (await db.execute(
        select(func.count(MaintenanceRecord.id)).where(
            MaintenanceRecord.status == MaintenanceStatus.SCHEDULED.value
        )
    )).scalar() or 0

    logs = (await db.execute(select(FuelLog))).scalars().all()
    activity = await get_recent_activity(db, limit=settings.recent_activity_limit)

    return DashboardOverview(
        total_vehicles=total_vehicles,
        active_drivers=active_drivers,
        pending_maintenance=pending_maintenance,
        average_fuel_economy=round(average_fuel_economy(logs), 2),
        important_alerts=await compute_important_alerts(db),
        recent_activity=[ActivityEntry.model_validate(entry) for entry in activity],
        generated_at=datetime.now(timezone.utc),
    )


async def get_overview(db: AsyncSession, redis, refresh: bool = False) -> DashboardOverview:
    """
    Cached overview.

    Args:
        db: Database session
        redis: Redis client (or a compatible fake)
        refresh: Skip the cached copy and recompute
    """
    if not refresh:
        try:
            cached = await redis.get(OVERVIEW_CACHE_KEY)
        except RedisError as exc:
            logger.warning("Dashboard cache read failed: %s", exc)
            cached = None
        if cached:
            return DashboardOverview.model_validate_json(cached)

    overview = await build_overview(db)

    try:
        await redis.set(OVERVIEW_CACHE_KEY, overview.model_dump_json(), ex=settings.dashboard_cache_ttl_seconds)
    except RedisError as exc:
        logger.warning("Dashboard cache write failed: %s", exc)

    return overview
