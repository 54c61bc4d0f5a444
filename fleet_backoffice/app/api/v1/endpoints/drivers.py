"""
Driver API Endpoints.

Driver register plus the vehicle assignment, which keeps the driver's plate
and the vehicle's driver in step.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_
from typing import List, Optional
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.models.driver import Driver
from fleet_backoffice.app.models.vehicle import Vehicle
from fleet_backoffice.app.models.enums import DriverStatus
from fleet_backoffice.app.schemas.driver import (
    DriverCreate, DriverUpdate, DriverResponse, DriverListResponse,
    DriverVehicleAssignment, ExpiringLicense
)
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.calculations import expiring_licenses, days_until
from fleet_backoffice.app.services.fleet_assignment import assign_vehicle
from fleet_backoffice.app.services.persistence import get_or_404, commit_or_conflict, paginate

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.get("", response_model=DriverListResponse)
async def list_drivers(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    driver_status: Optional[DriverStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Matches name or email"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List drivers, newest first."""
    query = select(Driver)
    if driver_status:
        query = query.where(Driver.status == driver_status.value)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Driver.name.ilike(pattern), Driver.email.ilike(pattern)))
    query = query.order_by(Driver.created_at.desc(), Driver.id.desc())

    drivers, total = await paginate(db, query, page, page_size)

    return DriverListResponse(
        drivers=[DriverResponse.model_validate(d) for d in drivers],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/expiring-licenses", response_model=List[ExpiringLicense])
async def list_expiring_licenses(
    days: int = Query(settings.license_warning_days, ge=0, le=365),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Drivers whose license expires within the next `days` days, soonest first."""
    result = await db.execute(select(Driver).where(Driver.license_expiry != None))
    expiring = expiring_licenses(result.scalars().all(), days=days)

    return [
        ExpiringLicense(
            driver_id=driver.id,
            name=driver.name,
            license_category=driver.license_category,
            license_expiry=driver.license_expiry,
            days_until_expiry=days_until(driver.license_expiry),
        )
        for driver in sorted(expiring, key=lambda d: d.license_expiry)
    ]


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    driver = await get_or_404(db, Driver, driver_id, "Driver")
    return DriverResponse.model_validate(driver)


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    driver = Driver(**driver_data.model_dump())
    db.add(driver)
    await commit_or_conflict(db, "Driver could not be saved")
    await db.refresh(driver)

    await log_event(
        db=db,
        action=AuditAction.DRIVER_CREATED,
        current_user=current_user,
        entity="drivers",
        entity_id=driver.id,
        metadata={"name": driver.name}
    )

    return DriverResponse.model_validate(driver)


@router.patch("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: int,
    driver_data: DriverUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    driver = await get_or_404(db, Driver, driver_id, "Driver")

    update_data = driver_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(driver, field, value)

    await commit_or_conflict(db, "Driver could not be saved")
    await db.refresh(driver)

    await log_event(
        db=db,
        action=AuditAction.DRIVER_UPDATED,
        current_user=current_user,
        entity="drivers",
        entity_id=driver.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return DriverResponse.model_validate(driver)


@router.put("/{driver_id}/vehicle", response_model=DriverResponse)
async def set_driver_vehicle(
    driver_id: int,
    assignment: DriverVehicleAssignment,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Assign a vehicle to the driver, or release it with `vehicle_plate: null`.

    The driver's previous vehicle is freed, the new vehicle points at the
    driver, and a driver that held the new vehicle before loses it. All of it
    is committed together.
    """
    driver = await get_or_404(db, Driver, driver_id, "Driver")
    previous_plate = driver.vehicle_plate

    await assign_vehicle(db, driver, assignment.vehicle_plate)
    await commit_or_conflict(db, "Vehicle assignment could not be saved")
    await db.refresh(driver)

    await log_event(
        db=db,
        action=AuditAction.DRIVER_VEHICLE_ASSIGNED,
        current_user=current_user,
        entity="drivers",
        entity_id=driver.id,
        metadata={"previous_plate": previous_plate, "vehicle_plate": driver.vehicle_plate}
    )

    return DriverResponse.model_validate(driver)


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_driver(
    driver_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove a driver. Its vehicle is released; filed inspections block removal (409)."""
    driver = await get_or_404(db, Driver, driver_id, "Driver")
    name = driver.name

    await db.execute(update(Vehicle).where(Vehicle.driver_id == driver.id).values(driver_id=None))
    await db.delete(driver)
    await commit_or_conflict(db, "Driver is still referenced by inspection checklists", {"driver_id": driver_id})

    await log_event(
        db=db,
        action=AuditAction.DRIVER_DELETED,
        current_user=current_user,
        entity="drivers",
        entity_id=driver_id,
        metadata={"name": name}
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
