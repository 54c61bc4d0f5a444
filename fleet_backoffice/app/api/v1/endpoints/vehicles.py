"""
Vehicle API Endpoints.

Fleet register: list, inspect, create, edit and remove vehicles. Setting
`driver_id` on a vehicle also updates the driver's plate.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_
from typing import Optional
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.models.driver import Driver
from fleet_backoffice.app.models.vehicle import Vehicle
from fleet_backoffice.app.models.enums import VehicleStatus
from fleet_backoffice.app.schemas.vehicle import (
    VehicleCreate, VehicleUpdate, VehicleResponse, VehicleListResponse
)
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.fleet_assignment import assign_driver, rename_plate
from fleet_backoffice.app.services.persistence import (
    get_or_404, commit_or_conflict, flush_or_conflict, paginate
)

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])

PLATE_CONFLICT = "A vehicle with this plate already exists or the plate is still referenced"


async def load_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    """Fresh read including the assigned driver."""
    result = await db.execute(
        select(Vehicle)
        .where(Vehicle.id == vehicle_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    vehicle_status: Optional[VehicleStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Matches plate, make or model"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List vehicles, newest first."""
    query = select(Vehicle)
    if vehicle_status:
        query = query.where(Vehicle.status == vehicle_status.value)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Vehicle.plate.ilike(pattern),
            Vehicle.make.ilike(pattern),
            Vehicle.model.ilike(pattern),
        ))
    query = query.order_by(Vehicle.created_at.desc(), Vehicle.id.desc())

    vehicles, total = await paginate(db, query, page, page_size)

    return VehicleListResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in vehicles],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    vehicle = await get_or_404(db, Vehicle, vehicle_id, "Vehicle")
    return VehicleResponse.model_validate(vehicle)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a vehicle.

    When `driver_id` is given the driver is moved onto this vehicle in the
    same transaction.
    """
    fields = vehicle_data.model_dump(exclude={"driver_id"})
    vehicle = Vehicle(**fields)
    db.add(vehicle)
    await flush_or_conflict(db, PLATE_CONFLICT, {"plate": vehicle.plate})

    if vehicle_data.driver_id is not None:
        await assign_driver(db, vehicle, vehicle_data.driver_id)

    await commit_or_conflict(db, PLATE_CONFLICT, {"plate": vehicle.plate})

    await log_event(
        db=db,
        action=AuditAction.VEHICLE_CREATED,
        current_user=current_user,
        entity="vehicles",
        entity_id=vehicle.id,
        metadata={"plate": vehicle.plate, "driver_id": vehicle.driver_id}
    )

    return VehicleResponse.model_validate(await load_vehicle(db, vehicle.id))


@router.patch("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: int,
    vehicle_data: VehicleUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update the provided fields only.

    A new plate is carried over to the assigned driver. Fuel logs and
    maintenance records keep the plate they were filed under, and a plate
    already referenced by a checklist cannot change (409).
    """
    vehicle = await get_or_404(db, Vehicle, vehicle_id, "Vehicle")

    update_data = vehicle_data.model_dump(exclude_unset=True)
    driver_changed = "driver_id" in update_data
    new_driver_id = update_data.pop("driver_id", None)

    old_plate = vehicle.plate
    for field, value in update_data.items():
        setattr(vehicle, field, value)
    await flush_or_conflict(db, PLATE_CONFLICT, {"plate": vehicle.plate})

    if vehicle.plate != old_plate:
        await rename_plate(db, old_plate, vehicle.plate)
    if driver_changed:
        await assign_driver(db, vehicle, new_driver_id)

    await commit_or_conflict(db, PLATE_CONFLICT, {"plate": vehicle.plate})

    await log_event(
        db=db,
        action=AuditAction.VEHICLE_UPDATED,
        current_user=current_user,
        entity="vehicles",
        entity_id=vehicle.id,
        metadata={
            "plate": vehicle.plate,
            "updated_fields": list(vehicle_data.model_dump(exclude_unset=True).keys())
        }
    )

    return VehicleResponse.model_validate(await load_vehicle(db, vehicle.id))


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Remove a vehicle. Drivers holding its plate are released; a vehicle that
    still has inspections on file cannot be removed (409).
    """
    vehicle = await get_or_404(db, Vehicle, vehicle_id, "Vehicle")
    plate = vehicle.plate

    await db.execute(update(Driver).where(Driver.vehicle_plate == plate).values(vehicle_plate=None))
    await db.delete(vehicle)
    await commit_or_conflict(
        db, "Vehicle is still referenced by inspection checklists", {"plate": plate}
    )

    await log_event(
        db=db,
        action=AuditAction.VEHICLE_DELETED,
        current_user=current_user,
        entity="vehicles",
        entity_id=vehicle_id,
        metadata={"plate": plate}
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
