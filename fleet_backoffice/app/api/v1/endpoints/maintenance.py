"""
Maintenance API Endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.models.maintenance import MaintenanceRecord
from fleet_backoffice.app.models.enums import MaintenanceStatus, MaintenanceType, MaintenanceDueStatus
from fleet_backoffice.app.schemas.maintenance import (
    MaintenanceCreate, MaintenanceUpdate, MaintenanceResponse, MaintenanceListResponse,
    MaintenanceStats
)
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.calculations import maintenance_due_status
from fleet_backoffice.app.services.persistence import get_or_404, commit_or_conflict, paginate

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


def to_response(record: MaintenanceRecord) -> MaintenanceResponse:
    response = MaintenanceResponse.model_validate(record)
    response.due_status = maintenance_due_status(
        record.date, upcoming_days=settings.maintenance_upcoming_days
    ).value
    return response


@router.get("", response_model=MaintenanceListResponse)
async def list_maintenance(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    vehicle_plate: Optional[str] = Query(None),
    maintenance_type: Optional[MaintenanceType] = Query(None),
    maintenance_status: Optional[MaintenanceStatus] = Query(None, alias="status"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List maintenance records, newest first, each with its due status."""
    query = select(MaintenanceRecord)
    if vehicle_plate:
        query = query.where(MaintenanceRecord.vehicle_plate == vehicle_plate.strip().upper())
    if maintenance_type:
        query = query.where(MaintenanceRecord.maintenance_type == maintenance_type.value)
    if maintenance_status:
        query = query.where(MaintenanceRecord.status == maintenance_status.value)
    query = query.order_by(MaintenanceRecord.created_at.desc(), MaintenanceRecord.id.desc())

    records, total = await paginate(db, query, page, page_size)

    return MaintenanceListResponse(
        records=[to_response(r) for r in records],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/stats", response_model=MaintenanceStats)
async def maintenance_stats(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Totals for the maintenance screen.

    `completed` counts records dated before today.
    """
    records = (await db.execute(select(MaintenanceRecord))).scalars().all()
    today = date.today()

    by_due_status = {due.value: 0 for due in MaintenanceDueStatus}
    for record in records:
        due = maintenance_due_status(record.date, today, settings.maintenance_upcoming_days)
        by_due_status[due.value] += 1

    return MaintenanceStats(
        total=len(records),
        completed=sum(1 for r in records if r.date < today),
        total_cost=round(sum(r.cost or 0 for r in records), 2),
        by_due_status=by_due_status
    )


@router.get("/{record_id}", response_model=MaintenanceResponse)
async def get_maintenance(
    record_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    record = await get_or_404(db, MaintenanceRecord, record_id, "Maintenance record")
    return to_response(record)


@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance(
    record_data: MaintenanceCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    record = MaintenanceRecord(**record_data.model_dump())
    db.add(record)
    await commit_or_conflict(db, "Maintenance record could not be saved")
    await db.refresh(record)

    await log_event(
        db=db,
        action=AuditAction.MAINTENANCE_CREATED,
        current_user=current_user,
        entity="maintenance_records",
        entity_id=record.id,
        metadata={"vehicle_plate": record.vehicle_plate, "date": record.date.isoformat()}
    )

    return to_response(record)


@router.patch("/{record_id}", response_model=MaintenanceResponse)
async def update_maintenance(
    record_id: int,
    record_data: MaintenanceUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    record = await get_or_404(db, MaintenanceRecord, record_id, "Maintenance record")

    update_data = record_data.model_dump(exclude_unset=True)
    if "cost" in update_data and update_data["cost"] is None:
        update_data["cost"] = 0
    for field, value in update_data.items():
        setattr(record, field, value)

    await commit_or_conflict(db, "Maintenance record could not be saved")
    await db.refresh(record)

    await log_event(
        db=db,
        action=AuditAction.MAINTENANCE_UPDATED,
        current_user=current_user,
        entity="maintenance_records",
        entity_id=record.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return to_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance(
    record_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    record = await get_or_404(db, MaintenanceRecord, record_id, "Maintenance record")
    plate = record.vehicle_plate

    await db.delete(record)
    await commit_or_conflict(db, "Maintenance record could not be removed")

    await log_event(
        db=db,
        action=AuditAction.MAINTENANCE_DELETED,
        current_user=current_user,
        entity="maintenance_records",
        entity_id=record_id,
        metadata={"vehicle_plate": plate}
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
