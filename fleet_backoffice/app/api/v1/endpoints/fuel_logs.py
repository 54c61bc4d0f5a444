"""
Fuel Log API Endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.models.fuel_log import FuelLog
from fleet_backoffice.app.schemas.fuel_log import (
    FuelLogCreate, FuelLogUpdate, FuelLogResponse, FuelLogListResponse, FuelStats
)
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.calculations import (
    average_fuel_economy, fuel_efficiency_rating, price_per_liter
)
from fleet_backoffice.app.services.persistence import get_or_404, commit_or_conflict, paginate

router = APIRouter(prefix="/fuel-logs", tags=["Fuel Logs"])


def to_response(log: FuelLog) -> FuelLogResponse:
    response = FuelLogResponse.model_validate(log)
    response.price_per_liter = price_per_liter(log.total_cost, log.liters)
    return response


@router.get("", response_model=FuelLogListResponse)
async def list_fuel_logs(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    vehicle_plate: Optional[str] = Query(None),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    query = select(FuelLog)
    if vehicle_plate:
        query = query.where(FuelLog.vehicle_plate == vehicle_plate.strip().upper())
    query = query.order_by(FuelLog.created_at.desc(), FuelLog.id.desc())

    logs, total = await paginate(db, query, page, page_size)

    return FuelLogListResponse(
        logs=[to_response(log) for log in logs],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/stats", response_model=FuelStats)
async def fuel_stats(
    vehicle_plate: Optional[str] = Query(None),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Totals, average price and average consumption, optionally for one plate."""
    query = select(FuelLog)
    if vehicle_plate:
        query = query.where(FuelLog.vehicle_plate == vehicle_plate.strip().upper())
    logs = (await db.execute(query)).scalars().all()

    total_liters = sum(log.liters for log in logs)
    total_cost = sum(log.total_cost for log in logs)
    economy = average_fuel_economy(logs)

    return FuelStats(
        total_liters=round(total_liters, 2),
        total_cost=round(total_cost, 2),
        average_consumption=round(economy, 2),
        average_price_per_liter=price_per_liter(total_cost, total_liters),
        efficiency_rating=fuel_efficiency_rating(economy).value
    )


@router.get("/{log_id}", response_model=FuelLogResponse)
async def get_fuel_log(
    log_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    log = await get_or_404(db, FuelLog, log_id, "Fuel log")
    return to_response(log)


@router.post("", response_model=FuelLogResponse, status_code=status.HTTP_201_CREATED)
async def create_fuel_log(
    log_data: FuelLogCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    log = FuelLog(**log_data.model_dump())
    db.add(log)
    await commit_or_conflict(db, "Fuel log could not be saved")
    await db.refresh(log)

    await log_event(
        db=db,
        action=AuditAction.FUEL_LOG_CREATED,
        current_user=current_user,
        entity="fuel_logs",
        entity_id=log.id,
        metadata={"vehicle_plate": log.vehicle_plate, "liters": log.liters}
    )

    return to_response(log)


@router.patch("/{log_id}", response_model=FuelLogResponse)
async def update_fuel_log(
    log_id: int,
    log_data: FuelLogUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    log = await get_or_404(db, FuelLog, log_id, "Fuel log")

    update_data = log_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(log, field, value)

    await commit_or_conflict(db, "Fuel log could not be saved")
    await db.refresh(log)

    await log_event(
        db=db,
        action=AuditAction.FUEL_LOG_UPDATED,
        current_user=current_user,
        entity="fuel_logs",
        entity_id=log.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return to_response(log)


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fuel_log(
    log_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    log = await get_or_404(db, FuelLog, log_id, "Fuel log")
    plate = log.vehicle_plate

    await db.delete(log)
    await commit_or_conflict(db, "Fuel log could not be removed")

    await log_event(
        db=db,
        action=AuditAction.FUEL_LOG_DELETED,
        current_user=current_user,
        entity="fuel_logs",
        entity_id=log_id,
        metadata={"vehicle_plate": plate}
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
