"""
Alert API Endpoints.

Every successful write is published on the alert bus so the notification
bell stays current without re-reading the table.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.models.alert import Alert, AlertType, AlertPriority
from fleet_backoffice.app.schemas.alert import (
    AlertCreate, AlertUpdate, AlertResponse, AlertListResponse, AlertBellResponse
)
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.services.alert_feed import alert_bus, AlertChangeType, ensure_bell_loaded
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.persistence import get_or_404, commit_or_conflict, paginate

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("", response_model=AlertListResponse)
async def list_alerts(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    active: Optional[bool] = Query(None),
    alert_type: Optional[AlertType] = Query(None),
    priority: Optional[AlertPriority] = Query(None),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    query = select(Alert)
    if active is not None:
        query = query.where(Alert.active == active)
    if alert_type:
        query = query.where(Alert.alert_type == alert_type.value)
    if priority:
        query = query.where(Alert.priority == priority.value)
    query = query.order_by(Alert.created_at.desc(), Alert.id.desc())

    alerts, total = await paginate(db, query, page, page_size)

    return AlertListResponse(
        alerts=[AlertResponse.model_validate(a) for a in alerts],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/bell", response_model=AlertBellResponse)
async def get_bell(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Active alerts behind the header bell and the unread badge count."""
    bell = await ensure_bell_loaded(db)
    return AlertBellResponse(unread_count=bell.unread_count, alerts=bell.snapshot())


@router.get("/{alert_id}", response_model=AlertResponse)
async def get_alert(
    alert_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    alert = await get_or_404(db, Alert, alert_id, "Alert")
    return AlertResponse.model_validate(alert)


@router.post("", response_model=AlertResponse, status_code=status.HTTP_201_CREATED)
async def create_alert(
    alert_data: AlertCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    alert = Alert(**alert_data.model_dump())
    db.add(alert)
    await commit_or_conflict(db, "Alert could not be saved")
    await db.refresh(alert)

    alert_bus.publish(AlertChangeType.INSERT, alert)

    await log_event(
        db=db,
        action=AuditAction.ALERT_CREATED,
        current_user=current_user,
        entity="alerts",
        entity_id=alert.id,
        metadata={"alert_type": alert.alert_type, "priority": alert.priority}
    )

    return AlertResponse.model_validate(alert)


@router.patch("/{alert_id}", response_model=AlertResponse)
async def update_alert(
    alert_id: int,
    alert_data: AlertUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    alert = await get_or_404(db, Alert, alert_id, "Alert")

    update_data = alert_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(alert, field, value)

    await commit_or_conflict(db, "Alert could not be saved")
    await db.refresh(alert)

    alert_bus.publish(AlertChangeType.UPDATE, alert)

    await log_event(
        db=db,
        action=AuditAction.ALERT_UPDATED,
        current_user=current_user,
        entity="alerts",
        entity_id=alert.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return AlertResponse.model_validate(alert)


@router.post("/{alert_id}/read", response_model=AlertResponse)
async def mark_alert_read(
    alert_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Reading an alert deactivates it. Already inactive alerts are left alone."""
    alert = await get_or_404(db, Alert, alert_id, "Alert")
    if not alert.active:
        return AlertResponse.model_validate(alert)

    alert.active = False
    await commit_or_conflict(db, "Alert could not be saved")
    await db.refresh(alert)

    alert_bus.publish(AlertChangeType.UPDATE, alert)

    await log_event(
        db=db,
        action=AuditAction.ALERT_READ,
        current_user=current_user,
        entity="alerts",
        entity_id=alert.id
    )

    return AlertResponse.model_validate(alert)


@router.delete("/{alert_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_alert(
    alert_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    alert = await get_or_404(db, Alert, alert_id, "Alert")
    removed = AlertResponse.model_validate(alert)

    await db.delete(alert)
    await commit_or_conflict(db, "Alert could not be removed")

    alert_bus.publish(AlertChangeType.DELETE, removed)

    await log_event(
        db=db,
        action=AuditAction.ALERT_DELETED,
        current_user=current_user,
        entity="alerts",
        entity_id=alert_id,
        metadata={"alert_type": removed.alert_type}
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
