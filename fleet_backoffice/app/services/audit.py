"""
Audit logging service.

Every write made through the back office leaves a row here; the dashboard
reads the latest ones back as its activity feed.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from fleet_backoffice.app.models.audit_log import AuditLog


class AuditAction:
    """Standardized audit action constants."""
    VEHICLE_CREATED = "VEHICLE_CREATED"
    VEHICLE_UPDATED = "VEHICLE_UPDATED"
    VEHICLE_DELETED = "VEHICLE_DELETED"

    DRIVER_CREATED = "DRIVER_CREATED"
    DRIVER_UPDATED = "DRIVER_UPDATED"
    DRIVER_DELETED = "DRIVER_DELETED"
    DRIVER_VEHICLE_ASSIGNED = "DRIVER_VEHICLE_ASSIGNED"

    MAINTENANCE_CREATED = "MAINTENANCE_CREATED"
    MAINTENANCE_UPDATED = "MAINTENANCE_UPDATED"
    MAINTENANCE_DELETED = "MAINTENANCE_DELETED"

    FUEL_LOG_CREATED = "FUEL_LOG_CREATED"
    FUEL_LOG_UPDATED = "FUEL_LOG_UPDATED"
    FUEL_LOG_DELETED = "FUEL_LOG_DELETED"

    ALERT_CREATED = "ALERT_CREATED"
    ALERT_UPDATED = "ALERT_UPDATED"
    ALERT_DELETED = "ALERT_DELETED"
    ALERT_READ = "ALERT_READ"

    REPORT_CREATED = "REPORT_CREATED"
    REPORT_UPDATED = "REPORT_UPDATED"
    REPORT_DELETED = "REPORT_DELETED"

    CHECKLIST_CREATED = "CHECKLIST_CREATED"
    CHECKLIST_UPDATED = "CHECKLIST_UPDATED"
    CHECKLIST_DELETED = "CHECKLIST_DELETED"


async def log_event(
    db: AsyncSession,
    action: str,
    current_user: Optional[Dict[str, Any]] = None,
    entity: Optional[str] = None,
    entity_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Log a back-office write to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        current_user: Decoded token of the caller (`sub`, `email`)
        entity: Table the action touched
        entity_id: Row the action touched
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    current_user = current_user or {}
    audit_log = AuditLog(
        actor_id=current_user.get("sub"),
        actor_email=current_user.get("email"),
        action=action,
        entity=entity,
        entity_id=entity_id,
        meta_data=metadata
    )

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def get_recent_activity(
    db: AsyncSession,
    entity: Optional[str] = None,
    limit: int = 10
) -> list[AuditLog]:
    """Latest audit rows, most recent first."""
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if entity:
        query = query.where(AuditLog.entity == entity)

    result = await db.execute(query.limit(limit))
    return result.scalars().all()
