"""
Audit Log Database Model.

Tracks every write made through the back office; the dashboard reads it back
as the recent-activity feed.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - VEHICLE_* / DRIVER_* / MAINTENANCE_* / FUEL_LOG_*
    - ALERT_* / REPORT_* / CHECKLIST_*
    - DRIVER_VEHICLE_ASSIGNED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (auth provider subject)
    actor_id = Column(String(64), index=True, nullable=True)
    actor_email = Column(String(255), nullable=True)

    # What action was performed, on which row
    action = Column(String(100), nullable=False, index=True)
    entity = Column(String(50), nullable=True)
    entity_id = Column(Integer, nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity}:{self.entity_id})>"
