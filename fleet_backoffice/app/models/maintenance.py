"""
Maintenance record database model.
"""

from sqlalchemy import Column, Integer, String, Float, Text, Date, DateTime
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base
from fleet_backoffice.app.models.enums import MaintenanceType, MaintenanceStatus


class MaintenanceRecord(Base):
    """Scheduled or completed service on a vehicle, referenced by plate."""
    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_plate = Column(String(8), nullable=False, index=True)
    maintenance_type = Column(String(50), default=MaintenanceType.PREVENTIVE.value, nullable=False)
    date = Column(Date, nullable=False, index=True)
    cost = Column(Float, default=0, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(50), default=MaintenanceStatus.SCHEDULED.value, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<MaintenanceRecord(id={self.id}, plate='{self.vehicle_plate}', date={self.date})>"
