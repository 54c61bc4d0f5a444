"""
Driver database model.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base
from fleet_backoffice.app.models.enums import DriverStatus, LicenseCategory


class Driver(Base):
    """
    Driver model.

    `vehicle_plate` is a plain value reference (no FK) to the vehicle the
    driver is assigned to.
    """
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Contact
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)

    # License (CNH)
    license_category = Column(String(2), default=LicenseCategory.B.value, nullable=False)
    license_number = Column(String(30), nullable=True)
    license_expiry = Column(Date, nullable=True, index=True)

    status = Column(String(20), default=DriverStatus.ACTIVE.value, nullable=False, index=True)
    vehicle_plate = Column(String(8), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Driver(id={self.id}, name='{self.name}', plate={self.vehicle_plate})>"
