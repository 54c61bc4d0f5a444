"""
Vehicle database model.

A vehicle is identified in every other table by its plate.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base
from fleet_backoffice.app.models.enums import VehicleStatus, FuelType
from fleet_backoffice.app.models.driver import Driver


class Vehicle(Base):
    """
    Vehicle model.

    `driver_id` points at the driver currently assigned to the vehicle.
    The driver row mirrors it through `Driver.vehicle_plate`.
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identification
    plate = Column(String(8), unique=True, nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)

    # Operational state
    status = Column(String(50), default=VehicleStatus.ACTIVE.value, nullable=False, index=True)
    odometer = Column(Float, default=0, nullable=False)
    fuel_type = Column(String(50), default=FuelType.FLEX.value, nullable=False)
    fuel_level = Column(Float, default=100, nullable=False)  # percent
    next_maintenance = Column(Date, nullable=True)
    location = Column(String(255), nullable=True)

    # Assignment
    driver_id = Column(Integer, ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True, index=True)
    driver = relationship(Driver, lazy="selectin")

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Vehicle(id={self.id}, plate='{self.plate}', status='{self.status}')>"
