"""
Fuel log database model.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base


class FuelLog(Base):
    """One refuel of a vehicle, with the odometer reading at the pump."""
    __tablename__ = "fuel_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_plate = Column(String(8), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    liters = Column(Float, nullable=False)
    odometer = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<FuelLog(id={self.id}, plate='{self.vehicle_plate}', liters={self.liters})>"
