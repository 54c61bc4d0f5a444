"""
Vehicle inspection checklist database model.
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base
import enum


class ChecklistType(str, enum.Enum):
    PRE_TRIP = "Pré-viagem"
    POST_TRIP = "Pós-viagem"
    PREVENTIVE_MAINTENANCE = "Manutenção Preventiva"


class ChecklistStatus(str, enum.Enum):
    APPROVED = "APROVADO"
    REJECTED = "REPROVADO"


class Checklist(Base):
    """
    Inspection checklist.

    `sections` holds the six template sections keyed by section key, each with
    its conformity items. `total_non_conformities` and `final_status` are
    derived from it on every write.
    """
    __tablename__ = "checklists"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    inspection_date = Column(DateTime(timezone=True), nullable=False, index=True)
    vehicle_plate = Column(String(8), ForeignKey("vehicles.plate"), nullable=False, index=True)
    implement_plate = Column(String(8), nullable=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    odometer = Column(Float, nullable=False)
    inspection_location = Column(String(255), nullable=False)
    checklist_type = Column(String(50), nullable=False)

    sections = Column(JSON, nullable=False)
    total_non_conformities = Column(Integer, default=0, nullable=False)
    final_status = Column(String(20), nullable=False, index=True)

    # Sign-off
    driver_signature = Column(Boolean, default=False, nullable=False)
    leadership_approval = Column(Boolean, default=False, nullable=False)

    image_urls = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Checklist(id={self.id}, plate='{self.vehicle_plate}', status='{self.final_status}')>"
