"""
Alert Database Model.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base
import enum


class AlertType(str, enum.Enum):
    OVERDUE_MAINTENANCE = "Manutenção Vencida"
    LICENSE_EXPIRING = "CNH Vencendo"
    LOW_FUEL = "Combustível Baixo"
    BEHAVIOR = "Comportamento"


class AlertPriority(str, enum.Enum):
    LOW = "Baixa"
    MEDIUM = "Média"
    HIGH = "Alta"


class Alert(Base):
    """
    Fleet alert.
    An active alert shows up in the notification bell until it is read.
    """
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    alert_type = Column(String(50), nullable=False)
    priority = Column(String(20), default=AlertPriority.MEDIUM.value, nullable=False)
    description = Column(Text, nullable=False)

    # Optional value references
    vehicle_plate = Column(String(8), nullable=True, index=True)
    driver = Column(String(255), nullable=True)
    reference_id = Column(String(100), nullable=True)

    # State
    active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<Alert(id={self.id}, type='{self.alert_type}', active={self.active})>"
