"""
Report definition database model.
"""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime
from sqlalchemy.sql import func
from fleet_backoffice.app.db.session import Base
import enum


class ReportAnalysisType(str, enum.Enum):
    FUEL_EFFICIENCY = "Eficiência de Combustível"
    MAINTENANCE = "Manutenções"
    OPERATING_COSTS = "Custos Operacionais"
    DRIVER_PERFORMANCE = "Desempenho de Motoristas"


class ReportPeriod(str, enum.Enum):
    DAILY = "Diário"
    WEEKLY = "Semanal"
    MONTHLY = "Mensal"
    BIWEEKLY = "Quinzenal"


class Report(Base):
    """A saved report definition: what to analyse and over which dates."""
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    analysis_type = Column(String(50), nullable=False)
    period = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    filters = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Report(id={self.id}, name='{self.name}', type='{self.analysis_type}')>"
