"""
Maintenance Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date as date_type, datetime
from typing import Optional, List, Dict
from fleet_backoffice.app.models.enums import MaintenanceType, MaintenanceStatus
from fleet_backoffice.app.schemas.vehicle import normalize_plate, reject_null


def cost_or_zero(value):
    """An empty cost is recorded as zero."""
    if value is None or value == "":
        return 0
    return value


class MaintenanceCreate(BaseModel):
    """Schema for scheduling or recording a maintenance."""
    model_config = ConfigDict(use_enum_values=True)

    vehicle_plate: str = Field(..., min_length=3, max_length=8)
    maintenance_type: MaintenanceType = MaintenanceType.PREVENTIVE
    date: date_type
    cost: float = Field(0, ge=0, description="Cost in BRL; zero is allowed")
    description: str = Field(..., min_length=5)
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED

    @field_validator("vehicle_plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)

    @field_validator("cost", mode="before")
    @classmethod
    def empty_cost(cls, value):
        return cost_or_zero(value)


class MaintenanceUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    vehicle_plate: Optional[str] = Field(None, min_length=3, max_length=8)
    maintenance_type: Optional[MaintenanceType] = None
    date: Optional[date_type] = None
    cost: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=5)
    status: Optional[MaintenanceStatus] = None

    @field_validator("vehicle_plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)

    @field_validator("vehicle_plate", "maintenance_type", "date", "description", "status")
    @classmethod
    def required_not_null(cls, value, info):
        return reject_null(value, info)


class MaintenanceResponse(BaseModel):
    id: int
    vehicle_plate: str
    maintenance_type: str
    date: date_type
    cost: float
    description: str
    status: str
    due_status: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MaintenanceListResponse(BaseModel):
    records: List[MaintenanceResponse]
    total: int
    page: int
    page_size: int


class MaintenanceStats(BaseModel):
    """Summary cards of the maintenance screen."""
    total: int
    completed: int
    total_cost: float
    by_due_status: Dict[str, int]
