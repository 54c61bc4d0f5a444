"""
Alert Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional, List
from fleet_backoffice.app.models.alert import AlertType, AlertPriority
from fleet_backoffice.app.schemas.vehicle import reject_null


class AlertCreate(BaseModel):
    """Schema for raising an alert."""
    model_config = ConfigDict(use_enum_values=True)

    alert_type: AlertType
    priority: AlertPriority = AlertPriority.MEDIUM
    description: str = Field(..., min_length=5)
    vehicle_plate: Optional[str] = Field(None, max_length=8)
    driver: Optional[str] = Field(None, max_length=255)
    reference_id: Optional[str] = Field(None, max_length=100)
    active: bool = True


class AlertUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    alert_type: Optional[AlertType] = None
    priority: Optional[AlertPriority] = None
    description: Optional[str] = Field(None, min_length=5)
    vehicle_plate: Optional[str] = Field(None, max_length=8)
    driver: Optional[str] = Field(None, max_length=255)
    reference_id: Optional[str] = Field(None, max_length=100)
    active: Optional[bool] = None

    @field_validator("alert_type", "priority", "description", "active")
    @classmethod
    def required_not_null(cls, value, info):
        return reject_null(value, info)


class AlertResponse(BaseModel):
    id: int
    alert_type: str
    priority: str
    description: str
    vehicle_plate: Optional[str]
    driver: Optional[str]
    reference_id: Optional[str]
    active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AlertListResponse(BaseModel):
    alerts: List[AlertResponse]
    total: int
    page: int
    page_size: int


class AlertBellResponse(BaseModel):
    """Header bell: active alerts, newest first, and the unread badge count."""
    unread_count: int
    alerts: List[AlertResponse]
