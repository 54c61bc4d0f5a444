"""
Driver Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import date, datetime
from typing import Optional, List
from fleet_backoffice.app.models.enums import DriverStatus, LicenseCategory
from fleet_backoffice.app.schemas.vehicle import normalize_plate, reject_null


class DriverCreate(BaseModel):
    """Schema for registering a new driver."""
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=30)
    license_category: LicenseCategory = LicenseCategory.B
    license_number: Optional[str] = Field(None, max_length=30)
    license_expiry: Optional[date] = None
    status: DriverStatus = DriverStatus.ACTIVE


class DriverUpdate(BaseModel):
    """Schema for updating a driver. The vehicle plate has its own endpoint."""
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=10, max_length=30)
    license_category: Optional[LicenseCategory] = None
    license_number: Optional[str] = Field(None, max_length=30)
    license_expiry: Optional[date] = None
    status: Optional[DriverStatus] = None

    @field_validator("name", "email", "phone", "license_category", "status")
    @classmethod
    def required_not_null(cls, value, info):
        return reject_null(value, info)


class DriverVehicleAssignment(BaseModel):
    """Assign a vehicle (by plate) to a driver; null releases the current one."""
    vehicle_plate: Optional[str] = Field(None, min_length=7, max_length=8)

    @field_validator("vehicle_plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)


class DriverResponse(BaseModel):
    """Schema for driver response."""
    id: int
    name: str
    email: str
    phone: str
    license_category: str
    license_number: Optional[str]
    license_expiry: Optional[date]
    status: str
    vehicle_plate: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class DriverListResponse(BaseModel):
    """Schema for paginated driver list."""
    drivers: List[DriverResponse]
    total: int
    page: int
    page_size: int


class ExpiringLicense(BaseModel):
    """Driver whose license expires inside the warning window."""
    driver_id: int
    name: str
    license_category: str
    license_expiry: date
    days_until_expiry: int
