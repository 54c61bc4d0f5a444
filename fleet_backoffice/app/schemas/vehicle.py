"""
Vehicle Pydantic schemas.

Defines request and response models for vehicle management. All form rules
live here so an invalid payload never reaches the database.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from typing import Optional, List
from fleet_backoffice.app.models.enums import VehicleStatus, FuelType

MIN_YEAR = 1990


def normalize_plate(value):
    """Plates are stored trimmed and upper-cased."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


def reject_null(value, info):
    """Partial updates may omit a required field but never clear it."""
    if value is None:
        raise ValueError(f"{info.field_name} cannot be null")
    return value


def check_model_year(value: Optional[int]) -> Optional[int]:
    if value is not None and value > date.today().year + 1:
        raise ValueError(f"Year must not be later than {date.today().year + 1}")
    return value


class VehicleCreate(BaseModel):
    """Schema for registering a new vehicle."""
    model_config = ConfigDict(use_enum_values=True)

    plate: str = Field(..., min_length=7, max_length=8, description="License plate, e.g. ABC1D23")
    make: str = Field(..., min_length=2, max_length=100)
    model: str = Field(..., min_length=2, max_length=100)
    year: int = Field(..., ge=MIN_YEAR, description="Model year (1990 up to next year)")
    status: VehicleStatus = VehicleStatus.ACTIVE
    odometer: float = Field(0, ge=0, description="Odometer in km")
    fuel_type: FuelType = FuelType.FLEX
    next_maintenance: date = Field(..., description="Date of the next scheduled maintenance")
    location: str = Field(..., min_length=2, max_length=255)
    fuel_level: float = Field(100, ge=0, le=100, description="Fuel level in percent")
    driver_id: Optional[int] = Field(None, ge=1, description="Assigned driver")

    @field_validator("plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)

    @field_validator("year")
    @classmethod
    def year_not_in_future(cls, value):
        return check_model_year(value)


class VehicleUpdate(BaseModel):
    """Schema for updating an existing vehicle. Only provided fields change."""
    model_config = ConfigDict(use_enum_values=True)

    plate: Optional[str] = Field(None, min_length=7, max_length=8)
    make: Optional[str] = Field(None, min_length=2, max_length=100)
    model: Optional[str] = Field(None, min_length=2, max_length=100)
    year: Optional[int] = Field(None, ge=MIN_YEAR)
    status: Optional[VehicleStatus] = None
    odometer: Optional[float] = Field(None, ge=0)
    fuel_type: Optional[FuelType] = None
    next_maintenance: Optional[date] = None
    location: Optional[str] = Field(None, min_length=2, max_length=255)
    fuel_level: Optional[float] = Field(None, ge=0, le=100)
    driver_id: Optional[int] = Field(None, ge=1)

    @field_validator("plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)

    @field_validator("year")
    @classmethod
    def year_not_in_future(cls, value):
        return check_model_year(value)

    @field_validator(
        "plate", "make", "model", "year", "status", "odometer", "fuel_type",
        "next_maintenance", "location", "fuel_level"
    )
    @classmethod
    def required_not_null(cls, value, info):
        return reject_null(value, info)


class VehicleDriverSummary(BaseModel):
    """Assigned driver as shown in the vehicle table."""
    id: int
    name: str

    class Config:
        from_attributes = True


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: int
    plate: str
    make: str
    model: str
    year: int
    status: str
    odometer: float
    fuel_type: str
    fuel_level: float
    next_maintenance: Optional[date]
    location: Optional[str]
    driver_id: Optional[int]
    driver: Optional[VehicleDriverSummary]
    created_at: datetime

    class Config:
        from_attributes = True


class VehicleListResponse(BaseModel):
    """Schema for paginated vehicle list."""
    vehicles: List[VehicleResponse]
    total: int
    page: int
    page_size: int
