"""
Fuel log Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date as date_type, datetime
from typing import Optional, List
from fleet_backoffice.app.schemas.vehicle import normalize_plate, reject_null


class FuelLogCreate(BaseModel):
    """Schema for recording a refuelling."""
    vehicle_plate: str = Field(..., min_length=1, max_length=8)
    date: date_type
    liters: float = Field(..., ge=0.1, description="Litres filled")
    odometer: float = Field(..., ge=0, description="Odometer reading in km at the pump")
    total_cost: float = Field(..., ge=0.01, description="Amount paid in BRL")

    @field_validator("vehicle_plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)


class FuelLogUpdate(BaseModel):
    vehicle_plate: Optional[str] = Field(None, min_length=1, max_length=8)
    date: Optional[date_type] = None
    liters: Optional[float] = Field(None, ge=0.1)
    odometer: Optional[float] = Field(None, ge=0)
    total_cost: Optional[float] = Field(None, ge=0.01)

    @field_validator("vehicle_plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)

    @field_validator("vehicle_plate", "date", "liters", "odometer", "total_cost")
    @classmethod
    def required_not_null(cls, value, info):
        return reject_null(value, info)


class FuelLogResponse(BaseModel):
    id: int
    vehicle_plate: str
    date: date_type
    liters: float
    odometer: float
    total_cost: float
    price_per_liter: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FuelLogListResponse(BaseModel):
    logs: List[FuelLogResponse]
    total: int
    page: int
    page_size: int


class FuelStats(BaseModel):
    """
    Aggregates shown above the fuel log table.

    average_consumption is km per litre across all vehicles; efficiency_rating
    classifies it (Excelente / Bom / Baixo).
    """
    total_liters: float
    total_cost: float
    average_consumption: float
    average_price_per_liter: float
    efficiency_rating: str
