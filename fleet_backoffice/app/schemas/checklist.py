"""
Inspection checklist Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional, List, Dict
from fleet_backoffice.app.models.checklist import ChecklistType
from fleet_backoffice.app.schemas.vehicle import normalize_plate, reject_null
from fleet_backoffice.app.services.checklist import SECTION_SIZES, parse_inspection_date


class ChecklistItem(BaseModel):
    description: str
    conforming: bool = False
    observations: str = ""


class ChecklistSection(BaseModel):
    title: str
    items: List[ChecklistItem]


def check_sections(sections: Dict[str, ChecklistSection], partial: bool = False):
    unknown = set(sections) - set(SECTION_SIZES)
    if unknown:
        raise ValueError(f"Unknown checklist sections: {', '.join(sorted(unknown))}")
    if not partial:
        missing = set(SECTION_SIZES) - set(sections)
        if missing:
            raise ValueError(f"Missing checklist sections: {', '.join(sorted(missing))}")
    for key, section in sections.items():
        if len(section.items) != SECTION_SIZES[key]:
            raise ValueError(
                f"Section '{key}' must have {SECTION_SIZES[key]} items, got {len(section.items)}"
            )
    return sections


def check_signature(value):
    if value is False:
        raise ValueError("The driver must sign the checklist")
    return value


class ChecklistCreate(BaseModel):
    """Schema for filing an inspection."""
    model_config = ConfigDict(use_enum_values=True)

    inspection_date: Optional[datetime] = Field(
        None, description="dd/mm/yyyy HH:MM:SS or ISO-8601; defaults to now"
    )
    vehicle_plate: str = Field(..., min_length=1, max_length=8)
    implement_plate: Optional[str] = Field(None, max_length=8)
    driver_id: int = Field(..., ge=1)
    odometer: float = Field(..., ge=0)
    inspection_location: str = Field(..., min_length=1, max_length=255)
    checklist_type: ChecklistType = ChecklistType.PRE_TRIP
    sections: Dict[str, ChecklistSection]
    driver_signature: bool
    leadership_approval: bool = False
    image_urls: List[str] = Field(default_factory=list)

    @field_validator("inspection_date", mode="before")
    @classmethod
    def parse_date(cls, value):
        if value is None:
            return value
        return parse_inspection_date(value)

    @field_validator("vehicle_plate", "implement_plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)

    @field_validator("sections")
    @classmethod
    def full_template(cls, value):
        return check_sections(value)

    @field_validator("driver_signature")
    @classmethod
    def signed(cls, value):
        return check_signature(value)


class ChecklistUpdate(BaseModel):
    """Partial update. Sections sent here replace the stored ones whole."""
    model_config = ConfigDict(use_enum_values=True)

    inspection_date: Optional[datetime] = None
    vehicle_plate: Optional[str] = Field(None, min_length=1, max_length=8)
    implement_plate: Optional[str] = Field(None, max_length=8)
    driver_id: Optional[int] = Field(None, ge=1)
    odometer: Optional[float] = Field(None, ge=0)
    inspection_location: Optional[str] = Field(None, min_length=1, max_length=255)
    checklist_type: Optional[ChecklistType] = None
    sections: Optional[Dict[str, ChecklistSection]] = None
    driver_signature: Optional[bool] = None
    leadership_approval: Optional[bool] = None
    image_urls: Optional[List[str]] = None

    @field_validator("inspection_date", mode="before")
    @classmethod
    def parse_date(cls, value):
        if value is None:
            return value
        return parse_inspection_date(value)

    @field_validator("vehicle_plate", "implement_plate", mode="before")
    @classmethod
    def upper_plate(cls, value):
        return normalize_plate(value)

    @field_validator("sections")
    @classmethod
    def known_sections(cls, value):
        if value is None:
            return value
        return check_sections(value, partial=True)

    @field_validator("driver_signature")
    @classmethod
    def signed(cls, value):
        return check_signature(value)

    @field_validator(
        "inspection_date", "vehicle_plate", "driver_id", "odometer", "inspection_location",
        "checklist_type", "sections", "driver_signature", "leadership_approval"
    )
    @classmethod
    def required_not_null(cls, value, info):
        return reject_null(value, info)


class ChecklistResponse(BaseModel):
    id: int
    inspection_date: datetime
    vehicle_plate: str
    implement_plate: Optional[str]
    driver_id: int
    odometer: float
    inspection_location: str
    checklist_type: str
    sections: Dict[str, ChecklistSection]
    total_non_conformities: int
    final_status: str
    driver_signature: bool
    leadership_approval: bool
    image_urls: Optional[List[str]]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ChecklistListResponse(BaseModel):
    checklists: List[ChecklistResponse]
    total: int
    page: int
    page_size: int


class ChecklistTemplate(BaseModel):
    """Blank inspection form."""
    sections: Dict[str, ChecklistSection]
    total_items: int


class ChecklistStats(BaseModel):
    total: int
    approved: int
    rejected: int
    approved_percentage: int
    average_non_conformities: float
