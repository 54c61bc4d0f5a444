"""
Report Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import date, datetime
from typing import Optional, List, Dict, Any
from fleet_backoffice.app.models.report import ReportAnalysisType, ReportPeriod
from fleet_backoffice.app.schemas.vehicle import reject_null


class ReportCreate(BaseModel):
    """Schema for saving a report definition."""
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=2, max_length=255)
    analysis_type: ReportAnalysisType
    period: ReportPeriod = ReportPeriod.MONTHLY
    start_date: date
    end_date: date
    filters: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ReportUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    analysis_type: Optional[ReportAnalysisType] = None
    period: Optional[ReportPeriod] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    filters: Optional[str] = None

    @field_validator("name", "analysis_type", "period", "start_date", "end_date")
    @classmethod
    def required_not_null(cls, value, info):
        return reject_null(value, info)


class ReportResponse(BaseModel):
    id: int
    name: str
    analysis_type: str
    period: str
    start_date: date
    end_date: date
    filters: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class ReportListResponse(BaseModel):
    reports: List[ReportResponse]
    total: int
    page: int
    page_size: int


class ReportMetric(BaseModel):
    """One headline figure of a report summary."""
    label: str
    value: float
    unit: Optional[str] = None


class ReportSummary(BaseModel):
    """Computed view of a saved report over its date range."""
    report_id: int
    name: str
    analysis_type: str
    start_date: date
    end_date: date
    metrics: List[ReportMetric]
    breakdown: List[Dict[str, Any]]
