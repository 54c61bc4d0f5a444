"""
Dashboard Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List, Dict, Any


class ImportantAlert(BaseModel):
    """Alert computed from current fleet data, not stored."""
    alert_type: str
    priority: str
    description: str
    vehicle_plate: Optional[str] = None
    driver: Optional[str] = None


class ActivityEntry(BaseModel):
    action: str
    entity: Optional[str]
    entity_id: Optional[int]
    actor_email: Optional[str]
    meta_data: Optional[Dict[str, Any]]
    timestamp: datetime

    class Config:
        from_attributes = True


class DashboardOverview(BaseModel):
    total_vehicles: int
    active_drivers: int
    pending_maintenance: int
    average_fuel_economy: float
    important_alerts: List[ImportantAlert]
    recent_activity: List[ActivityEntry]
    generated_at: datetime
