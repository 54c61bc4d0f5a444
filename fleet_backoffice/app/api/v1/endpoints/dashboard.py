"""
Dashboard API Endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.core.redis_client import get_redis
from fleet_backoffice.app.schemas.dashboard import DashboardOverview
from fleet_backoffice.app.services.dashboard import get_overview

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/overview", response_model=DashboardOverview)
async def dashboard_overview(
    refresh: bool = Query(False, description="Bypass the cached overview"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis)
):
    """
    Fleet overview: counters, computed alerts and recent activity.

    Served from the Redis cache when available.
    """
    return await get_overview(db, redis, refresh=refresh)
