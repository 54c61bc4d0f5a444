"""
Report API Endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.models.report import Report, ReportAnalysisType
from fleet_backoffice.app.schemas.report import (
    ReportCreate, ReportUpdate, ReportResponse, ReportListResponse, ReportSummary
)
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.core.exceptions import BusinessRuleError
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.persistence import get_or_404, commit_or_conflict, paginate
from fleet_backoffice.app.services.reports import insert_report, summarize_report

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("", response_model=ReportListResponse)
async def list_reports(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    analysis_type: Optional[ReportAnalysisType] = Query(None),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    query = select(Report)
    if analysis_type:
        query = query.where(Report.analysis_type == analysis_type.value)
    query = query.order_by(Report.created_at.desc(), Report.id.desc())

    reports, total = await paginate(db, query, page, page_size)

    return ReportListResponse(
        reports=[ReportResponse.model_validate(r) for r in reports],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await get_or_404(db, Report, report_id, "Report")
    return ReportResponse.model_validate(report)


@router.get("/{report_id}/summary", response_model=ReportSummary)
async def get_report_summary(
    report_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Run the report's analysis over its date range."""
    report = await get_or_404(db, Report, report_id, "Report")
    return await summarize_report(db, report)


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: ReportCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await insert_report(db, report_data, current_user)
    return ReportResponse.model_validate(report)


@router.patch("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: int,
    report_data: ReportUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await get_or_404(db, Report, report_id, "Report")

    update_data = report_data.model_dump(exclude_unset=True)
    start = update_data.get("start_date", report.start_date)
    end = update_data.get("end_date", report.end_date)
    if start and end and end < start:
        raise BusinessRuleError(
            "end_date must not be before start_date",
            {"start_date": start, "end_date": end}
        )

    for field, value in update_data.items():
        setattr(report, field, value)

    await commit_or_conflict(db, "Report could not be saved")
    await db.refresh(report)

    await log_event(
        db=db,
        action=AuditAction.REPORT_UPDATED,
        current_user=current_user,
        entity="reports",
        entity_id=report.id,
        metadata={"updated_fields": list(update_data.keys())}
    )

    return ReportResponse.model_validate(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await get_or_404(db, Report, report_id, "Report")
    name = report.name

    await db.delete(report)
    await commit_or_conflict(db, "Report could not be removed")

    await log_event(
        db=db,
        action=AuditAction.REPORT_DELETED,
        current_user=current_user,
        entity="reports",
        entity_id=report_id,
        metadata={"name": name}
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
