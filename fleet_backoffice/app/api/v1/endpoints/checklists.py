"""
Inspection Checklist API Endpoints.

The non-conformity count and the final status are always derived from the
submitted sections, never taken from the client.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from datetime import datetime, timezone
from fleet_backoffice.app.db.session import get_db
from fleet_backoffice.app.models.checklist import Checklist, ChecklistStatus, ChecklistType
from fleet_backoffice.app.schemas.checklist import (
    ChecklistCreate, ChecklistUpdate, ChecklistResponse, ChecklistListResponse,
    ChecklistStats, ChecklistTemplate
)
from fleet_backoffice.app.core.config import settings
from fleet_backoffice.app.core.dependencies import get_current_user
from fleet_backoffice.app.core.exceptions import BusinessRuleError
from fleet_backoffice.app.services import checklist as rules
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.persistence import get_or_404, commit_or_conflict, paginate

router = APIRouter(prefix="/checklists", tags=["Checklists"])

REFERENCE_CONFLICT = "Checklist references an unregistered driver or vehicle plate"


def enforce_sign_off(final_status: ChecklistStatus, leadership_approval: bool, non_conformities: int):
    if rules.requires_leadership_approval(final_status) and not leadership_approval:
        raise BusinessRuleError(
            "A failed inspection needs leadership approval before it can be filed",
            {"final_status": final_status.value, "total_non_conformities": non_conformities}
        )


@router.get("/template", response_model=ChecklistTemplate)
async def get_template(current_user: dict = Depends(get_current_user)):
    """Blank inspection form: every item starts non-conforming."""
    return ChecklistTemplate(sections=rules.build_template(), total_items=rules.TOTAL_ITEMS)


@router.get("/stats", response_model=ChecklistStats)
async def checklist_stats(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Checklist.final_status, Checklist.total_non_conformities))
    rows = result.all()
    return ChecklistStats(**rules.approval_stats(
        [row.final_status for row in rows],
        [row.total_non_conformities for row in rows],
    ))


@router.get("", response_model=ChecklistListResponse)
async def list_checklists(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    vehicle_plate: Optional[str] = Query(None),
    driver_id: Optional[int] = Query(None, ge=1),
    final_status: Optional[ChecklistStatus] = Query(None),
    checklist_type: Optional[ChecklistType] = Query(None),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    query = select(Checklist)
    if vehicle_plate:
        query = query.where(Checklist.vehicle_plate == vehicle_plate.strip().upper())
    if driver_id:
        query = query.where(Checklist.driver_id == driver_id)
    if final_status:
        query = query.where(Checklist.final_status == final_status.value)
    if checklist_type:
        query = query.where(Checklist.checklist_type == checklist_type.value)
    query = query.order_by(Checklist.created_at.desc(), Checklist.id.desc())

    checklists, total = await paginate(db, query, page, page_size)

    return ChecklistListResponse(
        checklists=[ChecklistResponse.model_validate(c) for c in checklists],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{checklist_id}", response_model=ChecklistResponse)
async def get_checklist(
    checklist_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    checklist = await get_or_404(db, Checklist, checklist_id, "Checklist")
    return ChecklistResponse.model_validate(checklist)


@router.post("", response_model=ChecklistResponse, status_code=status.HTTP_201_CREATED)
async def create_checklist(
    checklist_data: ChecklistCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    File an inspection.

    A checklist with any non-conforming item is REPROVADO and is only
    accepted with leadership approval (422 otherwise).
    """
    fields = checklist_data.model_dump()
    non_conformities, final_status = rules.rollup(fields["sections"])
    enforce_sign_off(final_status, checklist_data.leadership_approval, non_conformities)

    if fields["inspection_date"] is None:
        fields["inspection_date"] = datetime.now(timezone.utc)

    checklist = Checklist(
        **fields,
        total_non_conformities=non_conformities,
        final_status=final_status.value,
    )
    db.add(checklist)
    await commit_or_conflict(
        db, REFERENCE_CONFLICT,
        {"vehicle_plate": checklist_data.vehicle_plate, "driver_id": checklist_data.driver_id}
    )
    await db.refresh(checklist)

    await log_event(
        db=db,
        action=AuditAction.CHECKLIST_CREATED,
        current_user=current_user,
        entity="checklists",
        entity_id=checklist.id,
        metadata={
            "vehicle_plate": checklist.vehicle_plate,
            "final_status": checklist.final_status,
            "total_non_conformities": checklist.total_non_conformities
        }
    )

    return ChecklistResponse.model_validate(checklist)


@router.patch("/{checklist_id}", response_model=ChecklistResponse)
async def update_checklist(
    checklist_id: int,
    checklist_data: ChecklistUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update the provided fields; the count and status are recomputed."""
    checklist = await get_or_404(db, Checklist, checklist_id, "Checklist")

    update_data = checklist_data.model_dump(exclude_unset=True)
    if "sections" in update_data:
        update_data["sections"] = rules.merge_sections(checklist.sections, update_data["sections"])

    sections = update_data.get("sections", checklist.sections)
    approval = update_data.get("leadership_approval", checklist.leadership_approval)
    non_conformities, final_status = rules.rollup(sections)
    enforce_sign_off(final_status, approval, non_conformities)

    for field, value in update_data.items():
        setattr(checklist, field, value)
    checklist.total_non_conformities = non_conformities
    checklist.final_status = final_status.value

    await commit_or_conflict(db, REFERENCE_CONFLICT, {"checklist_id": checklist_id})
    await db.refresh(checklist)

    await log_event(
        db=db,
        action=AuditAction.CHECKLIST_UPDATED,
        current_user=current_user,
        entity="checklists",
        entity_id=checklist.id,
        metadata={
            "updated_fields": list(update_data.keys()),
            "final_status": checklist.final_status
        }
    )

    return ChecklistResponse.model_validate(checklist)


@router.delete("/{checklist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_checklist(
    checklist_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    checklist = await get_or_404(db, Checklist, checklist_id, "Checklist")
    plate = checklist.vehicle_plate

    await db.delete(checklist)
    await commit_or_conflict(db, "Checklist could not be removed")

    await log_event(
        db=db,
        action=AuditAction.CHECKLIST_DELETED,
        current_user=current_user,
        entity="checklists",
        entity_id=checklist_id,
        metadata={"vehicle_plate": plate}
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
