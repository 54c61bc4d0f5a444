"""
Report service.

`insert_report` stores a report definition. `summarize_report` computes the
chosen analysis over the report's date range from the live tables.
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backoffice.app.models.checklist import Checklist, ChecklistStatus
from fleet_backoffice.app.models.driver import Driver
from fleet_backoffice.app.models.fuel_log import FuelLog
from fleet_backoffice.app.models.maintenance import MaintenanceRecord
from fleet_backoffice.app.models.report import Report, ReportAnalysisType
from fleet_backoffice.app.schemas.report import ReportCreate, ReportMetric, ReportSummary
from fleet_backoffice.app.services.audit import log_event, AuditAction
from fleet_backoffice.app.services.calculations import average_fuel_economy, fuel_efficiency_rating
from fleet_backoffice.app.services.persistence import commit_or_conflict


async def insert_report(
    db: AsyncSession,
    report_data: ReportCreate,
    current_user: Optional[Dict[str, Any]] = None
) -> Report:
    """Create a report definition and record it in the audit log."""
    report = Report(**report_data.model_dump())
    db.add(report)
    await commit_or_conflict(db, "Report could not be saved")
    await db.refresh(report)

    await log_event(
        db=db,
        action=AuditAction.REPORT_CREATED,
        current_user=current_user,
        entity="reports",
        entity_id=report.id,
        metadata={"name": report.name, "analysis_type": report.analysis_type}
    )
    return report


async def _fuel_logs(db: AsyncSession, report: Report) -> List[FuelLog]:
    result = await db.execute(
        select(FuelLog)
        .where(FuelLog.date >= report.start_date, FuelLog.date <= report.end_date)
        .order_by(FuelLog.date)
    )
    return result.scalars().all()


async def _maintenance(db: AsyncSession, report: Report) -> List[MaintenanceRecord]:
    result = await db.execute(
        select(MaintenanceRecord)
        .where(MaintenanceRecord.date >= report.start_date, MaintenanceRecord.date <= report.end_date)
        .order_by(MaintenanceRecord.date)
    )
    return result.scalars().all()


async def fuel_efficiency(db: AsyncSession, report: Report):
    logs = await _fuel_logs(db, report)

    by_plate = defaultdict(list)
    for log in logs:
        by_plate[log.vehicle_plate].append(log)

    breakdown = []
    for plate in sorted(by_plate):
        vehicle_logs = by_plate[plate]
        economy = average_fuel_economy(vehicle_logs)
        breakdown.append({
            "vehicle_plate": plate,
            "refuels": len(vehicle_logs),
            "liters": round(sum(log.liters for log in vehicle_logs), 2),
            "total_cost": round(sum(log.total_cost for log in vehicle_logs), 2),
            "km_per_liter": round(economy, 2),
            "rating": fuel_efficiency_rating(economy).value,
        })

    overall = average_fuel_economy(logs)
    metrics = [
        ReportMetric(label="Litros abastecidos", value=round(sum(log.liters for log in logs), 2), unit="L"),
        ReportMetric(label="Gasto com combustível", value=round(sum(log.total_cost for log in logs), 2), unit="BRL"),
        ReportMetric(label="Consumo médio", value=round(overall, 2), unit="km/L"),
    ]
    return metrics, breakdown


async def maintenance_totals(db: AsyncSession, report: Report):
    records = await _maintenance(db, report)

    groups: Dict[tuple, Dict[str, Any]] = {}
    for record in records:
        key = (record.maintenance_type, record.status)
        row = groups.setdefault(key, {
            "maintenance_type": record.maintenance_type,
            "status": record.status,
            "count": 0,
            "cost": 0.0,
        })
        row["count"] += 1
        row["cost"] += record.cost or 0

    breakdown = [
        {**row, "cost": round(row["cost"], 2)}
        for _, row in sorted(groups.items())
    ]
    metrics = [
        ReportMetric(label="Manutenções", value=len(records)),
        ReportMetric(label="Custo total", value=round(sum(r.cost or 0 for r in records), 2), unit="BRL"),
    ]
    return metrics, breakdown


async def operating_costs(db: AsyncSession, report: Report):
    logs = await _fuel_logs(db, report)
    records = await _maintenance(db, report)

    costs = defaultdict(lambda: {"fuel_cost": 0.0, "maintenance_cost": 0.0})
    for log in logs:
        costs[log.vehicle_plate]["fuel_cost"] += log.total_cost
    for record in records:
        costs[record.vehicle_plate]["maintenance_cost"] += record.cost or 0

    breakdown = []
    for plate in sorted(costs):
        fuel_cost = round(costs[plate]["fuel_cost"], 2)
        maintenance_cost = round(costs[plate]["maintenance_cost"], 2)
        breakdown.append({
            "vehicle_plate": plate,
            "fuel_cost": fuel_cost,
            "maintenance_cost": maintenance_cost,
            "total_cost": round(fuel_cost + maintenance_cost, 2),
        })

    fuel_total = round(sum(log.total_cost for log in logs), 2)
    maintenance_total = round(sum(r.cost or 0 for r in records), 2)
    metrics = [
        ReportMetric(label="Combustível", value=fuel_total, unit="BRL"),
        ReportMetric(label="Manutenção", value=maintenance_total, unit="BRL"),
        ReportMetric(label="Custo operacional", value=round(fuel_total + maintenance_total, 2), unit="BRL"),
    ]
    return metrics, breakdown


async def driver_performance(db: AsyncSession, report: Report):
    """Inspections per driver over the range, from the checklists they filed."""
    result = await db.execute(select(Checklist).order_by(Checklist.inspection_date))
    checklists = [
        checklist for checklist in result.scalars().all()
        if report.start_date <= checklist.inspection_date.date() <= report.end_date
    ]

    names = {}
    driver_ids = {checklist.driver_id for checklist in checklists}
    if driver_ids:
        drivers = await db.execute(select(Driver).where(Driver.id.in_(driver_ids)))
        names = {driver.id: driver.name for driver in drivers.scalars().all()}

    per_driver = defaultdict(lambda: {"inspections": 0, "approved": 0, "non_conformities": 0})
    for checklist in checklists:
        row = per_driver[checklist.driver_id]
        row["inspections"] += 1
        row["non_conformities"] += checklist.total_non_conformities
        if checklist.final_status == ChecklistStatus.APPROVED.value:
            row["approved"] += 1

    breakdown = []
    for driver_id in sorted(per_driver):
        row = per_driver[driver_id]
        breakdown.append({
            "driver_id": driver_id,
            "driver": names.get(driver_id),
            **row,
            "approval_rate": round(row["approved"] * 100 / row["inspections"], 1),
        })

    approved = sum(row["approved"] for row in per_driver.values())
    metrics = [
        ReportMetric(label="Inspeções", value=len(checklists)),
        ReportMetric(label="Aprovadas", value=approved),
        ReportMetric(
            label="Taxa de aprovação",
            value=round(approved * 100 / len(checklists), 1) if checklists else 0.0,
            unit="%",
        ),
    ]
    return metrics, breakdown


ANALYSES = {
    ReportAnalysisType.FUEL_EFFICIENCY.value: fuel_efficiency,
    ReportAnalysisType.MAINTENANCE.value: maintenance_totals,
    ReportAnalysisType.OPERATING_COSTS.value: operating_costs,
    ReportAnalysisType.DRIVER_PERFORMANCE.value: driver_performance,
}


async def summarize_report(db: AsyncSession, report: Report) -> ReportSummary:
    metrics, breakdown = await ANALYSES[report.analysis_type](db, report)
    return ReportSummary(
        report_id=report.id,
        name=report.name,
        analysis_type=report.analysis_type,
        start_date=report.start_date,
        end_date=report.end_date,
        metrics=metrics,
        breakdown=breakdown,
    )
