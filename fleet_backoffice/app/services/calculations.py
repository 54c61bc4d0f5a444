"""
Fleet calculations.

Pure functions over plain values or ORM rows; nothing here touches the
database.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, List, Optional, Protocol

from fleet_backoffice.app.models.enums import MaintenanceDueStatus, FuelEfficiencyRating

UPCOMING_MAINTENANCE_DAYS = 7


class Refuel(Protocol):
    vehicle_plate: str
    date: Optional[date]
    liters: Optional[float]
    odometer: Optional[float]


class LicensedDriver(Protocol):
    license_expiry: Optional[date]


def average_fuel_economy(logs: Iterable[Refuel]) -> float:
    """
    Average km per litre over a set of refuels.

    Refuels are grouped by vehicle and sorted by date. For every consecutive
    pair where both odometers and the later litres are set and the distance is
    positive, the distance and the later litres are accumulated. Fewer than two
    refuels, or no usable pair, gives 0.
    """
    logs = list(logs)
    if len(logs) < 2:
        return 0.0

    by_vehicle = defaultdict(list)
    for log in logs:
        by_vehicle[log.vehicle_plate].append(log)

    total_km = 0.0
    total_liters = 0.0
    for vehicle_logs in by_vehicle.values():
        vehicle_logs.sort(key=lambda log: log.date or date.min)
        for previous, current in zip(vehicle_logs, vehicle_logs[1:]):
            if not (current.odometer and previous.odometer and current.liters):
                continue
            km = current.odometer - previous.odometer
            if km > 0:
                total_km += km
                total_liters += current.liters

    if total_liters <= 0:
        return 0.0
    return total_km / total_liters


def fuel_efficiency_rating(km_per_liter: float) -> FuelEfficiencyRating:
    if km_per_liter >= 12:
        return FuelEfficiencyRating.EXCELLENT
    if km_per_liter >= 10:
        return FuelEfficiencyRating.GOOD
    return FuelEfficiencyRating.LOW


def days_until(target: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    return (target - today).days


def expiring_licenses(
    drivers: Iterable[LicensedDriver],
    days: int = 30,
    today: Optional[date] = None,
) -> List[LicensedDriver]:
    """Drivers whose license expires between today and today + `days`, inclusive."""
    today = today or date.today()
    limit = today + timedelta(days=days)
    return [
        driver for driver in drivers
        if driver.license_expiry is not None and today <= driver.license_expiry <= limit
    ]


def maintenance_due_status(
    when: Optional[date],
    today: Optional[date] = None,
    upcoming_days: int = UPCOMING_MAINTENANCE_DAYS,
) -> MaintenanceDueStatus:
    if when is None:
        return MaintenanceDueStatus.NO_DATE
    today = today or date.today()
    remaining = (when - today).days
    if remaining < 0:
        return MaintenanceDueStatus.OVERDUE
    if remaining <= upcoming_days:
        return MaintenanceDueStatus.UPCOMING
    return MaintenanceDueStatus.SCHEDULED


def price_per_liter(total_cost: Optional[float], liters: Optional[float]) -> float:
    if not liters:
        return 0.0
    return round((total_cost or 0) / liters, 2)
