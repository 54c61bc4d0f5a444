"""
Unit tests for the fleet calculations.
"""

import pytest
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from fleet_backoffice.app.services.calculations import (
    average_fuel_economy, fuel_efficiency_rating, expiring_licenses,
    maintenance_due_status, days_until, price_per_liter
)


@dataclass
class Refuel:
    vehicle_plate: str
    date: Optional[date]
    liters: Optional[float]
    odometer: Optional[float]


@dataclass
class LicensedDriver:
    name: str
    license_expiry: Optional[date]


TODAY = date(2024, 6, 15)


def test_economy_needs_two_records():
    assert average_fuel_economy([]) == 0
    assert average_fuel_economy([Refuel("ABC1D23", TODAY, 40, 1000)]) == 0


def test_economy_sorts_by_date():
    logs = [
        Refuel("ABC1D23", date(2024, 6, 10), 50, 1600),
        Refuel("ABC1D23", date(2024, 6, 1), 45, 1000),
        Refuel("ABC1D23", date(2024, 6, 20), 40, 2040),
    ]

    # (600 + 440) km over (50 + 40) L
    assert average_fuel_economy(logs) == pytest.approx(1040 / 90)


def test_economy_skips_unusable_pairs():
    logs = [
        Refuel("ABC1D23", date(2024, 6, 1), 45, 1000),
        Refuel("ABC1D23", date(2024, 6, 5), 30, 900),
        Refuel("ABC1D23", date(2024, 6, 9), None, 1400),
    ]

    assert average_fuel_economy(logs) == 0


def test_economy_pairs_within_each_vehicle():
    logs = [
        Refuel("AAA1A11", date(2024, 6, 1), 40, 1000),
        Refuel("BBB2B22", date(2024, 6, 2), 40, 50000),
        Refuel("AAA1A11", date(2024, 6, 3), 40, 1480),
        Refuel("BBB2B22", date(2024, 6, 4), 50, 50500),
    ]

    assert average_fuel_economy(logs) == pytest.approx(980 / 90)


@pytest.mark.parametrize("value,expected", [
    (15, "Excelente"),
    (12, "Excelente"),
    (11.9, "Bom"),
    (10, "Bom"),
    (9.99, "Baixo"),
    (0, "Baixo"),
])
def test_fuel_efficiency_rating(value, expected):
    assert fuel_efficiency_rating(value).value == expected


def test_expiring_licenses_window_is_inclusive():
    drivers = [
        LicensedDriver("today", TODAY),
        LicensedDriver("limit", TODAY + timedelta(days=30)),
        LicensedDriver("beyond", TODAY + timedelta(days=31)),
        LicensedDriver("expired", TODAY - timedelta(days=1)),
        LicensedDriver("unknown", None),
    ]

    result = expiring_licenses(drivers, days=30, today=TODAY)

    assert [d.name for d in result] == ["today", "limit"]


def test_days_until():
    assert days_until(TODAY + timedelta(days=12), TODAY) == 12
    assert days_until(TODAY, TODAY) == 0


@pytest.mark.parametrize("offset,expected", [
    (-1, "Vencida"),
    (0, "Próxima"),
    (7, "Próxima"),
    (8, "Agendada"),
])
def test_maintenance_due_status(offset, expected):
    assert maintenance_due_status(TODAY + timedelta(days=offset), TODAY).value == expected


def test_maintenance_without_date():
    assert maintenance_due_status(None, TODAY).value == "Sem data"


def test_price_per_liter():
    assert price_per_liter(310.0, 50) == 6.2
    assert price_per_liter(100.0, 0) == 0
