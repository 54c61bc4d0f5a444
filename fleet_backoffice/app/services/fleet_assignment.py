"""
Driver and vehicle assignment.

A driver holds the plate of its vehicle (`Driver.vehicle_plate`) and the
vehicle points back at its driver (`Vehicle.driver_id`). The helpers here
change both sides in the caller's session without committing, so the caller
commits every row change at once or none of them.
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backoffice.app.core.exceptions import ResourceNotFoundError
from fleet_backoffice.app.models.driver import Driver
from fleet_backoffice.app.models.vehicle import Vehicle

logger = logging.getLogger("fleet.assignment")


async def _vehicle_by_plate(db: AsyncSession, plate: str) -> Optional[Vehicle]:
    result = await db.execute(select(Vehicle).where(Vehicle.plate == plate))
    return result.scalar_one_or_none()


async def release_vehicle(db: AsyncSession, driver: Driver):
    """Detach the driver from whatever vehicle it currently holds."""
    if driver.vehicle_plate:
        await db.execute(
            update(Vehicle)
            .where(Vehicle.plate == driver.vehicle_plate, Vehicle.driver_id == driver.id)
            .values(driver_id=None)
        )
    driver.vehicle_plate = None


async def assign_vehicle(db: AsyncSession, driver: Driver, plate: Optional[str]) -> Optional[Vehicle]:
    """
    Give `driver` the vehicle with `plate`, or no vehicle when `plate` is None.

    The previous vehicle of the driver loses it, and whoever held the new
    vehicle before loses its plate.

    Raises:
        ResourceNotFoundError: no vehicle has that plate
    """
    vehicle = None
    if plate:
        vehicle = await _vehicle_by_plate(db, plate)
        if vehicle is None:
            raise ResourceNotFoundError("Vehicle", plate)

    if driver.vehicle_plate != plate:
        await release_vehicle(db, driver)

    if vehicle is not None:
        await db.execute(
            update(Driver)
            .where(Driver.vehicle_plate == vehicle.plate, Driver.id != driver.id)
            .values(vehicle_plate=None)
        )
        vehicle.driver_id = driver.id
        driver.vehicle_plate = vehicle.plate

    logger.info("Driver %s assigned to vehicle %s", driver.id, plate)
    return vehicle


async def assign_driver(db: AsyncSession, vehicle: Vehicle, driver_id: Optional[int]) -> Optional[Driver]:
    """
    Vehicle-side assignment, used when a vehicle form sets its driver.

    Raises:
        ResourceNotFoundError: no driver has that id
    """
    if driver_id is None:
        if vehicle.driver_id is not None:
            await db.execute(
                update(Driver)
                .where(Driver.id == vehicle.driver_id, Driver.vehicle_plate == vehicle.plate)
                .values(vehicle_plate=None)
            )
        vehicle.driver_id = None
        return None

    driver = await db.get(Driver, driver_id)
    if driver is None:
        raise ResourceNotFoundError("Driver", driver_id)

    if vehicle.driver_id is not None and vehicle.driver_id != driver.id:
        await db.execute(
            update(Driver)
            .where(Driver.id == vehicle.driver_id, Driver.vehicle_plate == vehicle.plate)
            .values(vehicle_plate=None)
        )
    await assign_vehicle(db, driver, vehicle.plate)
    return driver


async def rename_plate(db: AsyncSession, old_plate: str, new_plate: str):
    """Keep drivers pointing at a vehicle whose plate was changed."""
    await db.execute(
        update(Driver).where(Driver.vehicle_plate == old_plate).values(vehicle_plate=new_plate)
    )
