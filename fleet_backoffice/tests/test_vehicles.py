"""
Integration tests for vehicle management.

Covers form validation, CRUD, plate normalisation and driver linkage.
"""

import pytest
from datetime import date


@pytest.mark.asyncio
async def test_create_vehicle_success(client, auth_headers, vehicle_payload):
    response = await client.post("/v1/vehicles", json=vehicle_payload(plate="abc1d23"), headers=auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["plate"] == "ABC1D23"
    assert data["fuel_type"] == "Diesel"
    assert data["driver"] is None
    assert "id" in data


@pytest.mark.asyncio
async def test_negative_odometer_rejected(client, auth_headers, vehicle_payload):
    response = await client.post("/v1/vehicles", json=vehicle_payload(odometer=-1), headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"

    listing = await client.get("/v1/vehicles", headers=auth_headers)
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"plate": "AB12"},
    {"make": "V"},
    {"year": 1989},
    {"year": date.today().year + 2},
    {"fuel_level": 101},
    {"location": "X"},
    {"status": "Quebrado"},
    {"next_maintenance": None},
])
async def test_vehicle_form_rules(client, auth_headers, vehicle_payload, overrides):
    response = await client.post("/v1/vehicles", json=vehicle_payload(**overrides), headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_plate_conflict(client, auth_headers, vehicle_payload, create_vehicle):
    await create_vehicle()

    response = await client.post("/v1/vehicles", json=vehicle_payload(model="FH 460"), headers=auth_headers)

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_001"


@pytest.mark.asyncio
async def test_list_vehicles_newest_first(client, auth_headers, create_vehicle):
    await create_vehicle(plate="AAA1A11")
    await create_vehicle(plate="BBB2B22")

    response = await client.get("/v1/vehicles", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [v["plate"] for v in data["vehicles"]] == ["BBB2B22", "AAA1A11"]


@pytest.mark.asyncio
async def test_list_vehicles_search_and_pagination(client, auth_headers, create_vehicle):
    await create_vehicle(plate="AAA1A11", make="Scania")
    await create_vehicle(plate="BBB2B22")
    await create_vehicle(plate="CCC3C33")

    response = await client.get("/v1/vehicles?search=scania", headers=auth_headers)
    assert [v["plate"] for v in response.json()["vehicles"]] == ["AAA1A11"]

    response = await client.get("/v1/vehicles?page=2&page_size=2", headers=auth_headers)
    data = response.json()
    assert data["total"] == 3
    assert len(data["vehicles"]) == 1


@pytest.mark.asyncio
async def test_get_missing_vehicle(client, auth_headers):
    response = await client.get("/v1/vehicles/999", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_update_vehicle_partial(client, auth_headers, create_vehicle):
    vehicle = await create_vehicle()

    response = await client.patch(
        f"/v1/vehicles/{vehicle['id']}",
        json={"status": "Em Manutenção", "fuel_level": 35},
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "Em Manutenção"
    assert data["fuel_level"] == 35
    assert data["make"] == "Volvo"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["make", "plate", "year", "status", "fuel_level", "location"])
async def test_update_cannot_clear_required_field(client, auth_headers, create_vehicle, field):
    vehicle = await create_vehicle()

    response = await client.patch(f"/v1/vehicles/{vehicle['id']}", json={field: None}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"

    response = await client.get(f"/v1/vehicles/{vehicle['id']}", headers=auth_headers)
    assert response.json()[field] == vehicle[field]


@pytest.mark.asyncio
async def test_vehicle_with_driver_updates_driver_plate(client, auth_headers, create_vehicle, create_driver):
    driver = await create_driver()
    vehicle = await create_vehicle(driver_id=driver["id"])

    assert vehicle["driver"] == {"id": driver["id"], "name": "João Silva"}

    response = await client.get(f"/v1/drivers/{driver['id']}", headers=auth_headers)
    assert response.json()["vehicle_plate"] == "ABC1D23"

    # Renaming the plate keeps the driver pointing at the vehicle
    await client.patch(f"/v1/vehicles/{vehicle['id']}", json={"plate": "XYZ9Z99"}, headers=auth_headers)
    response = await client.get(f"/v1/drivers/{driver['id']}", headers=auth_headers)
    assert response.json()["vehicle_plate"] == "XYZ9Z99"

    # Clearing the driver releases the driver as well
    response = await client.patch(f"/v1/vehicles/{vehicle['id']}", json={"driver_id": None}, headers=auth_headers)
    assert response.json()["driver"] is None
    response = await client.get(f"/v1/drivers/{driver['id']}", headers=auth_headers)
    assert response.json()["vehicle_plate"] is None


@pytest.mark.asyncio
async def test_vehicle_with_unknown_driver(client, auth_headers, vehicle_payload):
    response = await client.post("/v1/vehicles", json=vehicle_payload(driver_id=404), headers=auth_headers)

    assert response.status_code == 404

    listing = await client.get("/v1/vehicles", headers=auth_headers)
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_delete_vehicle(client, auth_headers, create_vehicle):
    first = await create_vehicle(plate="AAA1A11")
    second = await create_vehicle(plate="BBB2B22")

    response = await client.delete(f"/v1/vehicles/{first['id']}", headers=auth_headers)
    assert response.status_code == 204

    assert (await client.get(f"/v1/vehicles/{first['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get(f"/v1/vehicles/{second['id']}", headers=auth_headers)).status_code == 200


@pytest.mark.asyncio
async def test_vehicle_writes_are_audited(client, auth_headers, create_vehicle, db_session):
    from sqlalchemy import select
    from fleet_backoffice.app.models.audit_log import AuditLog

    vehicle = await create_vehicle()
    await client.delete(f"/v1/vehicles/{vehicle['id']}", headers=auth_headers)

    result = await db_session.execute(select(AuditLog).order_by(AuditLog.id))
    entries = result.scalars().all()
    assert [e.action for e in entries] == ["VEHICLE_CREATED", "VEHICLE_DELETED"]
    assert entries[0].actor_email == "operator@fleet.test"
    assert entries[0].entity_id == vehicle["id"]
