"""
Integration tests for fuel logs and fuel statistics.
"""

import pytest


def fuel_payload(**overrides):
    data = {
        "vehicle_plate": "ABC1D23",
        "date": "2024-03-01",
        "liters": 50,
        "odometer": 10000,
        "total_cost": 300,
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_create_fuel_log(client, auth_headers):
    response = await client.post("/v1/fuel-logs", json=fuel_payload(), headers=auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["liters"] == 50
    assert data["price_per_liter"] == 6.0


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"vehicle_plate": ""},
    {"date": None},
    {"liters": 0.05},
    {"odometer": -5},
    {"total_cost": 0},
])
async def test_fuel_log_form_rules(client, auth_headers, overrides):
    response = await client.post("/v1/fuel-logs", json=fuel_payload(**overrides), headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_fuel_stats(client, auth_headers):
    await client.post("/v1/fuel-logs", json=fuel_payload(), headers=auth_headers)
    await client.post(
        "/v1/fuel-logs",
        json=fuel_payload(date="2024-03-10", odometer=10600, liters=50, total_cost=310),
        headers=auth_headers
    )
    await client.post(
        "/v1/fuel-logs",
        json=fuel_payload(vehicle_plate="XYZ9Z99", liters=40, odometer=5000, total_cost=240),
        headers=auth_headers
    )

    response = await client.get("/v1/fuel-logs/stats", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_liters"] == 140
    assert data["total_cost"] == 850
    assert data["average_consumption"] == 12.0
    assert data["efficiency_rating"] == "Excelente"

    response = await client.get("/v1/fuel-logs/stats?vehicle_plate=XYZ9Z99", headers=auth_headers)
    data = response.json()
    assert data["total_liters"] == 40
    assert data["average_consumption"] == 0
    assert data["average_price_per_liter"] == 6.0


@pytest.mark.asyncio
async def test_update_and_delete_fuel_log(client, auth_headers):
    created = (await client.post("/v1/fuel-logs", json=fuel_payload(), headers=auth_headers)).json()

    response = await client.patch(f"/v1/fuel-logs/{created['id']}", json={"liters": 60}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["liters"] == 60
    assert response.json()["total_cost"] == 300

    response = await client.patch(f"/v1/fuel-logs/{created['id']}", json={"total_cost": None}, headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"

    response = await client.delete(f"/v1/fuel-logs/{created['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert (await client.get(f"/v1/fuel-logs/{created['id']}", headers=auth_headers)).status_code == 404
