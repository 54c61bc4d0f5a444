"""
Integration tests for vehicle inspection checklists.
"""

import pytest

from fleet_backoffice.app.services.checklist import build_template


def conforming_sections():
    sections = build_template()
    for section in sections.values():
        for item in section["items"]:
            item["conforming"] = True
    return sections


@pytest.fixture
async def inspection_refs(create_driver, create_vehicle):
    driver = await create_driver()
    vehicle = await create_vehicle()
    return driver, vehicle


@pytest.fixture
def checklist_payload(inspection_refs):
    driver, vehicle = inspection_refs

    def build(**overrides):
        data = {
            "inspection_date": "05/03/2024 07:45:00",
            "vehicle_plate": vehicle["plate"].lower(),
            "implement_plate": "imp4e56",
            "driver_id": driver["id"],
            "odometer": 120500,
            "inspection_location": "Pátio Campinas",
            "checklist_type": "Pré-viagem",
            "sections": conforming_sections(),
            "driver_signature": True,
            "leadership_approval": False,
            "image_urls": ["https://storage.fleet.test/checklists/cab-front.jpg"],
        }
        data.update(overrides)
        return data
    return build


@pytest.mark.asyncio
async def test_template_endpoint(client, auth_headers):
    response = await client.get("/v1/checklists/template", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_items"] == 45
    assert len(data["sections"]) == 6


@pytest.mark.asyncio
async def test_all_conforming_is_approved(client, auth_headers, checklist_payload):
    response = await client.post("/v1/checklists", json=checklist_payload(), headers=auth_headers)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["total_non_conformities"] == 0
    assert data["final_status"] == "APROVADO"
    assert data["vehicle_plate"] == "ABC1D23"
    assert data["implement_plate"] == "IMP4E56"
    assert data["inspection_date"].startswith("2024-03-05T07:45:00")


@pytest.mark.asyncio
async def test_non_conformities_are_counted(client, auth_headers, checklist_payload):
    sections = conforming_sections()
    sections["brakes_and_tyres"]["items"][0]["conforming"] = False
    sections["brakes_and_tyres"]["items"][0]["observations"] = "Pneu dianteiro esquerdo baixo"
    sections["cab"]["items"][9]["conforming"] = False

    response = await client.post(
        "/v1/checklists",
        json=checklist_payload(sections=sections, leadership_approval=True),
        headers=auth_headers
    )

    assert response.status_code == 201
    data = response.json()
    assert data["total_non_conformities"] == 2
    assert data["final_status"] == "REPROVADO"
    assert data["sections"]["brakes_and_tyres"]["items"][0]["observations"] == "Pneu dianteiro esquerdo baixo"


@pytest.mark.asyncio
async def test_failed_inspection_needs_leadership(client, auth_headers, checklist_payload):
    sections = conforming_sections()
    sections["lighting"]["items"][1]["conforming"] = False

    response = await client.post("/v1/checklists", json=checklist_payload(sections=sections), headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_RULE_001"
    assert response.json()["details"]["total_non_conformities"] == 1


@pytest.mark.asyncio
async def test_driver_must_sign(client, auth_headers, checklist_payload):
    response = await client.post("/v1/checklists", json=checklist_payload(driver_signature=False), headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_sections_must_match_template(client, auth_headers, checklist_payload):
    sections = conforming_sections()
    sections["cab"]["items"].pop()

    response = await client.post("/v1/checklists", json=checklist_payload(sections=sections), headers=auth_headers)
    assert response.status_code == 422

    sections = conforming_sections()
    del sections["implement"]
    response = await client.post("/v1/checklists", json=checklist_payload(sections=sections), headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_vehicle_is_conflict(client, auth_headers, checklist_payload):
    response = await client.post("/v1/checklists", json=checklist_payload(vehicle_plate="ZZZ0Z00"), headers=auth_headers)

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_001"


@pytest.mark.asyncio
async def test_bad_date_falls_back_to_now(client, auth_headers, checklist_payload):
    response = await client.post(
        "/v1/checklists",
        json=checklist_payload(inspection_date="sem data"),
        headers=auth_headers
    )

    assert response.status_code == 201
    assert response.json()["inspection_date"]


@pytest.mark.asyncio
async def test_update_recomputes_status(client, auth_headers, checklist_payload):
    created = (await client.post("/v1/checklists", json=checklist_payload(), headers=auth_headers)).json()

    cab = conforming_sections()["cab"]
    cab["items"][3]["conforming"] = False

    response = await client.patch(
        f"/v1/checklists/{created['id']}",
        json={"sections": {"cab": cab}},
        headers=auth_headers
    )
    assert response.status_code == 422

    response = await client.patch(
        f"/v1/checklists/{created['id']}",
        json={"sections": {"cab": cab}, "leadership_approval": True},
        headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total_non_conformities"] == 1
    assert data["final_status"] == "REPROVADO"
    assert len(data["sections"]) == 6


@pytest.mark.asyncio
async def test_checklist_stats(client, auth_headers, checklist_payload):
    failing = conforming_sections()
    failing["documentation"]["items"][0]["conforming"] = False
    failing["documentation"]["items"][1]["conforming"] = False

    await client.post("/v1/checklists", json=checklist_payload(), headers=auth_headers)
    await client.post("/v1/checklists", json=checklist_payload(), headers=auth_headers)
    await client.post(
        "/v1/checklists",
        json=checklist_payload(sections=failing, leadership_approval=True),
        headers=auth_headers
    )

    response = await client.get("/v1/checklists/stats", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["approved"] == 2
    assert data["approved_percentage"] == 67
    assert data["average_non_conformities"] == 0.7


@pytest.mark.asyncio
async def test_delete_checklist(client, auth_headers, checklist_payload):
    created = (await client.post("/v1/checklists", json=checklist_payload(), headers=auth_headers)).json()

    response = await client.delete(f"/v1/checklists/{created['id']}", headers=auth_headers)

    assert response.status_code == 204
    assert (await client.get(f"/v1/checklists/{created['id']}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_update_cannot_clear_sections(client, auth_headers, checklist_payload):
    created = (await client.post("/v1/checklists", json=checklist_payload(), headers=auth_headers)).json()

    response = await client.patch(f"/v1/checklists/{created['id']}", json={"sections": None}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_inspected_vehicle_plate_cannot_be_renamed(client, auth_headers, inspection_refs, checklist_payload):
    _, vehicle = inspection_refs
    await client.post("/v1/checklists", json=checklist_payload(), headers=auth_headers)

    response = await client.patch(f"/v1/vehicles/{vehicle['id']}", json={"plate": "XYZ9Z99"}, headers=auth_headers)

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_001"

    response = await client.get(f"/v1/vehicles/{vehicle['id']}", headers=auth_headers)
    assert response.json()["plate"] == vehicle["plate"]
