"""
Tests for authentication, error envelopes and service endpoints.
"""

import pytest
from datetime import timedelta

from fleet_backoffice.app.core.jwt import create_access_token


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client):
    response = await client.get("/v1/vehicles")

    assert response.status_code in (401, 403)
    assert "error_code" in response.json()


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/v1/vehicles", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_UNAUTHORIZED"


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client):
    token = create_access_token({"sub": "operator"}, expires_delta=timedelta(minutes=-5))

    response = await client.get("/v1/vehicles", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_wrong_audience_is_rejected(client):
    token = create_access_token({"sub": "operator", "aud": "anon"})

    response = await client.get("/v1/vehicles", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_without_subject_is_rejected(client):
    token = create_access_token({"email": "operator@fleet.test"})

    response = await client.get("/v1/vehicles", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client, auth_headers):
    headers = {**auth_headers, "X-Correlation-ID": "req-42"}

    response = await client.get("/v1/vehicles", headers=headers)

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "req-42"
    assert "X-Process-Time" in response.headers


@pytest.mark.asyncio
async def test_validation_error_envelope(client, auth_headers):
    response = await client.post("/v1/vehicles", json={"plate": "ABC1D23"}, headers=auth_headers)

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION"
    assert body["details"]["errors"]


@pytest.mark.asyncio
async def test_health(client, mocker):
    mocker.patch("fleet_backoffice.app.main.ping_redis", return_value=True)

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["cache"] == "up"


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"
