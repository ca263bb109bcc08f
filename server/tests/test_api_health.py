"""API health, readiness and metrics tests."""

import pytest


@pytest.mark.asyncio
async def test_api_health_endpoints(test_client):
    """Test the health endpoints."""
    # Test basic health endpoint
    response = await test_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"

    # Test ready endpoint
    response = await test_client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"] == "ok"

    # Test info endpoint
    response = await test_client.get("/info")
    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert "version" in data
    assert data["currency"] == "MXN"


@pytest.mark.asyncio
async def test_health_ping_probes_database(test_client):
    response = await test_client.post("/v1/health/ping")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "ok"


@pytest.mark.asyncio
async def test_metrics_endpoint(test_client):
    """Test the metrics endpoint."""
    await test_client.get("/health")

    response = await test_client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "http_request_duration_seconds" in response.text


@pytest.mark.asyncio
async def test_request_id_is_echoed(test_client):
    response = await test_client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
