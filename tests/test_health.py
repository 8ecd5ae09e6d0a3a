from __future__ import annotations

import pytest


@pytest.mark.integration
def test_healthz_endpoint(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["x-request-id"]


@pytest.mark.integration
def test_health_reports_database_state(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "database_configured": False}


@pytest.mark.integration
def test_metrics_endpoint(client):
    client.get("/healthz")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text
