"""Health endpoint and app metadata tests."""

from __future__ import annotations

from fastapi.testclient import TestClient

from kharcha.config import settings


def test_health_reports_app_version(client: TestClient) -> None:
    """Health responds without auth and echoes the configured version."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": settings.app_version}


def test_openapi_title_is_the_ledger_api(client: TestClient) -> None:
    schema = client.get("/openapi.json").json()
    assert schema["info"]["title"] == settings.app_name
    assert "/ledger/{collection}" in schema["paths"]
