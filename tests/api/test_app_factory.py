from __future__ import annotations

from types import SimpleNamespace

from fastapi.testclient import TestClient

from app import main as app_main


def _settings(*, enable_openapi_docs: bool) -> SimpleNamespace:
    return SimpleNamespace(log_level="INFO", enable_openapi_docs=enable_openapi_docs)


def test_create_app_registers_hive_and_health_routes(monkeypatch) -> None:
    monkeypatch.setattr(app_main, "get_settings", lambda: _settings(enable_openapi_docs=True))

    application = app_main.create_app()
    paths = {route.path for route in application.routes}

    assert "/internal/hives/{hive_id}/detail" in paths
    assert "/health" in paths
    assert "/ready" in paths


def test_openapi_docs_can_be_disabled(monkeypatch) -> None:
    monkeypatch.setattr(app_main, "get_settings", lambda: _settings(enable_openapi_docs=False))
    client = TestClient(app_main.create_app())

    assert client.get("/docs").status_code == 404
    assert client.get("/openapi.json").status_code == 404


def test_openapi_schema_documents_hive_detail(monkeypatch) -> None:
    monkeypatch.setattr(app_main, "get_settings", lambda: _settings(enable_openapi_docs=True))
    client = TestClient(app_main.create_app())

    schema = client.get("/openapi.json").json()

    assert "/internal/hives/{hive_id}/detail" in schema["paths"]
    assert "HiveMemberDetailResponse" in schema["components"]["schemas"]


def test_health_is_always_ok(monkeypatch) -> None:
    monkeypatch.setattr(app_main, "get_settings", lambda: _settings(enable_openapi_docs=False))
    client = TestClient(app_main.create_app())

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
