"""
HTTP-level tests for the batch endpoint, CORS handling and health check.
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.application.search import CredentialPool, NoThrottle
from app.presentation.main import create_application


@pytest.fixture
def make_client(make_provider, router):
    def _make(responder, keys=("k1", "k2")):
        provider = make_provider(responder)
        adapters = SimpleNamespace(
            credential_pool=CredentialPool(keys),
            category_router=router,
            provider=provider,
            throttle=NoThrottle(),
        )
        return TestClient(create_application(adapters)), provider

    return _make


@pytest.mark.integration
def test_batch_returns_query_to_urls_map(make_client, responses):
    def responder(query, credential, scope_id, limit):
        if credential == "k1":
            return responses.quota(429)
        return responses.ok("u1", "u2")

    client, _ = make_client(responder)

    resp = client.post("/batch", json={"queries": ["chair"], "categories": ["Оборудование"]})

    assert resp.status_code == 200
    assert resp.json() == {"chair": ["u1", "u2"]}
    assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.integration
def test_partial_failures_still_return_200(make_client, responses):
    def responder(query, credential, scope_id, limit):
        if query.startswith("tractor"):
            return responses.quota(429)
        return responses.ok(f"https://img/{query.split()[0]}.jpg")

    client, _ = make_client(responder)

    resp = client.post(
        "/batch",
        json={
            "queries": ["tractor", "bus", "spaceship"],
            "categories": ["Транспорт", "Транспорт", "Космос"],
        },
    )

    assert resp.status_code == 200
    assert resp.json() == {"bus": ["https://img/bus.jpg"]}


@pytest.mark.integration
def test_count_mismatch_is_400_plain_text(make_client, responses):
    client, provider = make_client(lambda *a: responses.ok("u"))

    resp = client.post("/batch", json={"queries": ["a", "b"], "categories": ["Транспорт"]})

    assert resp.status_code == 400
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "queries and categories count mismatch"
    assert provider.calls == []


@pytest.mark.integration
def test_omitted_categories_without_default_is_400(make_client, responses):
    client, _ = make_client(lambda *a: responses.ok("u"))
    resp = client.post("/batch", json={"queries": ["a"]})
    assert resp.status_code == 400


@pytest.mark.integration
def test_omitted_categories_use_default_category(make_client, responses, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "default_category", "Транспорт", raising=False)
    client, provider = make_client(lambda *a: responses.ok("u"))

    resp = client.post("/batch", json={"queries": ["a"]})

    assert resp.status_code == 200
    assert resp.json() == {"a": ["u"]}
    assert provider.calls[0]["scope_id"] == "cx-transport"


@pytest.mark.integration
@pytest.mark.parametrize(
    "body",
    ["{not json", '{"queries": "chair", "categories": []}', "[]"],
)
def test_malformed_body_is_400_invalid_json(make_client, responses, body):
    client, _ = make_client(lambda *a: responses.ok("u"))

    resp = client.post("/batch", content=body, headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.text == "invalid json"
    assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.integration
def test_options_short_circuits_with_cors_headers(make_client, responses):
    client, provider = make_client(lambda *a: responses.ok("u"))

    resp = client.options("/batch")

    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers["access-control-allow-methods"] == "POST, GET, OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "Content-Type"
    assert provider.calls == []


@pytest.mark.integration
def test_unhandled_error_is_500_json_with_cors_headers(make_provider, router, responses):
    adapters = SimpleNamespace(
        credential_pool=CredentialPool(["k1"]),
        category_router=router,
        provider=make_provider(lambda *a: responses.ok("u")),
        throttle=NoThrottle(),
    )
    app = create_application(adapters)

    async def explode():
        raise RuntimeError("unexpected")

    app.add_api_route("/explode", explode, methods=["GET"])
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/explode")

    assert resp.status_code == 500
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.json()["detail"]["error"] == "Internal server error"


@pytest.mark.integration
def test_diagnostics_report_every_item(make_client, responses):
    def responder(query, *a):
        if query.startswith("broken"):
            return responses.error(400)
        return responses.ok("u")

    client, _ = make_client(responder)

    resp = client.post(
        "/batch?diagnostics=true",
        json={
            "queries": ["ok", "broken", " ", "lost"],
            "categories": ["Транспорт", "Транспорт", "Транспорт", "Иное"],
        },
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["results"] == {"ok": ["u"]}
    assert [item["status"] for item in data["items"]] == [
        "succeeded",
        "failed",
        "skipped",
        "skipped",
    ]
    assert data["items"][1]["reason"] == "provider error: HTTP 400"
    assert data["items"][0]["count"] == 1


@pytest.mark.integration
def test_health_reports_search_configuration(make_client, responses):
    client, _ = make_client(lambda *a: responses.ok("u"))

    resp = client.get("/health")

    assert resp.status_code == 200
    data = resp.json()
    assert data["credentials"] == 2
    assert data["categories"] == ["Оборудование", "Транспорт"]
