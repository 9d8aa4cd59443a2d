import uuid
from datetime import datetime
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.key_store import KeyStore
from datastore.reading_store import ReadingStore
from services.relay import RelayService, build_default_relay

AUTHORIZED = "Authorized person detected - IR sensor sleeping"
INTRUSION = "⚠️ ALERT: Unauthorized intrusion detected!"


def _client_for(require_api_key: bool) -> Iterator[TestClient]:
    relay = RelayService(
        keys=KeyStore(), readings=ReadingStore(), require_api_key=require_api_key
    )
    with TestClient(create_app(relay=relay)) as client:
        yield client


@pytest.fixture
def api_client() -> Iterator[TestClient]:
    yield from _client_for(require_api_key=False)


@pytest.fixture
def gated_client() -> Iterator[TestClient]:
    yield from _client_for(require_api_key=True)


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_lifespan_clears_default_relay() -> None:
    app = create_app()

    with TestClient(app):
        relay_during = build_default_relay()

    relay_after = build_default_relay()
    try:
        assert relay_after is not relay_during
    finally:
        build_default_relay.cache_clear()


def test_default_relay_is_built_before_first_request() -> None:
    build_default_relay.cache_clear()
    app = create_app()

    with TestClient(app) as client:
        assert build_default_relay.cache_info().currsize == 1
        relay = build_default_relay()

        client.post("/api/update", json={"unauthorized_suspect": True})

        assert relay.current_reading().ir_triggered is True
        assert build_default_relay() is relay

    build_default_relay.cache_clear()


def test_root_lists_operations(api_client: TestClient) -> None:
    response = api_client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "online"
    assert body["version"]
    assert body["message"]
    assert body["require_api_key"] is False
    assert body["endpoints"]["generateKey"] == "GET /api/generate-api-key"
    assert body["endpoints"]["updateData"] == "POST /api/update"
    assert body["endpoints"]["getReadings"] == "GET /api/readings"


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_initial_readings(api_client: TestClient) -> None:
    response = api_client.get("/api/readings")

    assert response.status_code == 200
    assert response.json() == {
        "ir_triggered": False,
        "rfid_authorized": False,
        "last_updated": None,
        "message": "No data received yet",
    }


def test_generate_api_key(api_client: TestClient) -> None:
    response = api_client.get("/api/generate-api-key")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert str(uuid.UUID(body["api_key"])) == body["api_key"]
    assert body["instruction"]


def test_generated_keys_are_distinct(api_client: TestClient) -> None:
    keys = {api_client.get("/api/generate-api-key").json()["api_key"] for _ in range(10)}

    assert len(keys) == 10


def test_update_with_legacy_fields(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/update", json={"ir_triggered": True, "rfid_authorized": False}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    received = body["received"]
    assert received["ir_triggered"] is True
    assert received["rfid_authorized"] is False
    assert received["message"] == INTRUSION
    assert _parse_timestamp(received["last_updated"]).tzinfo is not None


def test_update_with_current_fields_prefers_authorization(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/update", json={"unauthorized_suspect": True, "access_granted": True}
    )

    received = response.json()["received"]
    assert received["ir_triggered"] is True
    assert received["rfid_authorized"] is True
    assert received["message"] == AUTHORIZED


def test_current_field_name_overrides_legacy(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/update", json={"ir_triggered": True, "unauthorized_suspect": False}
    )

    received = response.json()["received"]
    assert received["ir_triggered"] is False
    assert received["message"] == "All clear - Monitoring..."


def test_non_boolean_values_are_coerced(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/update", json={"ir_triggered": "yes", "rfid_authorized": 0}
    )

    assert response.status_code == 200
    received = response.json()["received"]
    assert received["ir_triggered"] is True
    assert received["rfid_authorized"] is False


def test_nan_flag_is_treated_as_false(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/update",
        content='{"ir_triggered": NaN, "rfid_authorized": false}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    received = response.json()["received"]
    assert received["ir_triggered"] is False
    assert received["message"] == "All clear - Monitoring..."


def test_received_matches_subsequent_readings(api_client: TestClient) -> None:
    received = api_client.post(
        "/api/update", json={"unauthorized_suspect": True}
    ).json()["received"]

    assert api_client.get("/api/readings").json() == received


def test_identical_updates_differ_only_in_timestamp(api_client: TestClient) -> None:
    payload = {"ir_triggered": True, "rfid_authorized": False}

    first = api_client.post("/api/update", json=payload).json()["received"]
    second = api_client.post("/api/update", json=payload).json()["received"]

    first.pop("last_updated")
    second.pop("last_updated")
    assert first == second


@pytest.mark.parametrize(
    "kwargs",
    [
        {"content": "{not json", "headers": {"Content-Type": "application/json"}},
        {"json": [True, False]},
        {"json": "ir_triggered"},
        {},
        {"content": b"null", "headers": {"Content-Type": "application/json"}},
    ],
)
def test_malformed_body_is_rejected(api_client: TestClient, kwargs) -> None:
    response = api_client.post("/api/update", **kwargs)

    assert response.status_code == 400
    assert response.json()["error"] == "Malformed request body"
    assert api_client.get("/api/readings").json()["last_updated"] is None


def test_gated_update_without_key_is_rejected(gated_client: TestClient) -> None:
    response = gated_client.post("/api/update", json={"ir_triggered": True})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or missing API key"}
    assert gated_client.get("/api/readings").json()["message"] == "No data received yet"


def test_gated_update_with_unknown_key_is_rejected(gated_client: TestClient) -> None:
    response = gated_client.post(
        "/api/update", json={"api_key": str(uuid.uuid4()), "ir_triggered": True}
    )

    assert response.status_code == 401
    assert gated_client.get("/api/readings").json()["ir_triggered"] is False


def test_gated_update_with_issued_key_is_accepted(gated_client: TestClient) -> None:
    key = gated_client.get("/api/generate-api-key").json()["api_key"]

    response = gated_client.post(
        "/api/update", json={"api_key": key, "access_granted": True}
    )

    assert response.status_code == 200
    assert response.json()["received"]["message"] == AUTHORIZED
    assert gated_client.get("/").json()["require_api_key"] is True


def test_cors_allows_any_origin(api_client: TestClient) -> None:
    response = api_client.get(
        "/api/readings", headers={"Origin": "https://dashboard.example.com"}
    )

    assert response.headers["access-control-allow-origin"] == "*"


def test_dashboard_page_shows_current_message(api_client: TestClient) -> None:
    initial = api_client.get("/ui")
    assert initial.status_code == 200
    assert "No data received yet" in initial.text

    api_client.post("/api/update", json={"unauthorized_suspect": True})

    page = api_client.get("/ui")
    assert INTRUSION in page.text
    assert 'class="card danger"' in page.text
