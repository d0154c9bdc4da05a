"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from growth_tracker.api.app import create_app
from tests.conftest import VALID_SUMMARY

OWNER_HEADERS = {"X-Owner-Id": "owner-1"}


def _client(container) -> TestClient:
    return TestClient(create_app(container))


def _seed(client: TestClient, animal_id: str = "A-1") -> None:
    for date, weight in (("2024-03-01", 50), ("2024-03-11", 60)):
        response = client.post(
            f"/animals/{animal_id}/weights",
            json={"date": date, "weight": weight},
            headers=OWNER_HEADERS,
        )
        assert response.status_code == 200


def test_health(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_record_and_list_weights(container) -> None:
    client = _client(container)
    _seed(client)

    weights = client.get("/animals/A-1/weights", headers=OWNER_HEADERS)
    animals = client.get("/animals", headers=OWNER_HEADERS)

    assert weights.status_code == 200
    assert [item["weight"] for item in weights.json()["ok"]] == [50.0, 60.0]
    assert animals.json() == {"ok": ["A-1"]}


def test_invalid_weight_is_bad_request(container) -> None:
    response = _client(container).post(
        "/animals/A-1/weights",
        json={"date": "2024-03-01", "weight": -2},
        headers=OWNER_HEADERS,
    )

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "InvalidInput"


def test_malformed_body_is_bad_request(container) -> None:
    response = _client(container).post(
        "/animals/A-1/weights",
        json={"date": "2024-03-01", "weight": {"kg": 2}},
        headers=OWNER_HEADERS,
    )

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "InvalidInput"


def test_missing_owner_header_is_bad_request(container) -> None:
    response = _client(container).get("/animals")

    assert response.status_code == 400


def test_remove_weight_by_date(container) -> None:
    client = _client(container)
    _seed(client)

    removed = client.delete(
        "/animals/A-1/weights", params={"date": "2024-03-01"}, headers=OWNER_HEADERS
    )
    missing = client.delete(
        "/animals/A-1/weights", params={"date": "2024-03-01"}, headers=OWNER_HEADERS
    )

    assert removed.json() == {"ok": {"removed": 1}}
    assert missing.status_code == 404


def test_generate_and_fetch_report(container) -> None:
    client = _client(container)
    _seed(client)

    created = client.post(
        "/reports",
        json={
            "animal_id": "A-1",
            "start_date": "2024-03-01",
            "end_date": "2024-03-31",
            "report_name": "march",
        },
        headers=OWNER_HEADERS,
    )
    fetched = client.get("/reports/march", headers=OWNER_HEADERS)
    listed = client.get("/reports", headers=OWNER_HEADERS)

    assert created.status_code == 200
    document = fetched.json()["ok"]
    assert document["targetAnimals"] == ["A-1"]
    assert document["results"][0]["averageDailyGain"] == 1.0
    assert [item["reportName"] for item in listed.json()["ok"]] == ["march"]


def test_rename_conflict_and_missing_report(container) -> None:
    client = _client(container)
    _seed(client)
    for name in ("march", "april"):
        client.post(
            "/reports",
            json={
                "animal_id": "A-1",
                "start_date": "2024-03-01",
                "end_date": "2024-03-31",
                "report_name": name,
            },
            headers=OWNER_HEADERS,
        )

    conflict = client.post(
        "/reports/march/rename", json={"new_name": "april"}, headers=OWNER_HEADERS
    )
    missing = client.get("/reports/june", headers=OWNER_HEADERS)

    assert conflict.status_code == 409
    assert conflict.json()["error"]["kind"] == "Conflict"
    assert missing.status_code == 404


def test_delete_animal_cascades(container) -> None:
    client = _client(container)
    _seed(client)
    client.post(
        "/reports",
        json={
            "animal_id": "A-1",
            "start_date": "2024-03-01",
            "end_date": "2024-03-31",
            "report_name": "march",
        },
        headers=OWNER_HEADERS,
    )

    deleted = client.delete("/animals/A-1", headers=OWNER_HEADERS)
    report = client.get("/reports/march", headers=OWNER_HEADERS)

    assert deleted.status_code == 200
    assert report.status_code == 404


def test_summary_endpoints(container) -> None:
    client = _client(container)
    _seed(client)
    client.post(
        "/reports",
        json={
            "animal_id": "A-1",
            "start_date": "2024-03-01",
            "end_date": "2024-03-31",
            "report_name": "march",
        },
        headers=OWNER_HEADERS,
    )

    cached_before = client.get("/reports/march/summary/cached", headers=OWNER_HEADERS)
    created = client.get("/reports/march/summary", headers=OWNER_HEADERS)
    cached_after = client.get("/reports/march/summary/cached", headers=OWNER_HEADERS)

    assert cached_before.json() == {"ok": {"summary": ""}}
    assert created.json() == {"ok": {"summary": VALID_SUMMARY}}
    assert cached_after.json() == created.json()


def test_invalid_model_output_is_bad_gateway(container) -> None:
    text_client = container.classifier_service.client
    text_client.response = "not json"
    client = _client(container)
    _seed(client)
    client.post(
        "/reports",
        json={
            "animal_id": "A-1",
            "start_date": "2024-03-01",
            "end_date": "2024-03-31",
            "report_name": "march",
        },
        headers=OWNER_HEADERS,
    )

    response = client.post("/reports/march/summary", headers=OWNER_HEADERS)

    assert response.status_code == 502
    assert response.json()["error"]["kind"] == "InvalidUpstreamResponse"
