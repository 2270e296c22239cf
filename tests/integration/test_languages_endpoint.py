"""Integration tests for the language session API."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient


@pytest.fixture()
def synced_client(client: FlaskClient, fake_http, sample_csv: str) -> FlaskClient:
    fake_http.queue(sample_csv)
    assert client.post("/api/v1/sync").status_code == HTTPStatus.OK
    return client


def test_languages_listed_after_sync(synced_client: FlaskClient) -> None:
    payload = synced_client.get("/api/v1/languages").get_json()

    assert payload == {"current": "English", "available": ["English", "Spanish", "French"]}


def test_language_support_lookup(synced_client: FlaskClient) -> None:
    assert synced_client.get("/api/v1/languages/French").get_json()["supported"] is True
    assert synced_client.get("/api/v1/languages/fr").get_json()["supported"] is False


def test_change_language(synced_client: FlaskClient, preferences) -> None:
    response = synced_client.put("/api/v1/languages/current", json={"language": "Spanish"})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["current"] == "Spanish"
    assert preferences.get("SelectedLanguage") == "Spanish"


def test_change_to_unknown_language_is_rejected(synced_client: FlaskClient) -> None:
    response = synced_client.put("/api/v1/languages/current", json={"language": "fr"})

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert response.get_json()["error"] == "unsupported_language"
    assert synced_client.get("/api/v1/languages").get_json()["current"] == "English"


def test_change_language_requires_field(synced_client: FlaskClient) -> None:
    response = synced_client.put("/api/v1/languages/current", json={})

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_cycle_language(synced_client: FlaskClient) -> None:
    currents = [
        synced_client.post("/api/v1/languages/cycle").get_json()["current"] for _ in range(3)
    ]

    assert currents == ["Spanish", "French", "English"]


def test_cycle_without_languages_conflicts(client: FlaskClient) -> None:
    response = client.post("/api/v1/languages/cycle")

    assert response.status_code == HTTPStatus.CONFLICT
    assert response.get_json()["error"] == "no_languages"


def test_change_language_before_first_sync_conflicts(client: FlaskClient) -> None:
    response = client.put("/api/v1/languages/current", json={"language": "English"})

    assert response.status_code == HTTPStatus.CONFLICT
    assert response.get_json()["error"] == "session_not_initialized"
    assert client.get("/api/v1/languages").get_json()["current"] is None
