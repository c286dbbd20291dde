# tests/test_app.py

import logging
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from wavenote.config import DashboardSettings
from wavenote.dashboard.app import create_app
from wavenote.utils.validators import (
    INVALID_DATE_MESSAGE,
    MISSING_CREDENTIALS_MESSAGE,
    MISSING_FIELDS_MESSAGE
)

CREDENTIALS = {"email": "ada@example.com", "password": "secret1"}


@pytest.fixture()
def client(settings: DashboardSettings) -> Iterator[TestClient]:
    with TestClient(create_app(settings)) as client:
        yield client


def _sign_up(client: TestClient) -> None:
    response = client.post("/api/auth/signup", json=CREDENTIALS)
    assert response.status_code == 200


def _add_task(client: TestClient, title: str, date: str = "2999-12-31", time: str = "18:00") -> dict:
    client.post("/api/dialog/open")
    for name, value in (("title", title), ("description", f"{title} details"), ("date", date), ("time", time)):
        client.patch("/api/dialog/fields", json={"name": name, "value": value})
    return client.post("/api/dialog/submit").json()


# ===== SERVICE ROUTES =====

def test_health_and_ping(client: TestClient) -> None:
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert health.json()["services"]["initialized"] is True

    assert client.get("/ping").json()["message"] == "pong"


# ===== PAGES =====

@pytest.mark.parametrize("path", ["/", "/signup"])
def test_signup_page_is_the_default(client: TestClient, path: str) -> None:
    response = client.get(path)

    assert response.status_code == 200
    assert "Sign Up" in response.text
    assert "Already have an account? Login" in response.text


def test_signup_form_redirects_to_dashboard(client: TestClient) -> None:
    response = client.post("/signup", data=CREDENTIALS, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"

    page = client.get("/dashboard")
    assert "ada@example.com" in page.text
    assert "Unfinished Tasks" in page.text
    assert "Completed Tasks" in page.text


def test_signup_form_with_empty_fields(client: TestClient) -> None:
    response = client.post("/signup", data={"email": "ada@example.com", "password": ""})

    assert response.status_code == 400
    assert MISSING_CREDENTIALS_MESSAGE in response.text


def test_login_form_shows_auth_errors(client: TestClient) -> None:
    response = client.post("/login", data={"email": "nobody@example.com", "password": "secret1"})

    assert response.status_code == 400
    assert "auth/invalid-credential" in response.text


def test_login_after_logout(client: TestClient) -> None:
    client.post("/signup", data=CREDENTIALS)
    logout = client.post("/logout", follow_redirects=False)
    assert logout.headers["location"] == "/login"
    assert client.get("/api/auth/me").json()["authenticated"] is False

    response = client.post("/login", data=CREDENTIALS, follow_redirects=False)

    assert response.status_code == 303
    assert client.get("/api/auth/me").json()["user"]["email"] == "ada@example.com"


def test_dashboard_without_user_renders_empty_lists(client: TestClient) -> None:
    response = client.get("/dashboard")

    assert response.status_code == 200
    assert "No tasks" in response.text


def test_dashboard_form_flow(client: TestClient) -> None:
    client.post("/signup", data=CREDENTIALS)
    client.post("/dashboard/tasks/add")

    page = client.get("/dashboard")
    assert 'action="/dashboard/dialog/submit"' in page.text

    form = {"title": "Buy milk", "description": "", "date": "2999-12-31", "time": "08:00"}
    page = client.post("/dashboard/dialog/submit", data=form)
    assert MISSING_FIELDS_MESSAGE in page.text

    form["description"] = "2 litres"
    page = client.post("/dashboard/dialog/submit", data=form)
    assert "Buy milk" in page.text
    assert "31.12.2999 08:00" in page.text

    task_id = client.get("/api/tasks/").json()["uncompleted"][0]["task_id"]
    client.post(f"/dashboard/tasks/{task_id}/toggle")
    assert client.get("/api/tasks/").json()["completed"][0]["task_id"] == task_id

    client.post(f"/dashboard/tasks/{task_id}/delete")
    assert client.get("/api/tasks/").json() == {"uncompleted": [], "completed": []}


# ===== JSON API =====

def test_api_signup_validation(client: TestClient) -> None:
    response = client.post("/api/auth/signup", json={"email": "", "password": ""})

    assert response.status_code == 400
    assert response.json()["detail"] == MISSING_CREDENTIALS_MESSAGE


def test_api_task_lifecycle(client: TestClient) -> None:
    _sign_up(client)

    result = _add_task(client, "Write report")
    assert result["saved"] is True
    assert result["dialog"]["open"] is False
    task = result["tasks"]["uncompleted"][0]
    assert task["title"] == "Write report"
    assert task["completed"] is False

    toggled = client.post(f"/api/tasks/{task['task_id']}/toggle").json()
    assert toggled["uncompleted"] == []
    assert toggled["completed"][0]["task_id"] == task["task_id"]

    duplicated = client.post(f"/api/tasks/{task['task_id']}/duplicate").json()
    assert len(duplicated["completed"]) == 2

    remaining = client.delete(f"/api/tasks/{task['task_id']}").json()
    assert len(remaining["completed"]) == 1
    assert remaining["completed"][0]["task_id"] != task["task_id"]


def test_api_invalid_date_keeps_dialog_open(client: TestClient) -> None:
    _sign_up(client)

    result = _add_task(client, "Broken", date="31/12/2999")

    assert result["saved"] is False
    assert result["dialog"]["open"] is True
    assert result["dialog"]["date_error"] == INVALID_DATE_MESSAGE
    assert result["tasks"]["uncompleted"] == []


def test_api_edit_dialog(client: TestClient) -> None:
    _sign_up(client)
    task_id = _add_task(client, "Gym")["tasks"]["uncompleted"][0]["task_id"]

    dialog = client.post(f"/api/dialog/edit/{task_id}").json()
    assert dialog["is_editing"] is True
    assert dialog["form_data"]["date"] == "2999-12-31"
    assert dialog["form_data"]["time"] == "18:00"

    client.patch("/api/dialog/fields", json={"name": "title", "value": "Gym day"})
    result = client.post("/api/dialog/submit").json()

    assert result["saved"] is True
    assert [t["title"] for t in result["tasks"]["uncompleted"]] == ["Gym day"]


def test_api_unknown_task(client: TestClient) -> None:
    _sign_up(client)

    assert client.post("/api/tasks/missing/toggle").status_code == 404
    assert client.post("/api/dialog/edit/missing").status_code == 404


def test_api_unknown_field_is_rejected(client: TestClient) -> None:
    response = client.patch("/api/dialog/fields", json={"name": "priority", "value": "high"})

    assert response.status_code == 422


def test_users_only_see_their_own_tasks(client: TestClient) -> None:
    _sign_up(client)
    _add_task(client, "Ada's task")
    client.post("/api/auth/logout")

    client.post("/api/auth/signup", json={"email": "bob@example.com", "password": "secret2"})
    assert client.get("/api/tasks/").json() == {"uncompleted": [], "completed": []}
    client.post("/api/auth/logout")

    client.post("/api/auth/login", json=CREDENTIALS)
    assert len(client.get("/api/tasks/").json()["uncompleted"]) == 1


def test_cancel_keeps_what_was_typed(client: TestClient) -> None:
    client.post("/signup", data=CREDENTIALS)
    client.post("/dashboard/tasks/add")

    form = {"title": "Draft", "description": "half done", "date": "2999-12-31", "time": ""}
    client.post("/dashboard/dialog/close", data=form)

    dialog = client.get("/api/dialog/").json()
    assert dialog["open"] is False
    assert dialog["form_data"] == {"title": "Draft", "description": "half done", "date": "2999-12-31", "time": ""}
    assert client.get("/api/tasks/").json()["uncompleted"] == []


# ===== SESSIONS =====

def test_cookieless_requests_do_not_grow_the_session_registry(settings: DashboardSettings) -> None:
    with TestClient(create_app(settings.model_copy(update={"MAX_SESSIONS": 5}))) as client:
        for _ in range(50):
            client.cookies.clear()
            assert client.get("/api/tasks/").status_code == 200

        assert len(client.app.state.services.sessions) == 5


def test_generated_secret_key_is_reported_at_startup(tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                                     caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.delenv("SECRET_KEY", raising=False)
    settings = DashboardSettings(ENVIRONMENT="testing", DATA_DIR=tmp_path / "data", LOG_TO_FILE=False)
    assert settings.secret_key_generated

    with caplog.at_level(logging.WARNING):
        with TestClient(create_app(settings)):
            pass

    assert any("SECRET_KEY is not set" in record.getMessage() for record in caplog.records)


def test_configured_secret_key_is_not_reported(settings: DashboardSettings,
                                               caplog: pytest.LogCaptureFixture) -> None:
    assert not settings.secret_key_generated

    with caplog.at_level(logging.WARNING):
        with TestClient(create_app(settings)):
            pass

    assert not any("SECRET_KEY" in record.getMessage() for record in caplog.records)
