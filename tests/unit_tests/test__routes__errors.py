from types import SimpleNamespace

from fastapi import status
from fastapi.testclient import TestClient
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from portfolio_api.main import create_app
from tests.consts import TEST_PNG_CONTENT, TEST_PNG_CONTENT_TYPE, TEST_PNG_NAME
from tests.fixtures.app_client import StubMailer, make_settings


def database_down(*args, **kwargs):
    raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")


def test_list_hides_database_errors(client: TestClient, app, monkeypatch):
    monkeypatch.setattr(app.state.mongo_adapter, "list_documents", database_down)

    response = client.get("/projects")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_list_surfaces_database_errors_when_configured(tmp_path, mongo_client, monkeypatch):
    settings = make_settings(tmp_path, list_errors_as_empty=False)
    app = create_app(settings, mongo_client=mongo_client, mailer=StubMailer())
    monkeypatch.setattr(app.state.mongo_adapter, "list_documents", database_down)

    with TestClient(app) as client:
        response = client.get("/achievements")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Failed to load"}


def test_write_failures_answer_500(client: TestClient, app, monkeypatch):
    adapter = app.state.mongo_adapter
    for method in ("create_document", "update_document", "delete_document"):
        monkeypatch.setattr(adapter, method, database_down)

    created = client.post("/achievements", data={"title": "t", "description": "d"})
    updated = client.put("/achievements/665f1c2e8b3e4a0012345678", data={"title": "t"})
    deleted = client.delete("/achievements/665f1c2e8b3e4a0012345678")

    assert created.status_code == updated.status_code == deleted.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert created.json() == {"error": "Failed to save"}
    assert updated.json() == {"error": "Failed to update"}
    assert deleted.json() == {"error": "Failed to delete"}


def test_failed_save_leaves_no_orphaned_upload(client: TestClient, app, media_store, monkeypatch):
    monkeypatch.setattr(app.state.mongo_adapter, "create_document", database_down)

    response = client.post(
        "/projects",
        data={"title": "t"},
        files={"image": (TEST_PNG_NAME, TEST_PNG_CONTENT, TEST_PNG_CONTENT_TYPE)},
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert list(media_store.root.iterdir()) == []


def test_send_failure_answers_500_and_keeps_serving(app):
    app.state.mailer = StubMailer(fail=True)

    with TestClient(app) as client:
        response = client.post("/send", json={"name": "A", "email": "a@x.com", "message": "hi"})
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"success": False, "error": "Email failed"}

        # the process keeps answering
        assert client.get("/projects").status_code == status.HTTP_200_OK


def test_send_without_mail_account_fails_cleanly(client: TestClient, app):
    app.state.mailer = StubMailer(account=None)

    response = client.post("/send", json={"email": "a@x.com", "message": "hi"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["success"] is False


def test_admin_verify_without_configured_secret(tmp_path, mongo_client):
    app = create_app(make_settings(tmp_path, admin_password=None), mongo_client=mongo_client, mailer=StubMailer())

    with TestClient(app) as client:
        response = client.post("/admin/verify", json={})

    assert response.json() == {"success": False, "error": "Wrong password"}


def test_uploads_not_found(client: TestClient):
    assert client.get("/uploads/1718000000000-000000000000.png").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/uploads/.env").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/uploads/..%2Fpyproject.toml").status_code == status.HTTP_404_NOT_FOUND


def test_unhandled_errors_answer_500(client: TestClient, app, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(app.state.resource_services["projects"], "list", boom)

    response = client.get("/projects")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Internal server error"}


def test_media_write_failures_answer_with_write_errors(client: TestClient, app, monkeypatch):
    def disk_full(*args, **kwargs):
        raise OSError(28, "No space left on device")

    existing = client.post("/projects", data={"title": "t"}).json()
    monkeypatch.setattr(app.state.media_store, "store", disk_full)

    created = client.post("/projects", data={"title": "t"}, files={"image": (TEST_PNG_NAME, TEST_PNG_CONTENT, TEST_PNG_CONTENT_TYPE)})
    updated = client.put(
        f"/projects/{existing['_id']}",
        data={"title": "t2"},
        files={"image": (TEST_PNG_NAME, TEST_PNG_CONTENT, TEST_PNG_CONTENT_TYPE)},
    )

    assert created.status_code == updated.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert created.json() == {"error": "Failed to save"}
    assert updated.json() == {"error": "Failed to update"}
    assert [item["title"] for item in client.get("/projects").json()] == ["t"]


def test_health_reports_database_auth_failure(client: TestClient, app, monkeypatch):
    def auth_failed(*args, **kwargs):
        raise OperationFailure("Authentication failed.", code=18)

    unauthorized = SimpleNamespace(admin=SimpleNamespace(command=auth_failed), close=lambda: None)
    monkeypatch.setattr(app.state.mongo_adapter, "client", unauthorized)

    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "degraded"
    assert response.json()["components"]["database"] == "unreachable"
