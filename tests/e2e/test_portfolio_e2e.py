"""
End-to-End tests for the portfolio content lifecycle.
Drive the app through HTTP only, against an in-process database and a temporary upload directory.
"""

import re

from fastapi.testclient import TestClient

from portfolio_api.main import create_app
from tests.consts import TEST_BUCKET_NAME, TEST_PNG_CONTENT, TEST_PNG_CONTENT_TYPE, TEST_PNG_NAME
from tests.fixtures.app_client import StubMailer, make_settings


class TestProjectLifecycle:
    """Create, read, update and delete a project with an uploaded image"""

    def test_complete_project_lifecycle(self, client: TestClient, media_store):
        # Step 1: create with an uploaded file
        created = client.post(
            "/projects",
            data={"title": "Demo", "description": "d", "link": "http://x"},
            files={"image": (TEST_PNG_NAME, TEST_PNG_CONTENT, TEST_PNG_CONTENT_TYPE)},
        ).json()
        stored_name = created["image"].rsplit("/", 1)[-1]
        assert created["image"] == f"http://testserver/uploads/{stored_name}"
        assert (media_store.root / stored_name).exists()

        # Step 2: it is listed and served
        listed = client.get("/projects").json()
        assert [item["_id"] for item in listed] == [created["_id"]]
        assert client.get(f"/uploads/{stored_name}").content == TEST_PNG_CONTENT

        # Step 3: update the text only, the image stays
        updated = client.put(f"/projects/{created['_id']}", data={"description": "better"}).json()
        assert updated["description"] == "better"
        assert updated["title"] == "Demo"
        assert updated["image"] == created["image"]

        # Step 4: delete removes the document and its file
        assert client.delete(f"/projects/{created['_id']}").json() == {"success": True}
        assert client.get("/projects").json() == []
        assert not (media_store.root / stored_name).exists()

    def test_same_row_renders_per_origin(self, app):
        with TestClient(app, base_url="http://localhost:5000") as local_client:
            local_client.post("/achievements", data={"title": "t"}, files={"image": ("a.jpg", b"jpg", "image/jpeg")})
            local_image = local_client.get("/achievements").json()[0]["image"]

        with TestClient(app, base_url="https://portfolio.example.com") as public_client:
            public_image = public_client.get("/achievements").json()[0]["image"]

        assert local_image.startswith("http://localhost:5000/uploads/")
        assert public_image.startswith("https://portfolio.example.com/uploads/")
        assert local_image.rsplit("/", 1)[-1] == public_image.rsplit("/", 1)[-1]


class TestS3MediaBackend:
    """The same flow with uploads kept in S3"""

    def test_upload_and_serve_from_s3(self, tmp_path, mongo_client, s3_client):
        settings = make_settings(tmp_path, media_backend="s3", s3_bucket_name=TEST_BUCKET_NAME)
        app = create_app(settings, mongo_client=mongo_client, mailer=StubMailer())

        with TestClient(app) as client:
            created = client.post(
                "/achievements",
                data={"title": "Cloud"},
                files={"image": (TEST_PNG_NAME, TEST_PNG_CONTENT, TEST_PNG_CONTENT_TYPE)},
            ).json()
            stored_name = re.match(r"^http://testserver/uploads/(.+)$", created["image"]).group(1)

            keys = [obj["Key"] for obj in s3_client.list_objects_v2(Bucket=TEST_BUCKET_NAME)["Contents"]]
            assert keys == [f"uploads/{stored_name}"]

            response = client.get(f"/uploads/{stored_name}")
            assert response.status_code == 200
            assert response.content == TEST_PNG_CONTENT

            client.delete(f"/achievements/{created['_id']}")
            assert "Contents" not in s3_client.list_objects_v2(Bucket=TEST_BUCKET_NAME)
