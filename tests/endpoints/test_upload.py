import pytest
from fastapi.testclient import TestClient

from learnhub.core.config import settings
from tests.helpers.asserts import expect_status, api_call, assert_error

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def test_upload_avatar(client: TestClient, token_for_role, upload_dir):
    _, headers = token_for_role("student")
    response = client.post("/api/upload/avatar", headers=headers,
                           files={"file": ("me.PNG", PNG_BYTES, "image/png")})
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["filename"].startswith("file-")
    assert data["filename"].endswith(".png")
    assert data["url"] == f"/uploads/{data['filename']}"
    assert data["size"] == len(PNG_BYTES)
    assert (upload_dir / data["filename"]).read_bytes() == PNG_BYTES


def test_disallowed_extension_writes_nothing(client: TestClient, token_for_role, upload_dir):
    _, headers = token_for_role("student")
    response = client.post("/api/upload/avatar", headers=headers,
                           files={"file": ("virus.exe", b"MZ", "image/png")})
    assert_error(response, 400, "VALIDATION_ERROR")
    assert list(upload_dir.iterdir()) == []


def test_mime_type_must_be_an_image(client: TestClient, token_for_role, upload_dir):
    _, headers = token_for_role("student")
    response = client.post("/api/upload/avatar", headers=headers,
                           files={"file": ("photo.jpg", b"text", "text/plain")})
    assert_error(response, 400, "VALIDATION_ERROR")
    assert list(upload_dir.iterdir()) == []


def test_oversized_file_is_rejected(client: TestClient, token_for_role, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 16)
    _, headers = token_for_role("student")
    response = client.post("/api/upload/avatar", headers=headers,
                           files={"file": ("big.png", PNG_BYTES, "image/png")})
    body = assert_error(response, 400, "VALIDATION_ERROR")
    assert body["error"]["details"]["size"] == len(PNG_BYTES)


def test_course_image_requires_staff(client: TestClient, token_for_role, upload_dir):
    _, student_headers = token_for_role("student")
    response = client.post("/api/upload/course-image", headers=student_headers,
                           files={"file": ("cover.png", PNG_BYTES, "image/png")})
    assert_error(response, 403, "FORBIDDEN")

    _, teacher_headers = token_for_role("teacher")
    response = client.post("/api/upload/lesson-file", headers=teacher_headers,
                           files={"file": ("slide.webp", PNG_BYTES, "image/webp")})
    assert response.status_code == 201, response.text


def test_delete_upload(client: TestClient, token_for_role, upload_dir):
    _, headers = token_for_role("teacher")
    filename = client.post("/api/upload/course-image", headers=headers,
                           files={"file": ("cover.gif", PNG_BYTES, "image/gif")}).json()["data"]["filename"]

    api_call(client, "DELETE", f"/api/upload/{filename}", headers=headers)
    assert not (upload_dir / filename).exists()
    assert_error(client.delete(f"/api/upload/{filename}", headers=headers), 404, "NOT_FOUND")


def test_delete_rejects_path_separators(client: TestClient, token_for_role, upload_dir):
    _, headers = token_for_role("student")
    assert_error(client.delete("/api/upload/..%5Csecret.png", headers=headers), 400, "VALIDATION_ERROR")


def test_upload_requires_authentication(client: TestClient, upload_dir):
    response = client.post("/api/upload/avatar", files={"file": ("me.png", PNG_BYTES, "image/png")})
    assert_error(response, 401, "UNAUTHORIZED")
