import pytest
from fastapi.testclient import TestClient

from learnhub.core.constants import RoleEnum
from tests.helpers.asserts import api_call, expect_status, assert_error


def test_admin_creates_user_with_lowercased_email(client: TestClient, token_for_role):
    _, headers = token_for_role("admin")
    response = expect_status(client, "POST", "/api/users", 201, headers=headers, json={
        "name": "New Student", "email": "New.Student@Test.com", "password": "secret1",
    })
    data = response.json()["data"]
    assert data["email"] == "new.student@test.com"
    assert data["role"] == "STUDENT"


def test_create_user_duplicate_email_is_409(client: TestClient, token_for_role, user_factory):
    _, headers = token_for_role("admin")
    user_factory(email="taken@test.com")
    response = client.post("/api/users", headers=headers, json={
        "name": "Dup", "email": "TAKEN@test.com", "password": "secret1",
    })
    assert_error(response, 409, "CONFLICT")


def test_create_user_short_password_is_400(client: TestClient, token_for_role):
    _, headers = token_for_role("admin")
    response = client.post("/api/users", headers=headers, json={
        "name": "Short", "email": "short@test.com", "password": "123",
    })
    body = assert_error(response, 400, "VALIDATION_ERROR")
    assert body["error"]["details"]["errors"]


def test_list_users_filters_and_paginates(client: TestClient, token_for_role, user_factory):
    _, headers = token_for_role("admin")
    user_factory(role=RoleEnum.TEACHER, name="Grace Hopper")
    user_factory(role=RoleEnum.STUDENT, name="Alan Turing")
    user_factory(role=RoleEnum.STUDENT, name="Ada Lovelace")

    response = api_call(client, "GET", "/api/users?role=STUDENT&limit=1", headers=headers)
    body = response.json()
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
    assert len(body["data"]) == 1
    assert body["data"][0]["role"] == "STUDENT"
    assert "enrollmentCount" in body["data"][0]

    response = api_call(client, "GET", "/api/users?search=hopper", headers=headers)
    assert [u["name"] for u in response.json()["data"]] == ["Grace Hopper"]


def test_list_users_caps_limit(client: TestClient, token_for_role):
    _, headers = token_for_role("admin")
    response = api_call(client, "GET", "/api/users?limit=500", headers=headers)
    assert response.json()["pagination"]["limit"] == 100


def test_user_directory_excludes_caller(client: TestClient, token_for_role, user_factory):
    me, headers = token_for_role("student")
    other = user_factory(name="Other Person")
    response = api_call(client, "GET", "/api/users/list", headers=headers)
    ids = [u["id"] for u in response.json()["data"]]
    assert other.id in ids
    assert me.id not in ids


def test_get_user_detail_includes_enrollments(client: TestClient, token_for_role, user_factory, course_factory, enroll):
    _, headers = token_for_role("admin")
    teacher = user_factory(role=RoleEnum.TEACHER)
    student = user_factory()
    course = course_factory(teacher, title="Algebra", lessons=1)
    enroll(student, course)

    response = api_call(client, "GET", f"/api/users/{student.id}", headers=headers)
    data = response.json()["data"]
    assert data["enrollments"][0]["course"]["title"] == "Algebra"
    assert data["progress"] == []


def test_get_unknown_user_is_404(client: TestClient, token_for_role):
    _, headers = token_for_role("admin")
    assert_error(client.get("/api/users/99999", headers=headers), 404, "NOT_FOUND")


def test_admin_updates_role_and_password(client: TestClient, token_for_role, user_factory):
    _, headers = token_for_role("admin")
    user = user_factory()
    response = api_call(client, "PUT", f"/api/users/{user.id}", headers=headers,
                        json={"role": "TEACHER", "password": "changed123"})
    assert response.json()["data"]["role"] == "TEACHER"
    api_call(client, "POST", "/api/auth/login", json={"email": user.email, "password": "changed123"})


def test_update_my_profile(client: TestClient, token_for_role):
    _, headers = token_for_role("student")
    response = api_call(client, "PUT", "/api/users/me", headers=headers,
                        json={"name": "Renamed", "avatar": "/uploads/me.png"})
    data = response.json()["data"]
    assert data["name"] == "Renamed"
    assert data["avatar"] == "/uploads/me.png"


def test_admin_cannot_delete_self(client: TestClient, token_for_role):
    admin, headers = token_for_role("admin")
    assert_error(client.delete(f"/api/users/{admin.id}", headers=headers), 400, "VALIDATION_ERROR")


def test_delete_user_cascades(client: TestClient, token_for_role, user_factory, course_factory, enroll, db_session):
    _, headers = token_for_role("admin")
    teacher = user_factory(role=RoleEnum.TEACHER)
    student = user_factory()
    course = course_factory(teacher, lessons=2)
    enroll(student, course)

    api_call(client, "DELETE", f"/api/users/{teacher.id}", headers=headers)

    from learnhub.models.course import Course
    from learnhub.models.enrollment import Enrollment
    assert db_session.query(Course).count() == 0
    assert db_session.query(Enrollment).count() == 0


@pytest.mark.parametrize("body", [
    {"name": None, "role": "TEACHER"},
    {"role": None, "name": "Still Named"},
])
def test_admin_update_rejects_null_for_required_field(client: TestClient, token_for_role, user_factory, body):
    _, headers = token_for_role("admin")
    target = user_factory(role=RoleEnum.STUDENT, name="Original Name")

    assert_error(client.put(f"/api/users/{target.id}", headers=headers, json=body), 400, "VALIDATION_ERROR")

    data = api_call(client, "GET", f"/api/users/{target.id}", headers=headers).json()["data"]
    assert data["name"] == "Original Name"
    assert data["role"] == "STUDENT"


def test_profile_update_rejects_null_name(client: TestClient, token_for_role):
    _, headers = token_for_role("student")
    response = client.put("/api/users/me", headers=headers, json={"name": None, "avatar": "/uploads/me.png"})
    assert_error(response, 400, "VALIDATION_ERROR")


def test_user_search_treats_underscore_literally(client: TestClient, token_for_role, user_factory):
    _, headers = token_for_role("admin")
    user_factory(role=RoleEnum.STUDENT, name="snake_case fan", email="snake@test.com")
    user_factory(role=RoleEnum.STUDENT, name="Plain Name", email="plain@test.com")

    response = client.get("/api/users", headers=headers, params={"search": "_"})
    assert response.status_code == 200, response.text
    assert [u["name"] for u in response.json()["data"]] == ["snake_case fan"]
