import pytest

from learnhub.core.constants import RoleEnum

ACTORS = ["student", "owner", "other_teacher", "admin"]
CASES = [
    ("PUT", "/api/courses/{course_id}", {"title": "Renamed"},
     {"student": 403, "owner": 200, "other_teacher": 403, "admin": 200}),
    ("DELETE", "/api/courses/{course_id}", None,
     {"student": 403, "owner": 200, "other_teacher": 403, "admin": 200}),
    ("GET", "/api/courses/{course_id}/students", None,
     {"student": 403, "owner": 200, "other_teacher": 403, "admin": 200}),
    ("GET", "/api/courses/{course_id}/analytics", None,
     {"student": 403, "owner": 200, "other_teacher": 403, "admin": 200}),
    ("GET", "/api/courses/{course_id}/enrollable-users", None,
     {"student": 403, "owner": 200, "other_teacher": 403, "admin": 200}),
    ("POST", "/api/lessons", {"courseId": "{course_id}", "title": "Extra", "type": "TEXT"},
     {"student": 403, "owner": 201, "other_teacher": 403, "admin": 201}),
    ("GET", "/api/users", None,
     {"student": 403, "owner": 403, "other_teacher": 403, "admin": 200}),
    ("GET", "/api/courses/{course_id}", None,
     {"student": 200, "owner": 200, "other_teacher": 200, "admin": 200}),
]


def _fill(value, course_id):
    if isinstance(value, str):
        return int(course_id) if value == "{course_id}" else value.format(course_id=course_id)
    if isinstance(value, dict):
        return {k: _fill(v, course_id) for k, v in value.items()}
    return value


@pytest.mark.parametrize("method,path,body,expect", CASES, ids=[f"{m} {p}" for m, p, _, _ in CASES])
@pytest.mark.parametrize("actor", ACTORS)
def test_course_rbac_matrix(client, user_factory, login, course_factory, method, path, body, expect, actor):
    owner = user_factory(role=RoleEnum.TEACHER)
    course = course_factory(owner, lessons=1)
    users = {
        "student": lambda: user_factory(role=RoleEnum.STUDENT),
        "owner": lambda: owner,
        "other_teacher": lambda: user_factory(role=RoleEnum.TEACHER),
        "admin": lambda: user_factory(role=RoleEnum.ADMIN),
    }
    headers = login(users[actor]())

    response = client.request(method, _fill(path, course.id), headers=headers, json=_fill(body, course.id))
    assert response.status_code == expect[actor], f"{actor} {method} {path} => {response.status_code}, body={response.text}"
    if response.status_code == 403:
        assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.parametrize("actor,expected", [("student", 401), ("anonymous", 401)])
def test_protected_routes_reject_missing_or_bad_tokens(client, actor, expected):
    headers = {"Authorization": "Bearer not-a-token"} if actor == "student" else None
    response = client.get("/api/progress", headers=headers)
    assert response.status_code == expected
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
