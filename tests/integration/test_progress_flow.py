from learnhub.core.constants import RoleEnum
from learnhub.models.certificate import Certificate
from learnhub.models.progress import Progress
from tests.helpers.asserts import api_call


def _enrolled_student(token_for_role, user_factory, course_factory, enroll, lessons):
    student, headers = token_for_role("student")
    teacher = user_factory(role=RoleEnum.TEACHER)
    course = course_factory(teacher, lessons=lessons)
    enroll(student, course)
    return student, headers, course


def test_certificate_only_after_last_lesson(client, db_session, token_for_role, user_factory, course_factory, enroll):
    student, headers, course = _enrolled_student(token_for_role, user_factory, course_factory, enroll, lessons=3)
    *head, last = course.lessons

    for lesson in head:
        data = api_call(client, "PUT", f"/api/progress/{lesson.id}", headers=headers,
                        json={"completed": True}).json()["data"]
        assert data["certificate"] is None
    assert data["courseProgress"] == {"completed": 2, "total": 3, "percentage": 67}

    data = api_call(client, "PUT", f"/api/progress/{last.id}", headers=headers,
                    json={"completed": True}).json()["data"]
    assert data["courseProgress"]["percentage"] == 100
    assert data["certificate"]["courseId"] == course.id


def test_replaying_completion_never_duplicates_certificate(client, db_session, token_for_role, user_factory, course_factory, enroll):
    student, headers, course = _enrolled_student(token_for_role, user_factory, course_factory, enroll, lessons=1)
    lesson = course.lessons[0]

    codes = set()
    for _ in range(3):
        data = api_call(client, "PUT", f"/api/progress/{lesson.id}", headers=headers,
                        json={"completed": True}).json()["data"]
        codes.add(data["certificate"]["uniqueCode"])

    assert len(codes) == 1
    assert db_session.query(Certificate).filter_by(user_id=student.id, course_id=course.id).count() == 1


def test_certificate_survives_uncompleting_a_lesson(client, db_session, token_for_role, user_factory, course_factory, enroll):
    student, headers, course = _enrolled_student(token_for_role, user_factory, course_factory, enroll, lessons=1)
    lesson = course.lessons[0]
    api_call(client, "PUT", f"/api/progress/{lesson.id}", headers=headers, json={"completed": True})

    data = api_call(client, "PUT", f"/api/progress/{lesson.id}", headers=headers,
                    json={"completed": False}).json()["data"]
    assert data["certificate"] is None
    assert db_session.query(Certificate).filter_by(user_id=student.id).count() == 1


def test_time_spent_accumulates_and_never_decreases(client, db_session, token_for_role, user_factory, course_factory, enroll):
    student, headers, course = _enrolled_student(token_for_role, user_factory, course_factory, enroll, lessons=1)
    lesson = course.lessons[0]

    seen = []
    for delta in (30, 0, 15, 45):
        data = api_call(client, "PUT", f"/api/progress/{lesson.id}", headers=headers,
                        json={"timeSpent": delta}).json()["data"]
        seen.append(data["progress"]["timeSpent"])
    api_call(client, "PUT", f"/api/progress/{lesson.id}", headers=headers, json={"completed": True})

    assert seen == [30, 30, 45, 90]
    assert seen == sorted(seen)
    rows = db_session.query(Progress).filter_by(user_id=student.id, lesson_id=lesson.id).all()
    assert len(rows) == 1
    assert rows[0].time_spent == 90


def test_new_lesson_drops_percentage_but_keeps_certificate(client, token_for_role, user_factory, course_factory, enroll):
    student, headers, course = _enrolled_student(token_for_role, user_factory, course_factory, enroll, lessons=1)
    api_call(client, "PUT", f"/api/progress/{course.lessons[0].id}", headers=headers, json={"completed": True})

    _, admin_headers = token_for_role("admin")
    api_call(client, "POST", "/api/lessons", headers=admin_headers,
             json={"courseId": course.id, "title": "Bonus", "type": "TEXT"})

    data = api_call(client, "GET", f"/api/progress/course/{course.id}", headers=headers).json()["data"]
    assert data["course"]["progress"] == 50
    assert data["course"]["isCompleted"] is False
    assert data["certificate"] is not None
