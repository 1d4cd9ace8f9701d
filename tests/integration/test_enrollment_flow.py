from learnhub.core.constants import RoleEnum
from learnhub.models.enrollment import Enrollment
from learnhub.models.progress import Progress
from tests.helpers.asserts import api_call, expect_status, assert_error


def test_duplicate_enrollment_is_409_and_single_row(client, db_session, token_for_role, user_factory, course_factory):
    student, headers = token_for_role("student")
    teacher = user_factory(role=RoleEnum.TEACHER)
    course = course_factory(teacher)

    expect_status(client, "POST", f"/api/courses/{course.id}/enroll", 201, headers=headers)
    assert_error(client.post(f"/api/courses/{course.id}/enroll", headers=headers), 409, "CONFLICT")
    assert db_session.query(Enrollment).filter_by(user_id=student.id, course_id=course.id).count() == 1


def test_removing_student_deletes_their_course_progress_only(client, db_session, token_for_role, course_factory, enroll):
    teacher, teacher_headers = token_for_role("teacher")
    student, student_headers = token_for_role("student")
    course = course_factory(teacher, title="Leaving", lessons=2)
    other_course = course_factory(teacher, title="Staying", lessons=1)
    enroll(student, course)
    enroll(student, other_course)

    for lesson in course.lessons + other_course.lessons:
        api_call(client, "PUT", f"/api/progress/{lesson.id}", headers=student_headers, json={"timeSpent": 5})

    api_call(client, "DELETE", f"/api/courses/{course.id}/students/{student.id}", headers=teacher_headers)

    lesson_ids = [l.id for l in course.lessons]
    assert db_session.query(Progress).filter(Progress.user_id == student.id, Progress.lesson_id.in_(lesson_ids)).count() == 0
    assert db_session.query(Progress).filter_by(user_id=student.id, lesson_id=other_course.lessons[0].id).count() == 1
    assert db_session.query(Enrollment).filter_by(user_id=student.id, course_id=course.id).count() == 0

    response = client.put(f"/api/progress/{course.lessons[0].id}", headers=student_headers, json={"completed": True})
    assert_error(response, 403, "FORBIDDEN")


def test_batch_enroll_skips_existing(client, db_session, token_for_role, user_factory, course_factory, enroll):
    teacher, headers = token_for_role("teacher")
    course = course_factory(teacher)
    u1, u2, u3 = (user_factory(role=RoleEnum.STUDENT) for _ in range(3))
    enroll(u2, course)

    data = api_call(client, "POST", f"/api/courses/{course.id}/enrollments/batch", headers=headers,
                    json={"userIds": [u1.id, u2.id, u3.id, u1.id]}).json()["data"]
    assert data["enrolledCount"] == 2
    assert data["alreadyEnrolledCount"] == 1
    assert data["enrolledUserIds"] == [u1.id, u3.id]
    assert data["alreadyEnrolledUserIds"] == [u2.id]
    assert db_session.query(Enrollment).filter_by(course_id=course.id).count() == 3


def test_deleting_course_removes_dependents(client, db_session, token_for_role, user_factory, course_factory, enroll):
    teacher, teacher_headers = token_for_role("teacher")
    student, student_headers = token_for_role("student")
    course = course_factory(teacher, lessons=1)
    enroll(student, course)
    api_call(client, "PUT", f"/api/progress/{course.lessons[0].id}", headers=student_headers, json={"completed": True})

    api_call(client, "DELETE", f"/api/courses/{course.id}", headers=teacher_headers)

    assert db_session.query(Enrollment).filter_by(user_id=student.id).count() == 0
    assert db_session.query(Progress).filter_by(user_id=student.id).count() == 0
    certs = api_call(client, "GET", "/api/certificates", headers=student_headers).json()["data"]
    assert certs == []
