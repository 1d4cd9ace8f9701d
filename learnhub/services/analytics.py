from datetime import datetime, timedelta, timezone
from typing import List

from sqlalchemy.orm import Session

from learnhub.core.constants import PROGRESS_BUCKETS
from learnhub.crud.certificate import certificate as crud_certificate
from learnhub.crud.enrollment import enrollment as crud_enrollment
from learnhub.crud.lesson import lesson as crud_lesson
from learnhub.crud.progress import progress as crud_progress
from learnhub.models.user import User
from learnhub.schemas.analytics import (
    AnalyticsCourse,
    CourseAnalytics,
    LessonCompletionStat,
    ProgressBucket,
    TopStudent,
)
from learnhub.schemas.user import UserSummary
from learnhub.services.course import course_service
from learnhub.services.course_progress import calculate_percentage

TOP_STUDENTS_LIMIT = 5
ACTIVITY_WINDOW = timedelta(days=7)


def progress_bucket(completed: int, total: int) -> str:
    """Bucket a learner by their exact completed/total ratio."""
    if total <= 0 or completed <= 0:
        return PROGRESS_BUCKETS[0]
    if completed >= total:
        return PROGRESS_BUCKETS[5]
    ratio = completed / total
    if ratio <= 0.25:
        return PROGRESS_BUCKETS[1]
    if ratio <= 0.5:
        return PROGRESS_BUCKETS[2]
    if ratio <= 0.75:
        return PROGRESS_BUCKETS[3]
    return PROGRESS_BUCKETS[4]


class AnalyticsService:

    def get_course_analytics(self, db: Session, *, course_id: int, current_user: User) -> CourseAnalytics:
        course = course_service.get_managed_course(db, course_id, current_user)
        since = datetime.now(timezone.utc) - ACTIVITY_WINDOW

        lessons = crud_lesson.get_by_course(db, course_id=course_id)
        enrollments = crud_enrollment.get_by_course(db, course_id=course_id)
        student_ids = [e.user_id for e in enrollments]
        total_lessons = len(lessons)
        total_students = len(enrollments)

        rollups = crud_progress.get_user_rollups_for_course(db, course_id=course_id)
        per_student = {uid: rollups.get(uid, (0, 0)) for uid in student_ids}

        completed_rows = sum(completed for completed, _ in per_student.values())
        finished = sum(1 for completed, _ in per_student.values() if total_lessons and completed >= total_lessons)
        certificates_issued = crud_certificate.count_by_course(db, course_id=course_id)

        distribution = {name: 0 for name in PROGRESS_BUCKETS}
        for completed, _ in per_student.values():
            distribution[progress_bucket(completed, total_lessons)] += 1

        lesson_counts = crud_progress.get_lesson_completion_counts(db, course_id=course_id, user_ids=student_ids)
        active_ids = crud_progress.get_active_user_ids(db, course_id=course_id, since=since) & set(student_ids)

        top_students = self._top_students(enrollments, per_student, total_lessons)

        return CourseAnalytics(
            course=AnalyticsCourse(id=course.id, title=course.title, lesson_count=total_lessons),
            total_students=total_students,
            new_students_this_week=crud_enrollment.count_by_course(db, course_id=course_id, since=since),
            active_students=len(active_ids),
            average_progress=calculate_percentage(completed_rows, total_students * total_lessons),
            completion_rate=calculate_percentage(finished, total_students),
            certificates_issued=certificates_issued,
            certificate_rate=calculate_percentage(certificates_issued, total_students),
            progress_distribution=[ProgressBucket(name=name, value=distribution[name]) for name in PROGRESS_BUCKETS],
            lesson_completion=[
                LessonCompletionStat(
                    lesson_id=lesson.id,
                    title=lesson.title,
                    order=lesson.order,
                    completed=lesson_counts.get(lesson.id, 0),
                )
                for lesson in lessons
            ],
            top_students=top_students,
        )

    def _top_students(self, enrollments, per_student: dict, total_lessons: int) -> List[TopStudent]:
        ranked = sorted(
            enrollments,
            key=lambda e: (per_student[e.user_id][0], per_student[e.user_id][1]),
            reverse=True,
        )
        return [
            TopStudent(
                user=UserSummary.model_validate(e.user),
                progress=calculate_percentage(per_student[e.user_id][0], total_lessons),
                completed_lessons=per_student[e.user_id][0],
                time_spent=per_student[e.user_id][1],
            )
            for e in ranked[:TOP_STUDENTS_LIMIT]
        ]

analytics_service = AnalyticsService()
