import logging

from sqlalchemy.orm import Session

from learnhub.core.exceptions import Forbidden, NotFound
from learnhub.crud.certificate import certificate as crud_certificate
from learnhub.crud.course import course as crud_course
from learnhub.crud.enrollment import enrollment as crud_enrollment
from learnhub.crud.lesson import lesson as crud_lesson
from learnhub.crud.progress import progress as crud_progress
from learnhub.models.user import User
from learnhub.schemas.certificate import Certificate as CertificateSchema, PortfolioCertificate
from learnhub.schemas.progress import (
    ProgressUpdate,
    Progress as ProgressSchema,
    ProgressUpdateResult,
    CourseProgressSummary,
    CourseProgressItem,
    CourseProgressDetail,
    ProgressStats,
    ProgressOverview,
    Portfolio,
    PortfolioStats,
)

logger = logging.getLogger(__name__)


def calculate_percentage(completed: int, total: int) -> int:
    """Whole-number percentage, rounding halves up; 0 for an empty course."""
    if total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


class CourseProgressService:

    def _get_enrollment_or_403(self, db: Session, user_id: int, course_id: int):
        enrollment = crud_enrollment.get_by_user_and_course(db, user_id=user_id, course_id=course_id)
        if not enrollment:
            raise Forbidden("You are not enrolled in this course.")
        return enrollment

    def _summarize(self, db: Session, user_id: int, course_id: int) -> CourseProgressSummary:
        completed = crud_progress.count_completed_for_course(db, user_id=user_id, course_id=course_id)
        total = crud_lesson.count_by_course(db, course_id=course_id)
        return CourseProgressSummary(completed=completed, total=total, percentage=calculate_percentage(completed, total))

    def update_lesson_progress(
        self, db: Session, *, lesson_id: int, progress_in: ProgressUpdate, current_user: User
    ) -> ProgressUpdateResult:
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise NotFound("Lesson not found.")
        self._get_enrollment_or_403(db, current_user.id, lesson.course_id)

        progress = crud_progress.upsert(
            db,
            user_id=current_user.id,
            lesson_id=lesson_id,
            completed=progress_in.completed,
            time_spent=progress_in.time_spent,
            quiz_score=progress_in.quiz_score,
        )

        summary = self._summarize(db, current_user.id, lesson.course_id)
        certificate = None
        if summary.total > 0 and summary.completed == summary.total:
            cert, created = crud_certificate.issue(db, user_id=current_user.id, course_id=lesson.course_id)
            if created:
                logger.info(
                    f"Certificate {cert.unique_code} issued to user {current_user.id} for course {lesson.course_id}"
                )
            certificate = CertificateSchema.model_validate(cert)

        return ProgressUpdateResult(
            progress=ProgressSchema.model_validate(progress),
            course_progress=summary,
            certificate=certificate,
        )

    def _course_item(self, enrollment, total_lessons: int, completed: int, time_spent: int) -> CourseProgressItem:
        percentage = calculate_percentage(completed, total_lessons)
        return CourseProgressItem(
            course_id=enrollment.course_id,
            course_title=enrollment.course.title,
            enrolled_at=enrollment.enrolled_at,
            progress=percentage,
            completed_lessons=completed,
            total_lessons=total_lessons,
            time_spent=time_spent,
            is_completed=total_lessons > 0 and completed == total_lessons,
        )

    def get_overview(self, db: Session, *, current_user: User) -> ProgressOverview:
        enrollments = crud_enrollment.get_by_user(db, user_id=current_user.id)
        rollups = crud_progress.get_course_rollups_for_user(
            db, user_id=current_user.id, course_ids=[e.course_id for e in enrollments]
        )

        courses = []
        for enrollment in enrollments:
            completed, time_spent = rollups.get(enrollment.course_id, (0, 0))
            courses.append(self._course_item(enrollment, enrollment.course.lesson_count, completed, time_spent))

        completed_courses = sum(1 for c in courses if c.is_completed)
        in_progress_courses = sum(1 for c in courses if not c.is_completed and c.progress > 0)
        stats = ProgressStats(
            total_courses=len(courses),
            completed_courses=completed_courses,
            in_progress_courses=in_progress_courses,
            total_time_spent=sum(c.time_spent for c in courses),
            average_progress=int(sum(c.progress for c in courses) / len(courses) + 0.5) if courses else 0,
        )
        return ProgressOverview(courses=courses, stats=stats)

    def get_course_progress(self, db: Session, *, course_id: int, current_user: User) -> CourseProgressDetail:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFound("Course not found.")
        enrollment = self._get_enrollment_or_403(db, current_user.id, course_id)

        rows = crud_progress.get_by_user_and_course(db, user_id=current_user.id, course_id=course_id)
        completed = sum(1 for r in rows if r.completed)
        time_spent = sum(r.time_spent or 0 for r in rows)
        certificate = crud_certificate.get_by_user_and_course(db, user_id=current_user.id, course_id=course_id)

        return CourseProgressDetail(
            course=self._course_item(enrollment, course.lesson_count, completed, time_spent),
            lessons=[ProgressSchema.model_validate(r) for r in rows],
            certificate=CertificateSchema.model_validate(certificate) if certificate else None,
        )

    def get_portfolio(self, db: Session, *, current_user: User) -> Portfolio:
        certificates = crud_certificate.get_by_user(db, user_id=current_user.id)
        lessons_completed, time_spent = crud_progress.get_user_totals(db, user_id=current_user.id)
        return Portfolio(
            certificates=[PortfolioCertificate.model_validate(c) for c in certificates],
            stats=PortfolioStats(
                completed_courses=len(certificates),
                total_lessons_completed=lessons_completed,
                total_time_spent=time_spent,
            ),
        )

course_progress_service = CourseProgressService()
