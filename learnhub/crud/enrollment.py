from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from learnhub.crud.base import CRUDBase
from learnhub.models.enrollment import Enrollment
from learnhub.models.lesson import Lesson
from learnhub.models.progress import Progress
from learnhub.schemas.enrollment import Enrollment as EnrollmentSchema



class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentSchema, EnrollmentSchema]):

    def get_by_user_and_course(self, db: Session, *, user_id: int, course_id: int) -> Optional[Enrollment]:
        return (
            db.query(Enrollment)
            .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
            .first()
        )

    def is_enrolled(self, db: Session, *, user_id: int, course_id: int) -> bool:
        return self.get_by_user_and_course(db, user_id=user_id, course_id=course_id) is not None

    def get_by_user(self, db: Session, *, user_id: int) -> List[Enrollment]:
        return (
            db.query(Enrollment)
            .options(joinedload(Enrollment.course))
            .filter(Enrollment.user_id == user_id)
            .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
            .all()
        )

    def get_by_course(self, db: Session, *, course_id: int) -> List[Enrollment]:
        return (
            db.query(Enrollment)
            .options(joinedload(Enrollment.user))
            .filter(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrolled_at.asc(), Enrollment.id.asc())
            .all()
        )

    def get_enrolled_course_ids(self, db: Session, *, user_id: int, course_ids: List[int]) -> set:
        if not course_ids:
            return set()
        rows = (
            db.query(Enrollment.course_id)
            .filter(Enrollment.user_id == user_id, Enrollment.course_id.in_(course_ids))
            .all()
        )
        return {row.course_id for row in rows}

    def get_enrolled_user_ids(self, db: Session, *, course_id: int, user_ids: List[int]) -> set:
        if not user_ids:
            return set()
        rows = (
            db.query(Enrollment.user_id)
            .filter(Enrollment.course_id == course_id, Enrollment.user_id.in_(user_ids))
            .all()
        )
        return {row.user_id for row in rows}

    def count_by_course(self, db: Session, *, course_id: int, since=None) -> int:
        query = db.query(func.count(Enrollment.id)).filter(Enrollment.course_id == course_id)
        if since is not None:
            query = query.filter(Enrollment.enrolled_at >= since)
        return query.scalar() or 0

    def create_if_absent(self, db: Session, *, user_id: int, course_id: int) -> Tuple[Enrollment, bool]:
        """Insert the pair unless it exists. Returns ``(enrollment, created)``."""
        existing = self.get_by_user_and_course(db, user_id=user_id, course_id=course_id)
        if existing:
            return existing, False
        try:
            with db.begin_nested():
                enrollment = Enrollment(user_id=user_id, course_id=course_id)
                db.add(enrollment)
                db.flush()
        except IntegrityError:
            # Lost the race to a concurrent enrollment of the same pair.
            existing = self.get_by_user_and_course(db, user_id=user_id, course_id=course_id)
            return existing, False
        db.refresh(enrollment)
        return enrollment, True

    def remove_with_progress(self, db: Session, *, enrollment: Enrollment) -> int:
        """Delete the enrollment and the user's progress on the course's lessons. Returns removed progress rows."""
        lesson_ids = db.query(Lesson.id).filter(Lesson.course_id == enrollment.course_id)
        removed = (
            db.query(Progress)
            .filter(Progress.user_id == enrollment.user_id, Progress.lesson_id.in_(lesson_ids))
            .delete(synchronize_session=False)
        )
        db.delete(enrollment)
        db.flush()
        return removed

enrollment = CRUDEnrollment(Enrollment)
