from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnhub.crud.base import CRUDBase
from learnhub.models.lesson import Lesson
from learnhub.models.progress import Progress
from learnhub.schemas.progress import ProgressUpdate


class CRUDProgress(CRUDBase[Progress, ProgressUpdate, ProgressUpdate]):

    def get_by_user_and_lesson(self, db: Session, *, user_id: int, lesson_id: int) -> Optional[Progress]:
        return (
            db.query(Progress)
            .filter(Progress.user_id == user_id, Progress.lesson_id == lesson_id)
            .first()
        )

    def upsert(
        self,
        db: Session,
        *,
        user_id: int,
        lesson_id: int,
        completed: Optional[bool] = None,
        time_spent: Optional[int] = None,
        quiz_score: Optional[float] = None,
    ) -> Progress:
        """
        Create the (user, lesson) row on first touch, otherwise apply the change
        as a single UPDATE so concurrent writers serialize in the database.
        ``time_spent`` is a delta added to the stored total.
        """
        now = datetime.now(timezone.utc)

        if self.get_by_user_and_lesson(db, user_id=user_id, lesson_id=lesson_id) is None:
            try:
                with db.begin_nested():
                    row = Progress(
                        user_id=user_id,
                        lesson_id=lesson_id,
                        completed=bool(completed),
                        completed_at=now if completed else None,
                        time_spent=time_spent or 0,
                        quiz_score=quiz_score,
                    )
                    db.add(row)
                    db.flush()
                db.refresh(row)
                return row
            except IntegrityError:
                # A concurrent request created the row first; apply ours as an update.
                pass

        values = {}
        if completed is not None:
            values[Progress.completed] = completed
            if completed:
                # SET expressions read the pre-update row.
                values[Progress.completed_at] = case(
                    (Progress.completed == True, Progress.completed_at),
                    else_=now,
                )
            else:
                values[Progress.completed_at] = None
        if time_spent:
            values[Progress.time_spent] = Progress.time_spent + time_spent
        if quiz_score is not None:
            values[Progress.quiz_score] = quiz_score

        query = db.query(Progress).filter(Progress.user_id == user_id, Progress.lesson_id == lesson_id)
        if values:
            values[Progress.updated_at] = now
            query.update(values, synchronize_session=False)
            db.flush()

        row = query.first()
        db.refresh(row)
        return row

    def count_completed_for_course(self, db: Session, *, user_id: int, course_id: int) -> int:
        return (
            db.query(func.count(Progress.id))
            .join(Lesson, Lesson.id == Progress.lesson_id)
            .filter(Progress.user_id == user_id, Lesson.course_id == course_id, Progress.completed == True)
            .scalar()
            or 0
        )

    def get_by_user_and_course(self, db: Session, *, user_id: int, course_id: int) -> List[Progress]:
        return (
            db.query(Progress)
            .join(Lesson, Lesson.id == Progress.lesson_id)
            .filter(Progress.user_id == user_id, Lesson.course_id == course_id)
            .order_by(Lesson.order.asc(), Lesson.id.asc())
            .all()
        )

    def get_completed_lesson_ids(self, db: Session, *, user_id: int, lesson_ids: List[int]) -> set:
        if not lesson_ids:
            return set()
        rows = (
            db.query(Progress.lesson_id)
            .filter(Progress.user_id == user_id, Progress.lesson_id.in_(lesson_ids), Progress.completed == True)
            .all()
        )
        return {row.lesson_id for row in rows}

    def get_course_rollups_for_user(self, db: Session, *, user_id: int, course_ids: List[int]) -> Dict[int, Tuple[int, int]]:
        """``{course_id: (completed_lessons, time_spent)}`` for one user."""
        if not course_ids:
            return {}
        rows = (
            db.query(
                Lesson.course_id,
                func.sum(case((Progress.completed == True, 1), else_=0)),
                func.coalesce(func.sum(Progress.time_spent), 0),
            )
            .join(Lesson, Lesson.id == Progress.lesson_id)
            .filter(Progress.user_id == user_id, Lesson.course_id.in_(course_ids))
            .group_by(Lesson.course_id)
            .all()
        )
        return {course_id: (int(completed or 0), int(spent or 0)) for course_id, completed, spent in rows}

    def get_user_rollups_for_course(self, db: Session, *, course_id: int) -> Dict[int, Tuple[int, int]]:
        """``{user_id: (completed_lessons, time_spent)}`` across a course."""
        rows = (
            db.query(
                Progress.user_id,
                func.sum(case((Progress.completed == True, 1), else_=0)),
                func.coalesce(func.sum(Progress.time_spent), 0),
            )
            .join(Lesson, Lesson.id == Progress.lesson_id)
            .filter(Lesson.course_id == course_id)
            .group_by(Progress.user_id)
            .all()
        )
        return {user_id: (int(completed or 0), int(spent or 0)) for user_id, completed, spent in rows}

    def get_active_user_ids(self, db: Session, *, course_id: int, since: datetime) -> set:
        rows = (
            db.query(Progress.user_id)
            .join(Lesson, Lesson.id == Progress.lesson_id)
            .filter(
                Lesson.course_id == course_id,
                Progress.completed == True,
                Progress.completed_at >= since,
            )
            .distinct()
            .all()
        )
        return {row.user_id for row in rows}

    def get_lesson_completion_counts(self, db: Session, *, course_id: int, user_ids: List[int]) -> Dict[int, int]:
        if not user_ids:
            return {}
        rows = (
            db.query(Progress.lesson_id, func.count(Progress.id))
            .join(Lesson, Lesson.id == Progress.lesson_id)
            .filter(
                Lesson.course_id == course_id,
                Progress.completed == True,
                Progress.user_id.in_(user_ids),
            )
            .group_by(Progress.lesson_id)
            .all()
        )
        return {lesson_id: count for lesson_id, count in rows}

    def get_user_totals(self, db: Session, *, user_id: int) -> Tuple[int, int]:
        """``(completed_lessons, time_spent)`` across every course."""
        completed, spent = (
            db.query(
                func.coalesce(func.sum(case((Progress.completed == True, 1), else_=0)), 0),
                func.coalesce(func.sum(Progress.time_spent), 0),
            )
            .filter(Progress.user_id == user_id)
            .one()
        )
        return int(completed), int(spent)

progress = CRUDProgress(Progress)
