from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from learnhub.crud.base import CRUDBase
from learnhub.models.lesson import Lesson
from learnhub.schemas.lesson import LessonCreate, LessonUpdate


class CRUDLesson(CRUDBase[Lesson, LessonCreate, LessonUpdate]):

    def get_with_course(self, db: Session, *, id: int) -> Optional[Lesson]:
        return db.query(Lesson).options(joinedload(Lesson.course)).filter(Lesson.id == id).first()

    def get_by_course(self, db: Session, *, course_id: int) -> List[Lesson]:
        return (
            db.query(Lesson)
            .filter(Lesson.course_id == course_id)
            .order_by(Lesson.order.asc(), Lesson.id.asc())
            .all()
        )

    def get_next_order(self, db: Session, *, course_id: int) -> int:
        max_order = db.query(func.max(Lesson.order)).filter(Lesson.course_id == course_id).scalar()
        return 1 if max_order is None else max_order + 1

    def count_by_course(self, db: Session, *, course_id: int) -> int:
        return db.query(func.count(Lesson.id)).filter(Lesson.course_id == course_id).scalar() or 0

    def reorder(self, db: Session, *, course_id: int, orders: dict) -> List[Lesson]:
        """Apply ``{lesson_id: order}``. Caller validates membership; this only flushes."""
        lessons = db.query(Lesson).filter(Lesson.course_id == course_id, Lesson.id.in_(list(orders))).all()
        for lesson in lessons:
            lesson.order = orders[lesson.id]
        db.flush()
        return self.get_by_course(db, course_id=course_id)

lesson = CRUDLesson(Lesson)
