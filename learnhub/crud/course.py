from typing import Optional, List, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from learnhub.crud.base import CRUDBase, paginate
from learnhub.models.course import Course
from learnhub.models.enrollment import Enrollment
from learnhub.models.lesson import Lesson
from learnhub.schemas.course import CourseCreate, CourseUpdate


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Course).options(
            selectinload(Course.teacher),
            selectinload(Course.lessons),
            selectinload(Course.enrollments),
        )

    def get(self, db: Session, id: int) -> Optional[Course]:
        return self._query_with_relationships(db).filter(Course.id == id).first()

    def get_filtered_paginated(
        self,
        db: Session,
        *,
        published_only: bool = False,
        teacher_id: Optional[int] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        enrolled_user_id: Optional[int] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Course], int]:
        query = self._query_with_relationships(db)
        if published_only:
            query = query.filter(Course.is_published == True)
        if teacher_id is not None:
            query = query.filter(Course.teacher_id == teacher_id)
        if category:
            query = query.filter(Course.category == category)
        if search:
            query = query.filter(
                or_(
                    Course.title.icontains(search, autoescape=True),
                    Course.description.icontains(search, autoescape=True),
                )
            )
        if enrolled_user_id is not None:
            query = query.filter(
                Course.id.in_(db.query(Enrollment.course_id).filter(Enrollment.user_id == enrolled_user_id))
            )
        query = query.order_by(Course.created_at.desc(), Course.id.desc())
        return paginate(query, page=page, limit=limit)

    def get_published_not_enrolled(self, db: Session, *, user_id: int, limit: int = 3) -> List[Course]:
        enrolled = db.query(Enrollment.course_id).filter(Enrollment.user_id == user_id)
        return (
            db.query(Course)
            .filter(Course.is_published == True, ~Course.id.in_(enrolled))
            .order_by(Course.created_at.desc(), Course.id.desc())
            .limit(limit)
            .all()
        )

    def count_lessons(self, db: Session, *, course_id: int) -> int:
        return db.query(func.count(Lesson.id)).filter(Lesson.course_id == course_id).scalar() or 0

course = CRUDCourse(Course)
