from typing import Any, Optional, List, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from learnhub.core.constants import RoleEnum
from learnhub.core.security import get_password_hash
from learnhub.crud.base import CRUDBase, paginate
from learnhub.models.user import User
from learnhub.models.course import Course
from learnhub.models.enrollment import Enrollment
from learnhub.models.progress import Progress
from learnhub.models.lesson import Lesson
from learnhub.schemas.user import UserCreate, UserAdminUpdate


def _search_filter(search: str):
    return or_(User.name.icontains(search, autoescape=True), User.email.icontains(search, autoescape=True))


class CRUDUser(CRUDBase[User, UserCreate, UserAdminUpdate]):

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()

    def get_many_by_ids(self, db: Session, *, ids: List[int]) -> List[User]:
        if not ids:
            return []
        return db.query(User).filter(User.id.in_(ids)).all()

    def get_with_activity(self, db: Session, *, id: int) -> Optional[User]:
        return (
            db.query(User)
            .options(
                selectinload(User.enrollments).selectinload(Enrollment.course),
                selectinload(User.progress).selectinload(Progress.lesson),
            )
            .filter(User.id == id)
            .first()
        )

    def create_with_password(self, db: Session, *, obj_in: UserCreate) -> User:
        db_obj = User(
            name=obj_in.name,
            email=obj_in.email.lower(),
            hashed_password=get_password_hash(obj_in.password),
            role=obj_in.role,
            avatar=obj_in.avatar,
        )
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

    def update_password(self, db: Session, *, db_obj: User, password: str) -> User:
        return self.update(db, db_obj=db_obj, obj_in={"hashed_password": get_password_hash(password)})

    def get_filtered_paginated(
        self, db: Session, *, role: Optional[RoleEnum] = None, search: Optional[str] = None, page: int = 1, limit: int = 20
    ) -> Tuple[List[Tuple[User, int, int]], int]:
        """Users newest first, each with its enrollment and owned-course counts."""
        enrollment_counts = (
            db.query(Enrollment.user_id, func.count(Enrollment.id).label("enrollment_count"))
            .group_by(Enrollment.user_id)
            .subquery()
        )
        course_counts = (
            db.query(Course.teacher_id, func.count(Course.id).label("course_count"))
            .group_by(Course.teacher_id)
            .subquery()
        )
        query = (
            db.query(
                User,
                func.coalesce(enrollment_counts.c.enrollment_count, 0),
                func.coalesce(course_counts.c.course_count, 0),
            )
            .outerjoin(enrollment_counts, enrollment_counts.c.user_id == User.id)
            .outerjoin(course_counts, course_counts.c.teacher_id == User.id)
        )
        if role:
            query = query.filter(User.role == role)
        if search:
            query = query.filter(_search_filter(search))
        query = query.order_by(User.created_at.desc(), User.id.desc())
        return paginate(query, page=page, limit=limit)

    def get_directory(self, db: Session, *, exclude_user_id: int) -> List[User]:
        return (
            db.query(User)
            .filter(User.id != exclude_user_id)
            .order_by(User.name.asc())
            .all()
        )

    def get_enrollable_for_course(
        self,
        db: Session,
        *,
        course_id: int,
        roles: List[RoleEnum],
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[User], int]:
        enrolled_ids = db.query(Enrollment.user_id).filter(Enrollment.course_id == course_id)
        query = db.query(User).filter(User.role.in_(roles), ~User.id.in_(enrolled_ids))
        if search:
            query = query.filter(_search_filter(search))
        query = query.order_by(User.name.asc())
        return paginate(query, page=page, limit=limit)

user = CRUDUser(User)
