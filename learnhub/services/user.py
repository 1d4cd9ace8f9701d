import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from learnhub.core.constants import RoleEnum
from learnhub.core.exceptions import Conflict, NotFound, ValidationFailed
from learnhub.crud.user import user as crud_user
from learnhub.models.user import User
from learnhub.schemas.user import (
    UserCreate,
    UserAdminUpdate,
    UserProfileUpdate,
    User as UserSchema,
    UserSummary,
    UserListItem,
    UserDetail,
)

logger = logging.getLogger(__name__)


class UserService:

    def list_users(
        self, db: Session, *, role: Optional[RoleEnum], search: Optional[str], page: int, limit: int
    ) -> Tuple[List[UserListItem], int]:
        rows, total = crud_user.get_filtered_paginated(db, role=role, search=search, page=page, limit=limit)
        items = []
        for user, enrollment_count, course_count in rows:
            item = UserListItem.model_validate(user)
            item.enrollment_count = enrollment_count
            item.course_count = course_count
            items.append(item)
        return items, total

    def list_directory(self, db: Session, *, current_user: User) -> List[UserSummary]:
        users = crud_user.get_directory(db, exclude_user_id=current_user.id)
        return [UserSummary.model_validate(u) for u in users]

    def get_user(self, db: Session, *, user_id: int) -> UserDetail:
        user = crud_user.get_with_activity(db, id=user_id)
        if not user:
            raise NotFound("User not found.")
        return UserDetail.model_validate(user)

    def create_user(self, db: Session, *, user_in: UserCreate) -> UserSchema:
        if crud_user.get_by_email(db, email=user_in.email):
            raise Conflict("A user with this email already exists.")
        user = crud_user.create_with_password(db, obj_in=user_in)
        logger.info(f"Created {user.role.value} user {user.id} ({user.email})")
        return UserSchema.model_validate(user)

    def update_user(self, db: Session, *, user_id: int, user_in: UserAdminUpdate) -> UserSchema:
        user = crud_user.get(db, id=user_id)
        if not user:
            raise NotFound("User not found.")

        update_data = user_in.model_dump(exclude_unset=True, exclude={"password"})
        if update_data:
            user = crud_user.update(db, db_obj=user, obj_in=update_data)
        if user_in.password:
            user = crud_user.update_password(db, db_obj=user, password=user_in.password)
        return UserSchema.model_validate(user)

    def update_profile(self, db: Session, *, current_user: User, profile_in: UserProfileUpdate) -> UserSchema:
        user = crud_user.update(db, db_obj=current_user, obj_in=profile_in)
        return UserSchema.model_validate(user)

    def delete_user(self, db: Session, *, user_id: int, current_user: User) -> None:
        if user_id == current_user.id:
            raise ValidationFailed("You cannot delete your own account.")
        user = crud_user.get(db, id=user_id)
        if not user:
            raise NotFound("User not found.")
        crud_user.delete(db, id=user_id)
        logger.info(f"User {user_id} deleted by admin {current_user.id}")

user_service = UserService()
