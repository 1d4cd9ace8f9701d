from typing import Optional, FrozenSet

from learnhub.core.constants import RoleEnum, STAFF
from learnhub.core.exceptions import Forbidden
from learnhub.models.user import User
from learnhub.models.course import Course


class PermissionHelper:
    """
    Role gates and ownership predicates in one place.

    A capability is ``role gate AND (optional) ownership``: the caller's role must
    be in the allow-set, and when an owner is given the caller must be that owner
    unless they are an admin.
    """

    @staticmethod
    def is_admin(user: User) -> bool:
        return user.role == RoleEnum.ADMIN

    @staticmethod
    def is_teacher(user: User) -> bool:
        return user.role == RoleEnum.TEACHER

    @staticmethod
    def is_student(user: User) -> bool:
        return user.role == RoleEnum.STUDENT

    @staticmethod
    def has_role(user: User, roles: FrozenSet[RoleEnum]) -> bool:
        return user.role in roles

    @staticmethod
    def is_owner(user: User, owner_id: Optional[int]) -> bool:
        return owner_id is not None and user.id == owner_id

    @staticmethod
    def is_teacher_of_course(user: User, course: Course) -> bool:
        return PermissionHelper.is_owner(user, course.teacher_id)

    @staticmethod
    def can(user: User, roles: FrozenSet[RoleEnum], owner_id: Optional[int] = None) -> bool:
        if not PermissionHelper.has_role(user, roles):
            return False
        if owner_id is None or PermissionHelper.is_admin(user):
            return True
        return PermissionHelper.is_owner(user, owner_id)

    @staticmethod
    def require(user: User, roles: FrozenSet[RoleEnum], owner_id: Optional[int] = None,
                error_message: str = "You do not have permission to perform this action."):
        if not PermissionHelper.can(user, roles, owner_id):
            raise Forbidden(error_message)

    @staticmethod
    def require_role(user: User, roles: FrozenSet[RoleEnum]):
        if not PermissionHelper.has_role(user, roles):
            raise Forbidden("Your role does not allow this action.")

    @staticmethod
    def can_manage_course(user: User, course: Course) -> bool:
        return PermissionHelper.can(user, STAFF, course.teacher_id)

    @staticmethod
    def require_course_management_permission(user: User, course: Course):
        if not PermissionHelper.can_manage_course(user, course):
            raise Forbidden("You do not have permission to manage this course.")

    @staticmethod
    def can_view_course(user: User, course: Course, is_enrolled: bool) -> bool:
        if PermissionHelper.can_manage_course(user, course):
            return True
        return bool(course.is_published) or is_enrolled

    @staticmethod
    def require_course_view_permission(user: User, course: Course, is_enrolled: bool):
        if not PermissionHelper.can_view_course(user, course, is_enrolled):
            raise Forbidden("You do not have permission to view this course.")

    @staticmethod
    def can_access_lessons(user: User, course: Course, is_enrolled: bool) -> bool:
        return PermissionHelper.can_manage_course(user, course) or is_enrolled

    @staticmethod
    def require_lesson_access_permission(user: User, course: Course, is_enrolled: bool):
        if not PermissionHelper.can_access_lessons(user, course, is_enrolled):
            raise Forbidden("You must be enrolled in this course to access its lessons.")
