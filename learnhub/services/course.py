import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from learnhub.core.constants import RoleEnum, STAFF
from learnhub.core.exceptions import Conflict, Forbidden, NotFound, ValidationFailed
from learnhub.crud.course import course as crud_course
from learnhub.crud.enrollment import enrollment as crud_enrollment
from learnhub.crud.progress import progress as crud_progress
from learnhub.crud.user import user as crud_user
from learnhub.models.course import Course as CourseModel
from learnhub.models.user import User
from learnhub.schemas.course import (
    CourseCreate,
    CourseUpdate,
    Course as CourseSchema,
    CourseListItem,
    CourseDetail,
)
from learnhub.schemas.enrollment import Enrollment as EnrollmentSchema, BatchEnrollResult, RosterEntry
from learnhub.schemas.user import UserSummary
from learnhub.services.course_progress import calculate_percentage
from learnhub.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class CourseService:

    def get_course_or_404(self, db: Session, course_id: int) -> CourseModel:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFound("Course not found.")
        return course

    def get_managed_course(self, db: Session, course_id: int, current_user: User) -> CourseModel:
        """Fetch a course and require the caller to be its owner or an admin."""
        course = self.get_course_or_404(db, course_id)
        permission_helper.require_course_management_permission(current_user, course)
        return course

    def _to_list_items(self, db: Session, courses: List[CourseModel], current_user: User) -> List[CourseListItem]:
        course_ids = [c.id for c in courses]
        enrolled_ids = crud_enrollment.get_enrolled_course_ids(db, user_id=current_user.id, course_ids=course_ids)
        rollups = crud_progress.get_course_rollups_for_user(db, user_id=current_user.id, course_ids=course_ids)

        items = []
        for course in courses:
            item = CourseListItem.model_validate(course)
            item.is_enrolled = course.id in enrolled_ids
            completed, _ = rollups.get(course.id, (0, 0))
            item.progress = calculate_percentage(completed, course.lesson_count)
            items.append(item)
        return items

    def list_courses(
        self,
        db: Session,
        *,
        current_user: User,
        category: Optional[str] = None,
        search: Optional[str] = None,
        enrolled: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[CourseListItem], int]:
        filters = {"category": category, "search": search}
        if enrolled:
            filters["enrolled_user_id"] = current_user.id
        elif permission_helper.is_student(current_user):
            filters["published_only"] = True
        if permission_helper.is_teacher(current_user) and not enrolled:
            filters["teacher_id"] = current_user.id

        courses, total = crud_course.get_filtered_paginated(db, page=page, limit=limit, **filters)
        return self._to_list_items(db, courses, current_user), total

    def get_teacher_courses(
        self, db: Session, *, teacher_id: int, current_user: User, page: int = 1, limit: int = 20
    ) -> Tuple[List[CourseListItem], int]:
        if not permission_helper.is_admin(current_user) and current_user.id != teacher_id:
            raise Forbidden("You can only list your own courses.")
        teacher = crud_user.get(db, id=teacher_id)
        if not teacher:
            raise NotFound("Teacher not found.")
        courses, total = crud_course.get_filtered_paginated(db, teacher_id=teacher_id, page=page, limit=limit)
        return self._to_list_items(db, courses, current_user), total

    def get_course(self, db: Session, *, course_id: int, current_user: User) -> CourseDetail:
        course = self.get_course_or_404(db, course_id)
        is_enrolled = crud_enrollment.is_enrolled(db, user_id=current_user.id, course_id=course_id)
        permission_helper.require_course_view_permission(current_user, course, is_enrolled)

        completed_ids = crud_progress.get_completed_lesson_ids(
            db, user_id=current_user.id, lesson_ids=[l.id for l in course.lessons]
        )
        detail = CourseDetail.model_validate(course)
        for lesson_item in detail.lessons:
            lesson_item.completed = lesson_item.id in completed_ids
        detail.is_enrolled = is_enrolled
        detail.progress = calculate_percentage(len(completed_ids), len(course.lessons))
        return detail

    def create_course(self, db: Session, *, course_in: CourseCreate, current_user: User) -> CourseSchema:
        teacher_id = current_user.id
        if course_in.teacher_id is not None and course_in.teacher_id != current_user.id:
            if not permission_helper.is_admin(current_user):
                raise Forbidden("Only admins can create courses on behalf of another teacher.")
            teacher = crud_user.get(db, id=course_in.teacher_id)
            if not teacher:
                raise NotFound("Teacher not found.")
            if teacher.role not in STAFF:
                raise ValidationFailed("Courses can only be owned by a teacher or admin.")
            teacher_id = teacher.id

        course_data = course_in.model_dump(exclude={"teacher_id"})
        course_data["teacher_id"] = teacher_id
        new_course = crud_course.create(db, obj_in=course_data)
        logger.info(f"Course {new_course.id} '{new_course.title}' created by user {current_user.id}")
        return CourseSchema.model_validate(new_course)

    def update_course(self, db: Session, *, course_id: int, course_in: CourseUpdate, current_user: User) -> CourseSchema:
        course = self.get_managed_course(db, course_id, current_user)
        updated_course = crud_course.update(db, db_obj=course, obj_in=course_in)
        return CourseSchema.model_validate(updated_course)

    def delete_course(self, db: Session, *, course_id: int, current_user: User) -> None:
        self.get_managed_course(db, course_id, current_user)
        crud_course.delete(db, id=course_id)
        logger.info(f"Course {course_id} deleted by user {current_user.id}")

    def enroll_self(self, db: Session, *, course_id: int, current_user: User) -> EnrollmentSchema:
        course = self.get_course_or_404(db, course_id)
        if permission_helper.is_student(current_user) and not course.is_published:
            raise Forbidden("This course is not published yet.")

        enrollment, created = crud_enrollment.create_if_absent(db, user_id=current_user.id, course_id=course_id)
        if not created:
            raise Conflict("You are already enrolled in this course.")
        logger.info(f"User {current_user.id} enrolled in course {course_id}")
        return EnrollmentSchema.model_validate(enrollment)

    def get_roster(self, db: Session, *, course_id: int, current_user: User) -> List[RosterEntry]:
        course = self.get_managed_course(db, course_id, current_user)
        total_lessons = course.lesson_count
        rollups = crud_progress.get_user_rollups_for_course(db, course_id=course_id)

        roster = []
        for enrollment in crud_enrollment.get_by_course(db, course_id=course_id):
            completed, time_spent = rollups.get(enrollment.user_id, (0, 0))
            roster.append(RosterEntry(
                enrollment_id=enrollment.id,
                enrolled_at=enrollment.enrolled_at,
                user=UserSummary.model_validate(enrollment.user),
                completed_lessons=completed,
                total_lessons=total_lessons,
                progress=calculate_percentage(completed, total_lessons),
                time_spent=time_spent,
            ))
        return roster

    def _check_enrollable(self, current_user: User, target: User):
        if permission_helper.is_teacher(current_user) and target.role != RoleEnum.STUDENT:
            raise Forbidden("Teachers can only enroll students.")

    def add_student(self, db: Session, *, course_id: int, user_id: int, current_user: User) -> EnrollmentSchema:
        self.get_managed_course(db, course_id, current_user)
        target = crud_user.get(db, id=user_id)
        if not target:
            raise NotFound("User not found.")
        self._check_enrollable(current_user, target)

        enrollment, created = crud_enrollment.create_if_absent(db, user_id=user_id, course_id=course_id)
        if not created:
            raise Conflict("User is already enrolled in this course.")
        logger.info(f"User {user_id} enrolled in course {course_id} by user {current_user.id}")
        return EnrollmentSchema.model_validate(enrollment)

    def remove_student(self, db: Session, *, course_id: int, user_id: int, current_user: User) -> None:
        self.get_managed_course(db, course_id, current_user)
        enrollment = crud_enrollment.get_by_user_and_course(db, user_id=user_id, course_id=course_id)
        if not enrollment:
            raise NotFound("User is not enrolled in this course.")
        removed = crud_enrollment.remove_with_progress(db, enrollment=enrollment)
        logger.info(
            f"User {user_id} removed from course {course_id} by user {current_user.id}, "
            f"{removed} progress records deleted"
        )

    def batch_enroll(self, db: Session, *, course_id: int, user_ids: List[int], current_user: User) -> BatchEnrollResult:
        self.get_managed_course(db, course_id, current_user)

        unique_ids = list(dict.fromkeys(user_ids))
        users = {u.id: u for u in crud_user.get_many_by_ids(db, ids=unique_ids)}
        missing = [uid for uid in unique_ids if uid not in users]
        if missing:
            raise NotFound("Some users were not found.", details={"missingUserIds": missing})
        for uid in unique_ids:
            self._check_enrollable(current_user, users[uid])

        enrolled, already = [], []
        for uid in unique_ids:
            _, created = crud_enrollment.create_if_absent(db, user_id=uid, course_id=course_id)
            (enrolled if created else already).append(uid)

        logger.info(
            f"Batch enrollment in course {course_id} by user {current_user.id}: "
            f"{len(enrolled)} enrolled, {len(already)} already enrolled"
        )
        return BatchEnrollResult(
            enrolled_count=len(enrolled),
            already_enrolled_count=len(already),
            enrolled_user_ids=enrolled,
            already_enrolled_user_ids=already,
        )

    def get_enrollable_users(
        self,
        db: Session,
        *,
        course_id: int,
        current_user: User,
        role: Optional[RoleEnum] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[UserSummary], int]:
        self.get_managed_course(db, course_id, current_user)

        if permission_helper.is_teacher(current_user):
            roles = [RoleEnum.STUDENT]
        else:
            roles = [RoleEnum.STUDENT, RoleEnum.TEACHER]
        if role is not None:
            roles = [r for r in roles if r == role]
        if not roles:
            return [], 0

        users, total = crud_user.get_enrollable_for_course(
            db, course_id=course_id, roles=roles, search=search, page=page, limit=limit
        )
        return [UserSummary.model_validate(u) for u in users], total

course_service = CourseService()
