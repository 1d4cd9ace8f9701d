import logging
from typing import List

from sqlalchemy.orm import Session

from learnhub.core.exceptions import NotFound, ValidationFailed
from learnhub.crud.enrollment import enrollment as crud_enrollment
from learnhub.crud.lesson import lesson as crud_lesson
from learnhub.crud.progress import progress as crud_progress
from learnhub.models.course import Course as CourseModel
from learnhub.models.user import User
from learnhub.schemas.course import CourseLessonItem
from learnhub.schemas.lesson import (
    LessonCreate,
    LessonUpdate,
    LessonReorder,
    Lesson as LessonSchema,
    LessonDetail,
    LessonNavigation,
    LessonSummary,
)
from learnhub.services.course import course_service
from learnhub.utils.permission import PermissionHelper

logger = logging.getLogger(__name__)


class LessonService:

    def _require_lesson_access(self, db: Session, course: CourseModel, current_user: User):
        is_enrolled = crud_enrollment.is_enrolled(db, user_id=current_user.id, course_id=course.id)
        PermissionHelper.require_lesson_access_permission(current_user, course, is_enrolled)

    def get_lesson(self, db: Session, *, lesson_id: int, current_user: User) -> LessonDetail:
        lesson = crud_lesson.get_with_course(db, id=lesson_id)
        if not lesson:
            raise NotFound("Lesson not found.")
        self._require_lesson_access(db, lesson.course, current_user)

        siblings = crud_lesson.get_by_course(db, course_id=lesson.course_id)
        index = next(i for i, l in enumerate(siblings) if l.id == lesson.id)
        navigation = LessonNavigation(
            prev=LessonSummary.model_validate(siblings[index - 1]) if index > 0 else None,
            next=LessonSummary.model_validate(siblings[index + 1]) if index + 1 < len(siblings) else None,
            current=index + 1,
            total=len(siblings),
        )

        progress = crud_progress.get_by_user_and_lesson(db, user_id=current_user.id, lesson_id=lesson.id)
        return LessonDetail(
            **LessonSchema.model_validate(lesson).model_dump(),
            course_title=lesson.course.title,
            completed=bool(progress and progress.completed),
            time_spent=progress.time_spent if progress else 0,
            quiz_score=progress.quiz_score if progress else None,
            navigation=navigation,
        )

    def get_lessons_by_course(self, db: Session, *, course_id: int, current_user: User) -> List[CourseLessonItem]:
        course = course_service.get_course_or_404(db, course_id)
        self._require_lesson_access(db, course, current_user)

        lessons = crud_lesson.get_by_course(db, course_id=course_id)
        completed_ids = crud_progress.get_completed_lesson_ids(
            db, user_id=current_user.id, lesson_ids=[l.id for l in lessons]
        )
        items = []
        for lesson in lessons:
            item = CourseLessonItem.model_validate(lesson)
            item.completed = lesson.id in completed_ids
            items.append(item)
        return items

    def create_lesson(self, db: Session, *, lesson_in: LessonCreate, current_user: User) -> LessonSchema:
        course_service.get_managed_course(db, lesson_in.course_id, current_user)

        lesson_data = lesson_in.model_dump()
        if lesson_data["order"] is None:
            lesson_data["order"] = crud_lesson.get_next_order(db, course_id=lesson_in.course_id)

        new_lesson = crud_lesson.create(db, obj_in=lesson_data)
        logger.info(f"Lesson {new_lesson.id} added to course {lesson_in.course_id} by user {current_user.id}")
        return LessonSchema.model_validate(new_lesson)

    def update_lesson(self, db: Session, *, lesson_id: int, lesson_in: LessonUpdate, current_user: User) -> LessonSchema:
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise NotFound("Lesson not found.")
        course_service.get_managed_course(db, lesson.course_id, current_user)

        updated_lesson = crud_lesson.update(db, db_obj=lesson, obj_in=lesson_in)
        return LessonSchema.model_validate(updated_lesson)

    def delete_lesson(self, db: Session, *, lesson_id: int, current_user: User) -> None:
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise NotFound("Lesson not found.")
        course_service.get_managed_course(db, lesson.course_id, current_user)

        crud_lesson.delete(db, id=lesson_id)
        logger.info(f"Lesson {lesson_id} deleted by user {current_user.id}")

    def reorder_lessons(self, db: Session, *, course_id: int, reorder_in: LessonReorder, current_user: User) -> List[LessonSchema]:
        course_service.get_managed_course(db, course_id, current_user)

        orders = {item.id: item.order for item in reorder_in.lesson_orders}
        course_lesson_ids = {l.id for l in crud_lesson.get_by_course(db, course_id=course_id)}
        foreign_ids = sorted(set(orders) - course_lesson_ids)
        if foreign_ids:
            raise ValidationFailed(
                "Some lessons do not belong to this course.", details={"lessonIds": foreign_ids}
            )

        lessons = crud_lesson.reorder(db, course_id=course_id, orders=orders)
        return [LessonSchema.model_validate(l) for l in lessons]

lesson_service = LessonService()
