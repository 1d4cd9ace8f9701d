from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnhub.core.constants import STAFF
from learnhub.models.user import User as UserModel
from learnhub.schemas.course import CourseLessonItem
from learnhub.schemas.lesson import Lesson, LessonCreate, LessonUpdate, LessonDetail, LessonReorder
from learnhub.schemas.response import APIResponse
from learnhub.services.lesson import lesson_service
from learnhub.utils import deps

router = APIRouter()


@router.get("/course/{course_id}", response_model=APIResponse[List[CourseLessonItem]])
def get_course_lessons(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    lessons = lesson_service.get_lessons_by_course(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Lessons retrieved successfully", data=lessons)


@router.put("/{course_id}/reorder", response_model=APIResponse[List[Lesson]])
def reorder_lessons(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    reorder_in: LessonReorder,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    lessons = lesson_service.reorder_lessons(db, course_id=course_id, reorder_in=reorder_in, current_user=current_user)
    return APIResponse(message="Lessons reordered successfully", data=lessons)


@router.get("/{lesson_id}", response_model=APIResponse[LessonDetail])
def read_lesson(
    lesson_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    lesson = lesson_service.get_lesson(db, lesson_id=lesson_id, current_user=current_user)
    return APIResponse(message="Lesson retrieved successfully", data=lesson)


@router.post("", response_model=APIResponse[Lesson], status_code=status.HTTP_201_CREATED)
def create_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_in: LessonCreate,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    lesson = lesson_service.create_lesson(db, lesson_in=lesson_in, current_user=current_user)
    return APIResponse(message="Lesson created successfully", data=lesson)


@router.put("/{lesson_id}", response_model=APIResponse[Lesson])
def update_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    lesson_in: LessonUpdate,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    lesson = lesson_service.update_lesson(db, lesson_id=lesson_id, lesson_in=lesson_in, current_user=current_user)
    return APIResponse(message="Lesson updated successfully", data=lesson)


@router.delete("/{lesson_id}", response_model=APIResponse[None])
def delete_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    lesson_service.delete_lesson(db, lesson_id=lesson_id, current_user=current_user)
    return APIResponse(message="Lesson deleted successfully")
