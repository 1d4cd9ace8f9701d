from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnhub.core.constants import ANY_ROLE, STAFF, RoleEnum
from learnhub.models.user import User as UserModel
from learnhub.schemas.analytics import CourseAnalytics
from learnhub.schemas.course import Course, CourseCreate, CourseUpdate, CourseDetail, CourseListItem
from learnhub.schemas.enrollment import Enrollment, StudentAdd, BatchEnrollRequest, BatchEnrollResult, RosterEntry
from learnhub.schemas.response import APIResponse, Pagination
from learnhub.schemas.user import UserSummary
from learnhub.services.analytics import analytics_service
from learnhub.services.course import course_service
from learnhub.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[CourseListItem]])
def get_all_courses(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user),
    paging: deps.PageParams = Depends(deps.get_pagination),
    category: Optional[str] = None,
    search: Optional[str] = None,
    enrolled: Optional[bool] = None
):
    courses, total = course_service.list_courses(
        db,
        current_user=current_user,
        category=category,
        search=search,
        enrolled=enrolled,
        page=paging.page,
        limit=paging.limit,
    )
    return APIResponse(
        message="Courses retrieved successfully",
        data=courses,
        pagination=Pagination.build(paging.page, paging.limit, total),
    )


@router.get("/teacher/{teacher_id}", response_model=APIResponse[List[CourseListItem]])
def get_teacher_courses(
    teacher_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.require_roles(STAFF)),
    paging: deps.PageParams = Depends(deps.get_pagination)
):
    courses, total = course_service.get_teacher_courses(
        db, teacher_id=teacher_id, current_user=current_user, page=paging.page, limit=paging.limit
    )
    return APIResponse(
        message="Teacher courses retrieved successfully",
        data=courses,
        pagination=Pagination.build(paging.page, paging.limit, total),
    )


@router.get("/{course_id}", response_model=APIResponse[CourseDetail])
def read_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_user: UserModel = Depends(deps.get_current_user)
):
    course = course_service.get_course(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Course retrieved successfully", data=course)


@router.post("", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
def create_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_in: CourseCreate,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    new_course = course_service.create_course(db, course_in=course_in, current_user=current_user)
    return APIResponse(message="Course created successfully", data=new_course)


@router.put("/{course_id}", response_model=APIResponse[Course])
def update_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    course_in: CourseUpdate,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    updated_course = course_service.update_course(db, course_id=course_id, course_in=course_in, current_user=current_user)
    return APIResponse(message="Course updated successfully", data=updated_course)


@router.delete("/{course_id}", response_model=APIResponse[None])
def delete_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    course_service.delete_course(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Course deleted successfully")


@router.post("/{course_id}/enroll", response_model=APIResponse[Enrollment], status_code=status.HTTP_201_CREATED)
def enroll_in_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    current_user: UserModel = Depends(deps.require_roles(ANY_ROLE))
):
    enrollment = course_service.enroll_self(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Enrolled successfully", data=enrollment)


@router.get("/{course_id}/students", response_model=APIResponse[List[RosterEntry]])
def get_course_students(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    roster = course_service.get_roster(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Course students retrieved successfully", data=roster)


@router.post("/{course_id}/students", response_model=APIResponse[Enrollment], status_code=status.HTTP_201_CREATED)
def add_course_student(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    student_in: StudentAdd,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    enrollment = course_service.add_student(
        db, course_id=course_id, user_id=student_in.user_id, current_user=current_user
    )
    return APIResponse(message="Student added to course successfully", data=enrollment)


@router.delete("/{course_id}/students/{user_id}", response_model=APIResponse[None])
def remove_course_student(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    user_id: int,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    course_service.remove_student(db, course_id=course_id, user_id=user_id, current_user=current_user)
    return APIResponse(message="Student removed from course successfully")


@router.post("/{course_id}/enrollments/batch", response_model=APIResponse[BatchEnrollResult])
def batch_enroll_students(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    batch_in: BatchEnrollRequest,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    result = course_service.batch_enroll(
        db, course_id=course_id, user_ids=batch_in.user_ids, current_user=current_user
    )
    return APIResponse(
        message=f"{result.enrolled_count} user(s) enrolled, {result.already_enrolled_count} already enrolled",
        data=result,
    )


@router.get("/{course_id}/enrollable-users", response_model=APIResponse[List[UserSummary]])
def get_enrollable_users(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_user: UserModel = Depends(deps.require_roles(STAFF)),
    paging: deps.PageParams = Depends(deps.get_pagination),
    role: Optional[RoleEnum] = None,
    search: Optional[str] = None
):
    users, total = course_service.get_enrollable_users(
        db,
        course_id=course_id,
        current_user=current_user,
        role=role,
        search=search,
        page=paging.page,
        limit=paging.limit,
    )
    return APIResponse(
        message="Enrollable users retrieved successfully",
        data=users,
        pagination=Pagination.build(paging.page, paging.limit, total),
    )


@router.get("/{course_id}/analytics", response_model=APIResponse[CourseAnalytics])
def get_course_analytics(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    analytics = analytics_service.get_course_analytics(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Course analytics retrieved successfully", data=analytics)
