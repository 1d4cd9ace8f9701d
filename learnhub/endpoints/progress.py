from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from learnhub.models.user import User as UserModel
from learnhub.schemas.progress import (
    ProgressUpdate,
    ProgressUpdateResult,
    ProgressOverview,
    CourseProgressDetail,
    Portfolio,
)
from learnhub.schemas.response import APIResponse
from learnhub.services.course_progress import course_progress_service
from learnhub.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[ProgressOverview])
def get_my_progress(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    overview = course_progress_service.get_overview(db, current_user=current_user)
    return APIResponse(message="Progress retrieved successfully", data=overview)


@router.get("/portfolio", response_model=APIResponse[Portfolio])
def get_portfolio(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    portfolio = course_progress_service.get_portfolio(db, current_user=current_user)
    return APIResponse(message="Portfolio retrieved successfully", data=portfolio)


@router.get("/course/{course_id}", response_model=APIResponse[CourseProgressDetail])
def get_course_progress(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    detail = course_progress_service.get_course_progress(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Course progress retrieved successfully", data=detail)


@router.put("/{lesson_id}", response_model=APIResponse[ProgressUpdateResult])
def update_lesson_progress(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    progress_in: ProgressUpdate,
    current_user: UserModel = Depends(deps.get_current_user)
):
    result = course_progress_service.update_lesson_progress(
        db, lesson_id=lesson_id, progress_in=progress_in, current_user=current_user
    )
    message = "Course completed, certificate issued" if result.certificate else "Progress updated successfully"
    return APIResponse(message=message, data=result)
