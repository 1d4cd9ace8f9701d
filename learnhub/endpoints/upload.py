import logging
from fastapi import APIRouter, Depends, File, UploadFile, status

from learnhub.core.constants import STAFF
from learnhub.models.user import User as UserModel
from learnhub.schemas.response import APIResponse
from learnhub.schemas.upload import UploadedFile
from learnhub.services.upload import upload_service
from learnhub.utils import deps

logger = logging.getLogger(__name__)

router = APIRouter()


async def _store(file: UploadFile, current_user: UserModel, kind: str) -> UploadedFile:
    data = await file.read()
    stored = upload_service.save(data=data, filename=file.filename, content_type=file.content_type)
    logger.info(f"User {current_user.id} uploaded {kind} {file.filename} as {stored.filename}")
    return stored


@router.post("/avatar", response_model=APIResponse[UploadedFile], status_code=status.HTTP_201_CREATED)
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: UserModel = Depends(deps.get_current_user)
):
    stored = await _store(file, current_user, "avatar")
    return APIResponse(message="Avatar uploaded successfully", data=stored)


@router.post("/course-image", response_model=APIResponse[UploadedFile], status_code=status.HTTP_201_CREATED)
async def upload_course_image(
    file: UploadFile = File(...),
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    stored = await _store(file, current_user, "course image")
    return APIResponse(message="Course image uploaded successfully", data=stored)


@router.post("/lesson-file", response_model=APIResponse[UploadedFile], status_code=status.HTTP_201_CREATED)
async def upload_lesson_file(
    file: UploadFile = File(...),
    current_user: UserModel = Depends(deps.require_roles(STAFF))
):
    stored = await _store(file, current_user, "lesson file")
    return APIResponse(message="Lesson file uploaded successfully", data=stored)


@router.delete("/{filename}", response_model=APIResponse[None])
def delete_upload(
    filename: str,
    current_user: UserModel = Depends(deps.get_current_user)
):
    upload_service.delete(filename)
    return APIResponse(message="File deleted successfully")
