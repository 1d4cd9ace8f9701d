from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnhub.core.constants import ADMIN_ONLY, RoleEnum
from learnhub.models.user import User as UserModel
from learnhub.schemas.response import APIResponse, Pagination
from learnhub.schemas.user import (
    User,
    UserCreate,
    UserAdminUpdate,
    UserProfileUpdate,
    UserDetail,
    UserListItem,
    UserSummary,
)
from learnhub.services.user import user_service
from learnhub.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[UserListItem]])
def list_users(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.require_roles(ADMIN_ONLY)),
    paging: deps.PageParams = Depends(deps.get_pagination),
    role: Optional[RoleEnum] = None,
    search: Optional[str] = None
):
    users, total = user_service.list_users(db, role=role, search=search, page=paging.page, limit=paging.limit)
    return APIResponse(
        message="Users retrieved successfully",
        data=users,
        pagination=Pagination.build(paging.page, paging.limit, total),
    )


@router.get("/list", response_model=APIResponse[List[UserSummary]])
def list_user_directory(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    users = user_service.list_directory(db, current_user=current_user)
    return APIResponse(message="Users retrieved successfully", data=users)


@router.put("/me", response_model=APIResponse[User])
def update_my_profile(
    *,
    db: Session = Depends(deps.get_transactional_db),
    profile_in: UserProfileUpdate,
    current_user: UserModel = Depends(deps.get_current_user)
):
    user = user_service.update_profile(db, current_user=current_user, profile_in=profile_in)
    return APIResponse(message="Profile updated successfully", data=user)


@router.get("/{user_id}", response_model=APIResponse[UserDetail])
def read_user(
    user_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.require_roles(ADMIN_ONLY))
):
    user = user_service.get_user(db, user_id=user_id)
    return APIResponse(message="User retrieved successfully", data=user)


@router.post("", response_model=APIResponse[User], status_code=status.HTTP_201_CREATED)
def create_user(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserCreate,
    current_user: UserModel = Depends(deps.require_roles(ADMIN_ONLY))
):
    user = user_service.create_user(db, user_in=user_in)
    return APIResponse(message="User created successfully", data=user)


@router.put("/{user_id}", response_model=APIResponse[User])
def update_user(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_id: int,
    user_in: UserAdminUpdate,
    current_user: UserModel = Depends(deps.require_roles(ADMIN_ONLY))
):
    user = user_service.update_user(db, user_id=user_id, user_in=user_in)
    return APIResponse(message="User updated successfully", data=user)


@router.delete("/{user_id}", response_model=APIResponse[None])
def delete_user(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_id: int,
    current_user: UserModel = Depends(deps.require_roles(ADMIN_ONLY))
):
    user_service.delete_user(db, user_id=user_id, current_user=current_user)
    return APIResponse(message="User deleted successfully")
