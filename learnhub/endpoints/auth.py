from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from learnhub.models.user import User as UserModel
from learnhub.schemas.response import APIResponse
from learnhub.schemas.token import LoginRequest, LoginResponse, PasswordChange, Token, TokenPayload
from learnhub.schemas.user import User
from learnhub.services.auth import auth_service
from learnhub.utils import deps

router = APIRouter()


@router.post("/login", response_model=APIResponse[LoginResponse])
def login_for_access_token(
    request: LoginRequest,
    db: Session = Depends(deps.get_db)
):
    login_response = auth_service.login(db, email=request.email, password=request.password)
    return APIResponse(message="Login successful", data=login_response)


@router.get("/me", response_model=APIResponse[User])
def read_current_user(
    current_user: UserModel = Depends(deps.get_current_user)
):
    return APIResponse(message="User retrieved successfully", data=User.model_validate(current_user))


@router.put("/password", response_model=APIResponse[None])
def change_password(
    *,
    db: Session = Depends(deps.get_transactional_db),
    password_in: PasswordChange,
    current_user: UserModel = Depends(deps.get_current_user)
):
    auth_service.change_password(
        db,
        current_user=current_user,
        current_password=password_in.current_password,
        new_password=password_in.new_password,
    )
    return APIResponse(message="Password changed successfully")


@router.post("/refresh", response_model=APIResponse[Token])
def refresh_token(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    token = auth_service.refresh_token(db, current_user=current_user)
    return APIResponse(message="Token refreshed successfully", data=token)


@router.post("/logout", response_model=APIResponse[None])
def logout(
    db: Session = Depends(deps.get_transactional_db),
    token_data: TokenPayload = Depends(deps.get_token_payload),
    current_user: UserModel = Depends(deps.get_current_user)
):
    auth_service.logout(db, token_data=token_data)
    return APIResponse(message="Logged out successfully")
