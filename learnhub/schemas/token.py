from pydantic import BaseModel, EmailStr, field_validator
from datetime import datetime

from learnhub.core.constants import RoleEnum, MIN_PASSWORD_LENGTH
from learnhub.schemas.base import APISchema
from learnhub.schemas.user import User

class Token(APISchema):
    access_token: str
    token_type: str = "bearer"

class TokenPayload(BaseModel):
    user_id: int
    role: RoleEnum | None = None
    jti: str | None = None
    exp: int | None = None

class LoginRequest(APISchema):
    email: EmailStr
    password: str

    @field_validator("email")
    def normalize_email(cls, v):
        return v.lower()

class LoginResponse(APISchema):
    """Response for the login endpoint."""
    user: User
    token: Token

class PasswordChange(APISchema):
    current_password: str
    new_password: str

    @field_validator("new_password")
    def validate_password(cls, v):
        if not v or not v.strip():
            raise ValueError("Password cannot be empty or contain only whitespace.")
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        return v

class TokenDenylistCreate(BaseModel):
    jti: str
    exp: datetime
