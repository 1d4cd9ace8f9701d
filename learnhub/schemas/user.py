from pydantic import EmailStr, field_validator, model_validator
from typing import Optional, Any, List
from datetime import datetime

from learnhub.core.constants import RoleEnum, MIN_PASSWORD_LENGTH
from learnhub.schemas.base import APISchema


def _validate_password(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Password cannot be empty or contain only whitespace.")
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
    return v


class UserBase(APISchema):
    """Base user schema with common fields."""
    name: str
    email: EmailStr
    avatar: Optional[str] = None

class UserCreate(UserBase):
    """Schema for an admin creating a new user, includes password."""
    password: str
    role: RoleEnum = RoleEnum.STUDENT

    @field_validator("email")
    def normalize_email(cls, v):
        return v.lower()

    @field_validator("name")
    def name_not_empty(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("password")
    def validate_password(cls, v):
        return _validate_password(v)

class UserAdminUpdate(APISchema):
    """Schema for administrative user updates."""
    name: Optional[str] = None
    role: Optional[RoleEnum] = None
    password: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("name")
    def not_empty(cls, v):
        if v is None or not v.strip():
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("role")
    def role_not_null(cls, v):
        if v is None:
            raise ValueError("Role cannot be null")
        return v

    @field_validator("password")
    def validate_password(cls, v):
        return _validate_password(v)

    @model_validator(mode='before')
    @classmethod
    def at_least_one_value(cls, data: Any):
        if isinstance(data, dict) and not any(v is not None for v in data.values()):
            raise ValueError("At least one field must be provided for update")
        return data

class UserProfileUpdate(APISchema):
    """Schema for a user updating their own profile."""
    name: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("name")
    def not_empty(cls, v):
        if v is None or not v.strip():
            raise ValueError("Name cannot be empty")
        return v

    @model_validator(mode='before')
    @classmethod
    def at_least_one_value(cls, data: Any):
        if isinstance(data, dict) and not any(v is not None for v in data.values()):
            raise ValueError("At least one field must be provided for update")
        return data

class User(UserBase):
    """Main user schema for reading user data."""
    id: int
    role: RoleEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class UserSummary(APISchema):
    id: int
    name: str
    email: Optional[str] = None
    role: Optional[RoleEnum] = None
    avatar: Optional[str] = None

class UserListItem(User):
    enrollment_count: int = 0
    course_count: int = 0

class UserEnrollmentCourse(APISchema):
    id: int
    title: str
    category: str

class UserEnrollment(APISchema):
    id: int
    enrolled_at: Optional[datetime] = None
    course: UserEnrollmentCourse

class UserProgressLesson(APISchema):
    id: int
    title: str
    course_id: int

class UserProgressRecord(APISchema):
    id: int
    completed: bool
    completed_at: Optional[datetime] = None
    time_spent: int
    quiz_score: Optional[float] = None
    lesson: UserProgressLesson

class UserDetail(User):
    enrollments: List[UserEnrollment] = []
    progress: List[UserProgressRecord] = []
