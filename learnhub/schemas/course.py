from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime

from learnhub.core.constants import LessonTypeEnum, DEFAULT_COURSE_DURATION
from learnhub.schemas.base import APISchema
from learnhub.schemas.user import UserSummary

class CourseBase(APISchema):
    title: str
    description: Optional[str] = None
    category: str
    duration: str = DEFAULT_COURSE_DURATION
    icon: Optional[str] = None
    cover_image: Optional[str] = None
    is_published: bool = False

class CourseCreate(CourseBase):
    teacher_id: Optional[int] = None

    @field_validator("title", "category")
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Title and category are required")
        return v.strip()

class CourseUpdate(APISchema):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    duration: Optional[str] = None
    icon: Optional[str] = None
    cover_image: Optional[str] = None
    is_published: Optional[bool] = None

    @field_validator("title", "category", "duration", "is_published")
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("title", "category")
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title and category cannot be empty")
        return v

class Course(CourseBase):
    id: int
    teacher_id: int
    teacher: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CourseListItem(Course):
    lesson_count: int = 0
    enrollment_count: int = 0
    is_enrolled: bool = False
    progress: int = 0

class CourseLessonItem(APISchema):
    id: int
    title: str
    lesson_type: LessonTypeEnum = Field(alias="type")
    order: int
    completed: bool = False

class CourseDetail(Course):
    lessons: List[CourseLessonItem] = []
    enrollment_count: int = 0
    is_enrolled: bool = False
    progress: int = 0
