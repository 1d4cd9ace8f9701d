from pydantic import Field, field_validator
from typing import Optional, Any, List
from datetime import datetime

from learnhub.core.constants import LessonTypeEnum
from learnhub.schemas.base import APISchema

class LessonCreate(APISchema):
    course_id: int
    title: str
    lesson_type: LessonTypeEnum = Field(alias="type")
    content: Optional[str] = None
    video_url: Optional[str] = None
    quiz_data: Optional[Any] = None
    order: Optional[int] = None

    @field_validator("title")
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v

class LessonUpdate(APISchema):
    title: Optional[str] = None
    lesson_type: Optional[LessonTypeEnum] = Field(None, alias="type")
    content: Optional[str] = None
    video_url: Optional[str] = None
    quiz_data: Optional[Any] = None
    order: Optional[int] = None

    @field_validator("title", "lesson_type", "order")
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("title")
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty")
        return v

class Lesson(APISchema):
    id: int
    course_id: int
    title: str
    lesson_type: LessonTypeEnum = Field(alias="type")
    content: Optional[str] = None
    video_url: Optional[str] = None
    quiz_data: Optional[Any] = None
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class LessonSummary(APISchema):
    id: int
    title: str
    order: int

class LessonNavigation(APISchema):
    prev: Optional[LessonSummary] = None
    next: Optional[LessonSummary] = None
    current: int
    total: int

class LessonDetail(Lesson):
    course_title: str
    completed: bool = False
    time_spent: int = 0
    quiz_score: Optional[float] = None
    navigation: LessonNavigation

class LessonOrder(APISchema):
    id: int
    order: int

class LessonReorder(APISchema):
    lesson_orders: List[LessonOrder]
