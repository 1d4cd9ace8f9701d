from pydantic import Field
from typing import Optional, List
from datetime import datetime

from learnhub.schemas.base import APISchema
from learnhub.schemas.certificate import Certificate, PortfolioCertificate


class ProgressUpdate(APISchema):
    completed: Optional[bool] = None
    time_spent: Optional[int] = Field(None, ge=0)
    quiz_score: Optional[float] = Field(None, ge=0, le=100)


class Progress(APISchema):
    id: int
    user_id: int
    lesson_id: int
    completed: bool
    completed_at: Optional[datetime] = None
    time_spent: int
    quiz_score: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CourseProgressSummary(APISchema):
    completed: int
    total: int
    percentage: int


class ProgressUpdateResult(APISchema):
    progress: Progress
    course_progress: CourseProgressSummary
    certificate: Optional[Certificate] = None


class CourseProgressItem(APISchema):
    course_id: int
    course_title: str
    enrolled_at: Optional[datetime] = None
    progress: int
    completed_lessons: int
    total_lessons: int
    time_spent: int
    is_completed: bool


class ProgressStats(APISchema):
    total_courses: int
    completed_courses: int
    in_progress_courses: int
    total_time_spent: int
    average_progress: int


class ProgressOverview(APISchema):
    courses: List[CourseProgressItem]
    stats: ProgressStats


class CourseProgressDetail(APISchema):
    course: CourseProgressItem
    lessons: List[Progress]
    certificate: Optional[Certificate] = None


class PortfolioStats(APISchema):
    completed_courses: int
    total_lessons_completed: int
    total_time_spent: int


class Portfolio(APISchema):
    certificates: List[PortfolioCertificate]
    stats: PortfolioStats
