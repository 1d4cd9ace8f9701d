from typing import List

from learnhub.schemas.base import APISchema
from learnhub.schemas.user import UserSummary

class AnalyticsCourse(APISchema):
    id: int
    title: str
    lesson_count: int

class ProgressBucket(APISchema):
    name: str
    value: int

class LessonCompletionStat(APISchema):
    lesson_id: int
    title: str
    order: int
    completed: int

class TopStudent(APISchema):
    user: UserSummary
    progress: int
    completed_lessons: int
    time_spent: int

class CourseAnalytics(APISchema):
    course: AnalyticsCourse
    total_students: int
    new_students_this_week: int
    active_students: int
    average_progress: int
    completion_rate: int
    certificates_issued: int
    certificate_rate: int
    progress_distribution: List[ProgressBucket]
    lesson_completion: List[LessonCompletionStat]
    top_students: List[TopStudent]
