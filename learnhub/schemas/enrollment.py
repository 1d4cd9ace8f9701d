from typing import List, Optional
from datetime import datetime
from pydantic import Field

from learnhub.schemas.base import APISchema
from learnhub.schemas.user import UserSummary

class Enrollment(APISchema):
    id: int
    user_id: int
    course_id: int
    enrolled_at: Optional[datetime] = None

class StudentAdd(APISchema):
    user_id: int

class BatchEnrollRequest(APISchema):
    user_ids: List[int] = Field(..., min_length=1)

class BatchEnrollResult(APISchema):
    enrolled_count: int
    already_enrolled_count: int
    enrolled_user_ids: List[int]
    already_enrolled_user_ids: List[int]

class RosterEntry(APISchema):
    enrollment_id: int
    enrolled_at: Optional[datetime] = None
    user: UserSummary
    completed_lessons: int
    total_lessons: int
    progress: int
    time_spent: int
