from pydantic import Field, field_validator
from typing import Optional, Any, Dict, List
from datetime import datetime

from learnhub.schemas.base import APISchema

class ChatSend(APISchema):
    message: str
    context: str = "general"

    @field_validator("message")
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v

class ChatMessage(APISchema):
    id: int
    user_id: int
    content: str
    is_ai: bool
    context: str
    meta: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

class ChatExchange(APISchema):
    user_message: ChatMessage
    ai_message: ChatMessage

class Recommendation(APISchema):
    course_id: int
    title: str
    category: str
    reason: str

class Resume(APISchema):
    name: str
    email: str
    completed_courses: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    summary: str
