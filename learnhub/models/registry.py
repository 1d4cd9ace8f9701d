# Importing this module registers every mapped class on Base.metadata.
from learnhub.models.user import User
from learnhub.models.course import Course
from learnhub.models.lesson import Lesson
from learnhub.models.enrollment import Enrollment
from learnhub.models.progress import Progress
from learnhub.models.certificate import Certificate
from learnhub.models.chat_message import ChatMessage
from learnhub.models.token_denylist import TokenDenylist

__all__ = [
    "User",
    "Course",
    "Lesson",
    "Enrollment",
    "Progress",
    "Certificate",
    "ChatMessage",
    "TokenDenylist",
]
