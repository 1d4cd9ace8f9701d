from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"

class LessonTypeEnum(str, Enum):
    TEXT = "TEXT"
    VIDEO = "VIDEO"
    QUIZ = "QUIZ"

# Role gates are explicit allow-sets, not an inheritance chain.
ADMIN_ONLY = frozenset({RoleEnum.ADMIN})
STAFF = frozenset({RoleEnum.TEACHER, RoleEnum.ADMIN})
ANY_ROLE = frozenset({RoleEnum.STUDENT, RoleEnum.TEACHER, RoleEnum.ADMIN})

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

MIN_PASSWORD_LENGTH = 6
DEFAULT_COURSE_DURATION = "30 min"

ALLOWED_IMAGE_TYPES = ("jpeg", "jpg", "png", "gif", "webp")

PROGRESS_BUCKETS = ("0%", "1-25%", "26-50%", "51-75%", "76-99%", "100%")
