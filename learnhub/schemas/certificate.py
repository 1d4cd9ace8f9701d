from typing import Optional
from datetime import datetime

from learnhub.schemas.base import APISchema
from learnhub.schemas.user import UserSummary

class Certificate(APISchema):
    id: int
    user_id: int
    course_id: int
    unique_code: str
    issued_at: Optional[datetime] = None

class CertificateCourse(APISchema):
    id: int
    title: str
    category: str
    duration: Optional[str] = None
    teacher: Optional[UserSummary] = None

class PortfolioCertificate(Certificate):
    course: CertificateCourse

class CertificatePdf(APISchema):
    url: str
    message: str

class CertificateVerifyRequest(APISchema):
    code: str

class CertificateVerification(APISchema):
    valid: bool
    unique_code: str
    holder_name: str
    course_title: str
    issued_at: Optional[datetime] = None
