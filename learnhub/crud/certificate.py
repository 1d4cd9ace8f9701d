import logging
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from learnhub.crud.base import CRUDBase
from learnhub.models.certificate import Certificate
from learnhub.models.course import Course
from learnhub.schemas.certificate import Certificate as CertificateSchema

logger = logging.getLogger(__name__)


class CRUDCertificate(CRUDBase[Certificate, CertificateSchema, CertificateSchema]):

    def get_by_user_and_course(self, db: Session, *, user_id: int, course_id: int) -> Optional[Certificate]:
        return (
            db.query(Certificate)
            .filter(Certificate.user_id == user_id, Certificate.course_id == course_id)
            .first()
        )

    def get_by_code(self, db: Session, *, code: str) -> Optional[Certificate]:
        return (
            db.query(Certificate)
            .options(joinedload(Certificate.user), joinedload(Certificate.course))
            .filter(Certificate.unique_code == code)
            .first()
        )

    def get_by_user(self, db: Session, *, user_id: int) -> List[Certificate]:
        return (
            db.query(Certificate)
            .options(joinedload(Certificate.course).joinedload(Course.teacher))
            .filter(Certificate.user_id == user_id)
            .order_by(Certificate.issued_at.desc(), Certificate.id.desc())
            .all()
        )

    def count_by_course(self, db: Session, *, course_id: int) -> int:
        return db.query(func.count(Certificate.id)).filter(Certificate.course_id == course_id).scalar() or 0

    def issue(self, db: Session, *, user_id: int, course_id: int) -> Tuple[Certificate, bool]:
        """Issue the (user, course) certificate once. Returns ``(certificate, created)``."""
        existing = self.get_by_user_and_course(db, user_id=user_id, course_id=course_id)
        if existing:
            return existing, False
        try:
            with db.begin_nested():
                certificate = Certificate(user_id=user_id, course_id=course_id)
                db.add(certificate)
                db.flush()
        except IntegrityError:
            logger.info(f"Certificate for user {user_id} course {course_id} issued concurrently, reusing it")
            return self.get_by_user_and_course(db, user_id=user_id, course_id=course_id), False
        db.refresh(certificate)
        return certificate, True

certificate = CRUDCertificate(Certificate)
