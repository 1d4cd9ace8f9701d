from typing import List

from sqlalchemy.orm import Session

from learnhub.core.exceptions import Forbidden, NotFound
from learnhub.crud.certificate import certificate as crud_certificate
from learnhub.models.certificate import Certificate as CertificateModel
from learnhub.models.user import User
from learnhub.schemas.certificate import (
    PortfolioCertificate,
    CertificatePdf,
    CertificateVerification,
)
from learnhub.utils.permission import PermissionHelper


class CertificateService:

    def _get_or_404(self, db: Session, certificate_id: int) -> CertificateModel:
        certificate = crud_certificate.get(db, id=certificate_id)
        if not certificate:
            raise NotFound("Certificate not found.")
        return certificate

    def list_my_certificates(self, db: Session, *, current_user: User) -> List[PortfolioCertificate]:
        certificates = crud_certificate.get_by_user(db, user_id=current_user.id)
        return [PortfolioCertificate.model_validate(c) for c in certificates]

    def get_certificate(self, db: Session, *, certificate_id: int, current_user: User) -> PortfolioCertificate:
        certificate = self._get_or_404(db, certificate_id)
        if certificate.user_id != current_user.id and not PermissionHelper.is_admin(current_user):
            raise Forbidden("You do not have permission to view this certificate.")
        return PortfolioCertificate.model_validate(certificate)

    def get_for_course(self, db: Session, *, course_id: int, current_user: User) -> PortfolioCertificate:
        certificate = crud_certificate.get_by_user_and_course(db, user_id=current_user.id, course_id=course_id)
        if not certificate:
            raise NotFound("No certificate for this course yet.")
        return PortfolioCertificate.model_validate(certificate)

    def get_pdf(self, db: Session, *, certificate_id: int, current_user: User) -> CertificatePdf:
        certificate = self._get_or_404(db, certificate_id)
        if certificate.user_id != current_user.id:
            raise Forbidden("You can only download your own certificates.")
        # Rendering is not implemented; the URL is where a rendered file would live.
        return CertificatePdf(
            url=f"/certificates/{certificate.unique_code}.pdf",
            message="PDF generation is not available yet.",
        )

    def verify(self, db: Session, *, code: str) -> CertificateVerification:
        certificate = crud_certificate.get_by_code(db, code=code.strip())
        if not certificate:
            raise NotFound("Certificate not found.")
        return CertificateVerification(
            valid=True,
            unique_code=certificate.unique_code,
            holder_name=certificate.user.name,
            course_title=certificate.course.title,
            issued_at=certificate.issued_at,
        )

certificate_service = CertificateService()
