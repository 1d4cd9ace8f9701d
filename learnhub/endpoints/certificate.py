from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from learnhub.models.user import User as UserModel
from learnhub.schemas.certificate import (
    PortfolioCertificate,
    CertificatePdf,
    CertificateVerifyRequest,
    CertificateVerification,
)
from learnhub.schemas.response import APIResponse
from learnhub.services.certificate import certificate_service
from learnhub.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[PortfolioCertificate]])
def list_my_certificates(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    certificates = certificate_service.list_my_certificates(db, current_user=current_user)
    return APIResponse(message="Certificates retrieved successfully", data=certificates)


@router.post("/verify", response_model=APIResponse[CertificateVerification])
def verify_certificate(
    verify_in: CertificateVerifyRequest,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    verification = certificate_service.verify(db, code=verify_in.code)
    return APIResponse(message="Certificate is valid", data=verification)


@router.get("/course/{course_id}", response_model=APIResponse[PortfolioCertificate])
def get_course_certificate(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    certificate = certificate_service.get_for_course(db, course_id=course_id, current_user=current_user)
    return APIResponse(message="Certificate retrieved successfully", data=certificate)


@router.get("/{certificate_id}", response_model=APIResponse[PortfolioCertificate])
def get_certificate(
    certificate_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    certificate = certificate_service.get_certificate(db, certificate_id=certificate_id, current_user=current_user)
    return APIResponse(message="Certificate retrieved successfully", data=certificate)


@router.get("/{certificate_id}/pdf", response_model=APIResponse[CertificatePdf])
def download_certificate_pdf(
    certificate_id: int,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.get_current_user)
):
    pdf = certificate_service.get_pdf(db, certificate_id=certificate_id, current_user=current_user)
    return APIResponse(message=pdf.message, data=pdf)
