from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_certificate_repository, get_current_session
from app.api.schemas import (
    CertificateListResponse,
    CertificateSummary,
    ReviewItemOut,
    ReviewResponse,
    VerifyResponse,
)
from app.core.logging import get_logger
from app.core.state import AppSession
from certify.certificates.verify import build_review, verify_certificate
from certify.store.certificates import CertificateRepository
from certify.store.results import LookupStatus, StoreUnavailable

router = APIRouter(prefix="/certificates", tags=["certificates"])
log = get_logger(__name__)

NOT_FOUND_MESSAGE = "No certificate found with this ID."
UNAVAILABLE_MESSAGE = "Verification is temporarily unavailable. Please try again later."


@router.get("", response_model=CertificateListResponse)
def my_certificates(
    session: AppSession = Depends(get_current_session),
    repository: CertificateRepository = Depends(get_certificate_repository),
):
    try:
        certs = repository.list_for_user(session.current_user.id)
    except StoreUnavailable:
        log.exception("Failed to load certificates for %s", session.current_user.id)
        raise HTTPException(status_code=503, detail="Could not load your certificates.")

    return CertificateListResponse(
        certificates=[CertificateSummary.from_certificate(c) for c in certs]
    )


@router.get("/verify/{certificate_id}", response_model=VerifyResponse)
def verify(
    certificate_id: str,
    repository: CertificateRepository = Depends(get_certificate_repository),
):
    """
    PUBLIC: anyone holding a certificate id can check it.

    Unknown ids and store outages both answer valid=false; status tells them apart.
    """
    try:
        result = verify_certificate(certificate_id, repository)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result.status is LookupStatus.FOUND:
        return VerifyResponse(
            certificate_id=certificate_id,
            valid=True,
            status=result.status.value,
            message="Certificate is valid.",
            certificate=CertificateSummary.from_certificate(result.value),
        )

    return VerifyResponse(
        certificate_id=certificate_id,
        valid=False,
        status=result.status.value,
        message=NOT_FOUND_MESSAGE if result.status is LookupStatus.NOT_FOUND else UNAVAILABLE_MESSAGE,
    )


@router.get("/{certificate_id}/review", response_model=ReviewResponse)
def review(
    certificate_id: str,
    repository: CertificateRepository = Depends(get_certificate_repository),
):
    try:
        result = verify_certificate(certificate_id, repository)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result.status is LookupStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    if result.status is LookupStatus.UNAVAILABLE:
        raise HTTPException(status_code=503, detail=UNAVAILABLE_MESSAGE)

    cert = result.value
    items = build_review(cert)
    if not items:
        raise HTTPException(status_code=404, detail="This certificate has no answer review.")

    return ReviewResponse(
        certificate_id=cert.id,
        topic=cert.topic,
        score=cert.score,
        items=[
            ReviewItemOut(
                number=i,
                question=it.question,
                options=it.options,
                correct_answer_index=it.correct_answer_index,
                user_answer_index=it.user_answer_index,
                correct=it.correct,
            )
            for i, it in enumerate(items, start=1)
        ],
    )
