from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from app.core.logging import get_logger
from certify.models import Certificate
from certify.store.results import LookupResult, LookupStatus

log = get_logger(__name__)


class CertificateReader(Protocol):
    def get_by_id(self, certificate_id: str) -> LookupResult[Certificate]: ...


@dataclass(frozen=True)
class ReviewItem:
    question: str
    options: List[str]
    correct_answer_index: int
    user_answer_index: Optional[int]

    @property
    def correct(self) -> bool:
        return self.user_answer_index == self.correct_answer_index


def verify_certificate(certificate_id: str, repository: CertificateReader) -> LookupResult[Certificate]:
    """
    Exact-id certificate lookup that never raises for a well-formed id.

    NOT_FOUND and UNAVAILABLE stay distinct in the result and in the logs.
    """
    certificate_id = (certificate_id or "").strip()
    if not certificate_id:
        raise ValueError("Certificate ID is required")

    try:
        result = repository.get_by_id(certificate_id)
    except Exception as e:
        log.exception("Certificate lookup crashed for %s", certificate_id)
        return LookupResult.unavailable(str(e))

    if result.status is LookupStatus.NOT_FOUND:
        log.info("No certificate with id %s", certificate_id)
    elif result.status is LookupStatus.UNAVAILABLE:
        log.warning("Certificate store unavailable while verifying %s: %s", certificate_id, result.reason)

    return result


def build_review(cert: Certificate) -> List[ReviewItem]:
    """Question-by-question answer key; empty for certificates without a snapshot."""
    if not cert.questions:
        return []

    answers = list(cert.user_answers or [])
    answers.extend([None] * (len(cert.questions) - len(answers)))

    return [
        ReviewItem(
            question=q.question,
            options=list(q.options),
            correct_answer_index=q.correct_answer_index,
            user_answer_index=a,
        )
        for q, a in zip(cert.questions, answers)
    ]
