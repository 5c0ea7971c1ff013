from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from app.core.logging import get_logger
from app.core.settings import settings
from certify.models import Certificate, Quiz, QuizResult, User, utc_now
from certify.quiz.scoring import normalize_answers

log = get_logger(__name__)


class CertificateWriter(Protocol):
    def save(self, cert: Certificate) -> Certificate: ...


class IssueStatus(str, Enum):
    ISSUED = "issued"
    NOT_PASSED = "not_passed"
    SAVE_FAILED = "save_failed"


@dataclass(frozen=True)
class IssueOutcome:
    status: IssueStatus
    certificate: Optional[Certificate] = None
    message: str = ""


def build_certificate(
    user: User,
    quiz: Quiz,
    answers: Sequence[Optional[int]],
    score: int,
) -> Certificate:
    return Certificate(
        id=str(uuid.uuid4()),
        user_id=user.id,
        user_name=user.username,
        video_url=quiz.video_url,
        topic=quiz.topic,
        channel_name=quiz.channel_name,
        questions=list(quiz.questions),
        user_answers=normalize_answers(answers, len(quiz.questions)),
        score=score,
        issued_at=utc_now(),
    )


def issue_certificate(
    user: User,
    quiz: Quiz,
    answers: Sequence[Optional[int]],
    result: QuizResult,
    repository: CertificateWriter,
) -> IssueOutcome:
    """
    Persist a certificate when the scored result passed.

    Below the threshold nothing is written. A failed save is reported as
    SAVE_FAILED so the caller can tell the user.
    """
    if not result.passed:
        return IssueOutcome(
            status=IssueStatus.NOT_PASSED,
            message=f"You need {settings.passing_score}% to earn a certificate. "
            "Review the material and try again.",
        )

    cert = build_certificate(user, quiz, answers, result.score_percentage)

    try:
        saved = repository.save(cert)
    except Exception:
        log.exception("Failed to save certificate for user %s", user.id)
        return IssueOutcome(
            status=IssueStatus.SAVE_FAILED,
            message="You passed, but the certificate could not be saved. Please try again.",
        )

    return IssueOutcome(status=IssueStatus.ISSUED, certificate=saved, message="Certificate issued.")
