from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_certificate_repository, get_current_session, get_quiz_generator
from app.api.schemas import (
    CertificateSummary,
    QuizGenerateRequest,
    QuizOut,
    QuizSubmitRequest,
    QuizSubmitResponse,
)
from app.core.logging import get_logger
from app.core.settings import settings
from app.core.state import AppSession
from certify.certificates.issuance import IssueStatus, issue_certificate
from certify.models import Quiz
from certify.quiz.gemini.generate import QuizGenerationError
from certify.quiz.scoring import EmptyQuizError, score_quiz
from certify.store.certificates import CertificateRepository

router = APIRouter(prefix="/quiz", tags=["quiz"])
log = get_logger(__name__)


@router.post("/generate", response_model=QuizOut)
def generate(
    req: QuizGenerateRequest,
    session: AppSession = Depends(get_current_session),
    generate_quiz: Callable[[str], Quiz] = Depends(get_quiz_generator),
):
    try:
        quiz = generate_quiz(req.video_url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except QuizGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception:
        log.exception("Internal error in /quiz/generate")
        raise HTTPException(status_code=500, detail="Failed to generate quiz. Please try again.")

    session.start_quiz(quiz)
    return QuizOut.from_quiz(quiz)


@router.get("/current", response_model=QuizOut)
def current(session: AppSession = Depends(get_current_session)):
    if session.current_quiz is None:
        raise HTTPException(status_code=404, detail="No quiz in progress.")
    return QuizOut.from_quiz(session.current_quiz)


@router.post("/submit", response_model=QuizSubmitResponse)
def submit(
    req: QuizSubmitRequest,
    session: AppSession = Depends(get_current_session),
    repository: CertificateRepository = Depends(get_certificate_repository),
):
    quiz = session.current_quiz
    if quiz is None or quiz.id != req.quiz_id:
        raise HTTPException(status_code=404, detail="No quiz in progress with that id.")

    try:
        result = score_quiz(quiz.questions, req.answers, settings.passing_score)
    except EmptyQuizError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    outcome = issue_certificate(
        user=session.current_user,
        quiz=quiz,
        answers=req.answers,
        result=result,
        repository=repository,
    )

    # Keep the quiz around after a failed save so the user can resubmit
    if outcome.status is not IssueStatus.SAVE_FAILED:
        session.finish_quiz()

    return QuizSubmitResponse(
        quiz_id=quiz.id,
        total_questions=result.total_questions,
        correct_answers=result.correct_answers,
        score_percentage=result.score_percentage,
        passing_score=settings.passing_score,
        passed=result.passed,
        certificate_status=outcome.status.value,
        certificate_saved=outcome.status is IssueStatus.ISSUED,
        certificate=(
            CertificateSummary.from_certificate(outcome.certificate)
            if outcome.certificate is not None
            else None
        ),
        message=outcome.message,
    )
