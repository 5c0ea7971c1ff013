from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

from certify.models import Certificate, Quiz, User

IssueStatusName = Literal["issued", "not_passed", "save_failed"]
VerifyStatusName = Literal["found", "not_found", "unavailable"]


# ---- Auth ----

class RegisterRequest(BaseModel):
    username: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserOut(BaseModel):
    id: str
    username: str
    email: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(**user.model_dump())


class AuthResponse(BaseModel):
    user: UserOut
    access_token: Optional[str] = None
    pending_verification: bool = False


# ---- Quiz ----

class QuizGenerateRequest(BaseModel):
    video_url: str = Field(default="", description="Link to the video")


class QuizQuestionOut(BaseModel):
    # Answer key stays server-side until the quiz is submitted
    number: int
    question: str
    options: List[str]


class QuizOut(BaseModel):
    quiz_id: str
    video_url: str
    topic: str
    channel_name: Optional[str] = None
    created_at: datetime
    questions: List[QuizQuestionOut]

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizOut":
        return cls(
            quiz_id=quiz.id,
            video_url=quiz.video_url,
            topic=quiz.topic,
            channel_name=quiz.channel_name,
            created_at=quiz.created_at,
            questions=[
                QuizQuestionOut(number=i, question=q.question, options=list(q.options))
                for i, q in enumerate(quiz.questions, start=1)
            ],
        )


class QuizSubmitRequest(BaseModel):
    quiz_id: str
    # One entry per question, in order; null or -1 means unanswered
    answers: List[Optional[int]] = Field(default_factory=list)


class CertificateSummary(BaseModel):
    id: str
    user_name: str
    topic: str
    channel_name: Optional[str] = None
    video_url: str
    score: int = Field(..., ge=0, le=100)
    issued_at: datetime

    @classmethod
    def from_certificate(cls, cert: Certificate) -> "CertificateSummary":
        return cls(
            id=cert.id,
            user_name=cert.user_name,
            topic=cert.topic,
            channel_name=cert.channel_name,
            video_url=cert.video_url,
            score=cert.score,
            issued_at=cert.issued_at,
        )


class QuizSubmitResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    quiz_id: str
    total_questions: int
    correct_answers: int
    score_percentage: int = Field(..., ge=0, le=100)
    passing_score: int = Field(..., ge=0, le=100)
    passed: bool

    certificate_status: IssueStatusName
    certificate_saved: bool
    certificate: Optional[CertificateSummary] = None
    message: str = ""


# ---- Certificates ----

class CertificateListResponse(BaseModel):
    certificates: List[CertificateSummary]


class VerifyResponse(BaseModel):
    certificate_id: str
    valid: bool
    status: VerifyStatusName
    message: str
    certificate: Optional[CertificateSummary] = None


class ReviewItemOut(BaseModel):
    number: int
    question: str
    options: List[str]
    correct_answer_index: int
    user_answer_index: Optional[int] = None
    correct: bool


class ReviewResponse(BaseModel):
    certificate_id: str
    topic: str
    score: int
    items: List[ReviewItemOut]


# ---- Transcript ----

class TranscriptResponse(BaseModel):
    transcript: str
