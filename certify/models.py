from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    id: str
    username: str
    email: str
    created_at: Optional[datetime] = None


class QuizQuestion(BaseModel):
    # Gemini speaks camelCase, everything else uses the field name
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct_answer_index: int = Field(..., alias="correctAnswerIndex")

    @model_validator(mode="after")
    def _index_within_options(self) -> "QuizQuestion":
        if not 0 <= self.correct_answer_index < len(self.options):
            raise ValueError(
                f"correctAnswerIndex {self.correct_answer_index} out of range "
                f"for {len(self.options)} options"
            )
        return self


class Quiz(BaseModel):
    id: str
    video_url: str
    topic: str
    channel_name: Optional[str] = None
    questions: List[QuizQuestion]
    created_at: datetime = Field(default_factory=utc_now)


class QuizResult(BaseModel):
    total_questions: int
    correct_answers: int
    score_percentage: int = Field(..., ge=0, le=100)
    passed: bool


class Certificate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    user_name: str
    video_url: str
    topic: str
    channel_name: Optional[str] = None

    # Snapshot of the quiz for the answer-key review, not a live reference
    questions: Optional[List[QuizQuestion]] = None
    user_answers: Optional[List[Optional[int]]] = None

    score: int = Field(..., ge=0, le=100)
    issued_at: datetime
