from __future__ import annotations

import json
from typing import Any, List, Optional

from google import genai
from google.genai import types

from app.core.logging import get_logger
from app.core.settings import settings
from certify.models import QuizQuestion
from certify.quiz.gemini.client import get_gemini_client
from certify.quiz.gemini.schema import quiz_response_schema
from certify.quiz.pipeline.prompt import OPTION_COUNT, QUESTION_COUNT

log = get_logger(__name__)


class QuizGenerationError(RuntimeError):
    pass


def validate_questions_payload(data: Any) -> List[QuizQuestion]:
    if not isinstance(data, list):
        raise QuizGenerationError("Gemini output must be a JSON array of questions")

    if len(data) != QUESTION_COUNT:
        raise QuizGenerationError(
            f"Expected {QUESTION_COUNT} questions, got {len(data)}"
        )

    questions: List[QuizQuestion] = []
    for i, q in enumerate(data, start=1):
        if not isinstance(q, dict):
            raise QuizGenerationError(f"Question {i} is not an object")

        text = q.get("question")
        if not isinstance(text, str) or not text.strip():
            raise QuizGenerationError(f"Question {i} missing question text")

        options = q.get("options")
        if (
            not isinstance(options, list)
            or len(options) != OPTION_COUNT
            or not all(isinstance(o, str) for o in options)
        ):
            raise QuizGenerationError(
                f"Question {i} must have exactly {OPTION_COUNT} string options"
            )

        idx = q.get("correctAnswerIndex")
        # bool is an int subclass, reject it explicitly
        if not isinstance(idx, int) or isinstance(idx, bool):
            raise QuizGenerationError(f"Question {i} correctAnswerIndex must be an integer")
        if not 0 <= idx < OPTION_COUNT:
            raise QuizGenerationError(
                f"Question {i} correctAnswerIndex {idx} out of range 0-{OPTION_COUNT - 1}"
            )

        questions.append(
            QuizQuestion(question=text.strip(), options=options, correct_answer_index=idx)
        )

    return questions


def generate_questions(
    prompt: str,
    client: Optional[genai.Client] = None,
) -> List[QuizQuestion]:
    """
    Calls Gemini with a quiz prompt and returns validated questions.

    Raises:
        QuizGenerationError: empty response, invalid JSON or wrong shape.
    """
    client = client or get_gemini_client()

    response = client.models.generate_content(
        model=settings.gemini_model,
        contents=prompt,
        config=types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=types.Schema.model_validate(quiz_response_schema()),
        ),
    )

    raw_text = response.text
    if not raw_text:
        raise QuizGenerationError("Gemini returned an empty response.")

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        log.warning("Gemini returned invalid JSON: %s | raw=%r", e, raw_text[:500])
        raise QuizGenerationError(f"Gemini returned invalid JSON: {e}") from e

    return validate_questions_payload(data)
