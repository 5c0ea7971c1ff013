"""
Quiz generation from a video link.

Gathers context (transcript first, title/URL as fallback), asks Gemini for
questions and wraps them into a Quiz.
"""
from __future__ import annotations

import uuid
from typing import Callable, Optional

from google import genai

from app.core.logging import get_logger
from app.core.settings import quiz_settings
from certify.models import Quiz
from certify.quiz.gemini.generate import QuizGenerationError, generate_questions
from certify.quiz.pipeline.prompt import build_quiz_prompt, choose_prompt_context
from certify.sources.metadata import VideoMetadata, fetch_video_metadata
from certify.sources.transcript import fetch_transcript

log = get_logger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate quiz. Please check the URL or try again."


def generate_quiz(
    video_url: str,
    client: Optional[genai.Client] = None,
    transcript_source: Callable[[str], str] = fetch_transcript,
    metadata_source: Callable[[str], VideoMetadata] = fetch_video_metadata,
) -> Quiz:
    """
    Generate a 5-question quiz for a video.

    Args:
        video_url:          Link submitted by the user.
        client:             Optional Gemini client (tests pass a fake).
        transcript_source:  Returns transcript text, "" when unavailable.
        metadata_source:    Returns title/channel, empty strings when unavailable.

    Raises:
        ValueError:           Blank URL (nothing is fetched).
        QuizGenerationError:  Gemini failed or returned unusable output.
    """
    video_url = (video_url or "").strip()
    if not video_url:
        raise ValueError("Please provide the video URL.")

    # 1) Context (both sources degrade to empty strings)
    transcript = transcript_source(video_url)
    meta = metadata_source(video_url)

    # 2) Prompt
    ctx = choose_prompt_context(transcript, meta.title, video_url)
    prompt = build_quiz_prompt(ctx)
    log.info("Generating quiz for %s using %s prompt", video_url, type(ctx).__name__)

    # 3) Gemini
    try:
        questions = generate_questions(prompt, client=client)
    except QuizGenerationError as e:
        log.warning("Quiz generation failed for %s: %s", video_url, e)
        raise QuizGenerationError(GENERATION_FAILED_MESSAGE) from e
    except Exception as e:
        log.exception("Gemini API error for %s", video_url)
        raise QuizGenerationError(GENERATION_FAILED_MESSAGE) from e

    # 4) Quiz envelope
    return Quiz(
        id=f"QZ_{uuid.uuid4().hex[:10]}",
        video_url=video_url,
        topic=meta.title or quiz_settings.default_topic,
        channel_name=meta.channel_name or quiz_settings.default_channel,
        questions=questions,
    )
