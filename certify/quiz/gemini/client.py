from __future__ import annotations

from google import genai
from google.genai import types

from app.core.settings import settings


def get_gemini_client() -> genai.Client:
    """Gemini client bounded by GEMINI_TIMEOUT_SEC so a stalled call fails generation."""
    if not settings.gemini_api_key:
        raise RuntimeError("GEMINI_API_KEY is missing. Add it to .env before generating quizzes.")

    # HttpOptions.timeout is in milliseconds
    timeout_ms = int(settings.gemini_timeout_sec * 1000)
    return genai.Client(
        api_key=settings.gemini_api_key,
        http_options=types.HttpOptions(timeout=timeout_ms),
    )
