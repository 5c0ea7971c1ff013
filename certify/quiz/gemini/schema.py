"""
JSON schema Gemini must follow when it answers a quiz prompt.

The model returns a bare array of questions; the quiz envelope (id, topic,
channel) is built on our side.
"""
from __future__ import annotations

from certify.quiz.pipeline.prompt import OPTION_COUNT


def quiz_response_schema() -> dict:
    """
    Schema for Gemini structured output, passed as response_schema.
    """
    return {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {
                "question": {"type": "STRING"},
                "options": {
                    "type": "ARRAY",
                    "items": {"type": "STRING"},
                    "minItems": OPTION_COUNT,
                    "maxItems": OPTION_COUNT,
                },
                # zero-based index into options
                "correctAnswerIndex": {"type": "INTEGER"},
            },
            "required": ["question", "options", "correctAnswerIndex"],
        },
    }
