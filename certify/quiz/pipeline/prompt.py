from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# A transcript must be longer than this to ground the quiz
MIN_TRANSCRIPT_CHARS = 50
# Only this many leading transcript characters are sent to the model
MAX_TRANSCRIPT_CHARS = 30000

QUESTION_COUNT = 5
OPTION_COUNT = 4


@dataclass(frozen=True)
class TranscriptAvailable:
    transcript: str


@dataclass(frozen=True)
class MetadataOnly:
    title: str
    video_url: str


PromptContext = Union[TranscriptAvailable, MetadataOnly]


def choose_prompt_context(transcript: str, title: str, video_url: str) -> PromptContext:
    """
    Pick the prompt path for a video.

    Path A (TranscriptAvailable): transcript longer than MIN_TRANSCRIPT_CHARS,
    truncated to MAX_TRANSCRIPT_CHARS.
    Path B (MetadataOnly): fall back to the title, or the raw URL when the
    title is unknown.
    """
    if transcript and len(transcript) > MIN_TRANSCRIPT_CHARS:
        return TranscriptAvailable(transcript=transcript[:MAX_TRANSCRIPT_CHARS])
    return MetadataOnly(title=title or "", video_url=video_url)


def _transcript_prompt(ctx: TranscriptAvailable) -> str:
    return f"""
You are an educational expert. Create a multiple-choice quiz based STRICTLY on the provided video transcript below.

Rules:
1) Ignore any intro/outro fluff (sponsors, liking, subscribing).
2) Focus on the core educational concepts taught.
3) Generate exactly {QUESTION_COUNT} questions, using ONLY the transcript content.
4) Provide {OPTION_COUNT} options per question.
5) Indicate the correct answer index (0-{OPTION_COUNT - 1}).

TRANSCRIPT:
"{ctx.transcript}"
""".strip()


def _metadata_prompt(ctx: MetadataOnly) -> str:
    if ctx.title:
        context_description = f'The video is titled: "{ctx.title}".'
    else:
        context_description = (
            f'The video URL is: "{ctx.video_url}". Try to infer the topic from the URL.'
        )

    return f"""
You are an educational expert. Create a multiple-choice quiz about the following video content.
{context_description}

Since the full transcript is unavailable, generate general knowledge questions relevant to this specific topic.
Generate exactly {QUESTION_COUNT} questions.
For each question, provide {OPTION_COUNT} options and the index of the correct answer (0-{OPTION_COUNT - 1}).
""".strip()


def build_quiz_prompt(ctx: PromptContext) -> str:
    if isinstance(ctx, TranscriptAvailable):
        return _transcript_prompt(ctx)
    return _metadata_prompt(ctx)
