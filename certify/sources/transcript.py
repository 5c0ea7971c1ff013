from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    YouTubeTranscriptApi,
)

from app.core.logging import get_logger

log = get_logger(__name__)

PREFERRED_LANGUAGES = ("en",)

_VIDEO_ID_PATTERNS = (
    r"(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/shorts/|youtube\.com/live/)([A-Za-z0-9_-]{11})",
)
_BARE_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")


class TranscriptUnavailable(Exception):
    pass


def extract_video_id(url: str) -> str:
    url = (url or "").strip()
    if _BARE_ID.match(url):
        return url

    for pattern in _VIDEO_ID_PATTERNS:
        match = re.search(pattern, url)
        if match:
            return match.group(1)

    raise ValueError(f"Not a YouTube video URL: {url!r}")


def clean_transcript(raw: str) -> str:
    """
    Clean joined caption text.

    Removes bracket noise like [Music] or [Applause], HTML entities left by
    auto captions, and collapses whitespace. Sentences are kept as-is.
    """
    if not raw:
        return ""

    text = raw.replace("&amp;#39;", "'").replace("&#39;", "'").replace("&amp;", "&")

    text = re.sub(r"\[[^\]]+\]", " ", text)

    text = re.sub(r"\s+", " ", text).strip()

    return text


def join_snippets(snippets: Iterable) -> str:
    return clean_transcript(" ".join(s.text for s in snippets))


def fetch_transcript_text(
    url: str,
    api: Optional[YouTubeTranscriptApi] = None,
    languages: Sequence[str] = PREFERRED_LANGUAGES,
) -> str:
    """
    Fetch the transcript of a YouTube video as a single string.

    English captions are preferred; otherwise the first listed track is used.

    Raises:
        TranscriptUnavailable: bad URL, captions disabled, video missing, etc.
    """
    try:
        video_id = extract_video_id(url)
    except ValueError as e:
        raise TranscriptUnavailable(str(e)) from e

    api = api or YouTubeTranscriptApi()

    try:
        try:
            fetched = api.fetch(video_id, languages=list(languages))
        except NoTranscriptFound:
            # Any language beats falling back to the title
            transcript = next(iter(api.list(video_id)), None)
            if transcript is None:
                raise TranscriptUnavailable(f"No transcripts listed for {video_id}")
            fetched = transcript.fetch()
    except CouldNotRetrieveTranscript as e:
        raise TranscriptUnavailable(f"Could not fetch transcript for {video_id}") from e

    return join_snippets(fetched)


def fetch_transcript(url: str, api: Optional[YouTubeTranscriptApi] = None) -> str:
    """Best-effort transcript: returns "" on any failure."""
    try:
        text = fetch_transcript_text(url, api=api)
    except TranscriptUnavailable as e:
        log.warning("Transcript unavailable for %s (falling back to title): %s", url, e)
        return ""
    except Exception:
        log.warning("Transcript fetch failed for %s (falling back to title)", url, exc_info=True)
        return ""

    log.info("Fetched transcript for %s (%d chars)", url, len(text))
    return text
