from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from app.api.schemas import TranscriptResponse
from app.core.logging import get_logger
from certify.sources.transcript import TranscriptUnavailable, fetch_transcript_text

router = APIRouter(prefix="/api", tags=["transcript"])
log = get_logger(__name__)


@router.get("/transcript", response_model=TranscriptResponse)
def transcript(url: str = Query(default="", description="Video URL")):
    if not url.strip():
        raise HTTPException(status_code=400, detail="Missing video URL")

    try:
        text = fetch_transcript_text(url.strip())
    except TranscriptUnavailable as e:
        log.warning("Transcript error for %s: %s", url, e)
        raise HTTPException(
            status_code=502,
            detail="Could not fetch transcript. Captions might be disabled.",
        )
    except Exception:
        log.exception("Internal error in /api/transcript")
        raise HTTPException(
            status_code=502,
            detail="Could not fetch transcript. Captions might be disabled.",
        )

    return TranscriptResponse(transcript=text)
