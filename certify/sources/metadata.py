from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from app.core.logging import get_logger
from app.core.settings import settings

log = get_logger(__name__)

NOEMBED_URL = "https://noembed.com/embed"


@dataclass(frozen=True)
class VideoMetadata:
    title: str = ""
    channel_name: str = ""


EMPTY_METADATA = VideoMetadata()


def fetch_video_metadata(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> VideoMetadata:
    """
    Title and channel name via the noembed oEmbed proxy.

    Best effort: any failure yields empty strings.
    """
    http = session or requests
    timeout = timeout if timeout is not None else settings.http_timeout_sec

    try:
        response = http.get(NOEMBED_URL, params={"url": url}, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        log.warning("Failed to fetch video metadata for %s: %s", url, e)
        return EMPTY_METADATA

    if not isinstance(data, dict) or data.get("error"):
        log.warning("noembed has no metadata for %s: %s", url, data)
        return EMPTY_METADATA

    return VideoMetadata(
        title=str(data.get("title") or ""),
        channel_name=str(data.get("author_name") or ""),
    )
