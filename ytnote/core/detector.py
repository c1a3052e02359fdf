"""
YouTube URL recognition.
"""

import re

from ytnote.utils.error_handling import NotAReference

_VIDEO_ID = r"(?P<id>[0-9A-Za-z_-]+)"
_TAIL = r"(?:[?&#][^\s]*)?"

# Whole-string patterns only; a URL buried in other text does not match.
_PATTERNS = [
    re.compile(
        r"^(?:https?://)?(?:www\.|m\.|music\.)?youtube\.com/watch\?(?:[^\s#]*&)?v=" + _VIDEO_ID
        + r"(?:[&#][^\s]*)?$"
    ),
    re.compile(r"^(?:https?://)?(?:www\.|m\.)?youtube\.com/(?:embed|shorts|live|v)/" + _VIDEO_ID + r"/?" + _TAIL + "$"),
    re.compile(r"^(?:https?://)?(?:www\.)?youtube-nocookie\.com/embed/" + _VIDEO_ID + r"/?" + _TAIL + "$"),
    re.compile(r"^(?:https?://)?youtu\.be/" + _VIDEO_ID + r"/?" + _TAIL + "$"),
]


def _match(text: str):
    candidate = text.strip()
    for pattern in _PATTERNS:
        match = pattern.match(candidate)
        if match:
            return match
    return None


def is_youtube_url(text: str) -> bool:
    """Check whether the whole (trimmed) string is a YouTube video URL."""
    if not isinstance(text, str):
        return False
    return _match(text) is not None


def extract_video_id(text: str) -> str:
    """
    Extract the canonical video ID from a YouTube URL.

    Args:
        text: Watch, short-link or embed URL, optionally with query parameters

    Returns:
        The video ID

    Raises:
        NotAReference: if the string is not a recognised YouTube URL
    """
    match = _match(text) if isinstance(text, str) else None
    if match is None:
        raise NotAReference(text)
    return match.group("id")
