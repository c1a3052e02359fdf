"""
Transcript retrieval for YouTube videos.

Captions come from youtube-transcript-api and the title/author/channel
metadata from pytubefix. Both libraries block, so each call is pushed to a
worker thread and the fetcher itself is awaitable.
"""

import asyncio
import html
import re
from typing import Iterable, List, Optional, Sequence
from urllib.error import URLError

import requests
from pytubefix import YouTube
from pytubefix.exceptions import PytubeFixError, VideoUnavailable as PytubeVideoUnavailable
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    InvalidVideoId,
    NoTranscriptFound,
    RequestBlocked,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeRequestFailed,
    YouTubeTranscriptApi,
)

from ytnote.config import config
from ytnote.core.detector import extract_video_id, is_youtube_url
from ytnote.models.schemas import Transcript, TranscriptLine
from ytnote.utils.error_handling import InvalidReference, NetworkError, TranscriptUnavailable
from ytnote.utils.logger import logging

_BARE_ID = re.compile(r"^[0-9A-Za-z_-]+$")


def watch_url(video_id: str) -> str:
    """Canonical watch URL for a video ID."""
    return f"https://www.youtube.com/watch?v={video_id}"


def thumbnail_url(video_id: str) -> str:
    """Thumbnail image URL for a video ID. No network access."""
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def normalize_lines(snippets: Iterable) -> List[TranscriptLine]:
    """
    Turn raw caption snippets into clean transcript lines.

    Args:
        snippets: Objects with ``text`` and ``start`` attributes (or dicts with those keys)

    Returns:
        Lines in playback order, HTML entities decoded and empty captions dropped
    """
    lines = []
    for snippet in snippets:
        if isinstance(snippet, dict):
            raw_text, start = snippet.get("text", ""), snippet.get("start", 0.0)
        else:
            raw_text, start = snippet.text, snippet.start
        text = " ".join(html.unescape(raw_text or "").split())
        if text:
            lines.append(TranscriptLine(text=text, start=float(start or 0.0)))
    return sorted(lines, key=lambda line: line.start)


class TranscriptFetcher:
    """Class to fetch transcripts and video metadata."""

    def __init__(self, languages: Optional[Sequence[str]] = None, client: Optional[YouTubeTranscriptApi] = None):
        """
        Initialize the fetcher.

        Args:
            languages: Preferred caption languages, most preferred first
            client: Transcript API client (created if not given)
        """
        self.languages = list(languages or config.TRANSCRIPT_LANGUAGES)
        self.client = client or YouTubeTranscriptApi()

    @staticmethod
    def resolve_video_id(reference: str) -> str:
        """Video ID for a URL or a bare ID."""
        candidate = (reference or "").strip()
        if is_youtube_url(candidate):
            return extract_video_id(candidate)
        if _BARE_ID.match(candidate):
            return candidate
        raise InvalidReference(f"Cannot resolve {reference!r} to a YouTube video")

    async def fetch_transcript(self, reference: str) -> Transcript:
        """
        Fetch transcript lines and metadata for a video.

        Args:
            reference: YouTube URL or video ID

        Returns:
            Transcript with title, author, channel URL and ordered lines

        Raises:
            InvalidReference: the video does not exist or the ID is malformed
            TranscriptUnavailable: the video has no captions
            NetworkError: the transport failed
        """
        video_id = self.resolve_video_id(reference)
        logging.info(f"Fetching transcript for video: {video_id}")

        lines = await asyncio.to_thread(self._fetch_lines, video_id)
        metadata = await asyncio.to_thread(self._fetch_metadata, video_id)

        logging.info(f"Fetched {len(lines)} transcript lines for: {metadata['title']}")
        return Transcript(video_id=video_id, lines=lines, **metadata)

    def _fetch_lines(self, video_id: str) -> List[TranscriptLine]:
        try:
            try:
                fetched = self.client.fetch(video_id, languages=self.languages)
            except NoTranscriptFound:
                # Fall back to whatever language the video offers
                logging.debug(f"No transcript in {self.languages} for {video_id}, trying any language")
                available = next(iter(self.client.list(video_id)), None)
                if available is None:
                    raise TranscriptUnavailable(f"No captions available for video {video_id}")
                fetched = available.fetch()
        except (TranscriptsDisabled, NoTranscriptFound) as e:
            raise TranscriptUnavailable(f"No captions available for video {video_id}") from e
        except (VideoUnavailable, InvalidVideoId) as e:
            raise InvalidReference(f"Video {video_id} is unavailable") from e
        except (YouTubeRequestFailed, RequestBlocked) as e:
            raise NetworkError(f"YouTube refused the transcript request for video {video_id}: {type(e).__name__}") from e
        except CouldNotRetrieveTranscript as e:
            raise TranscriptUnavailable(f"Could not retrieve transcript for video {video_id}: {type(e).__name__}") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Failed to download transcript: {e}") from e

        lines = normalize_lines(fetched)
        if not lines:
            raise TranscriptUnavailable(f"Transcript for video {video_id} is empty")
        return lines

    def _fetch_metadata(self, video_id: str) -> dict:
        try:
            yt = YouTube(watch_url(video_id))
            return {
                "title": yt.title,
                "author": yt.author,
                "channel_url": yt.channel_url,
            }
        except PytubeVideoUnavailable as e:
            raise InvalidReference(f"Video {video_id} is unavailable") from e
        except (URLError, PytubeFixError) as e:
            raise NetworkError(f"Failed to fetch video details: {e}") from e
