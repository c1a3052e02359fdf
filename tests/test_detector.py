"""
Tests for YouTube URL detection.
"""

import pytest

from ytnote.core.detector import extract_video_id, is_youtube_url
from ytnote.utils.error_handling import NotAReference


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
    "https://m.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
    "youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ?si=-InVol0JhtWji-6R",
    "https://www.youtube.com/embed/dQw4w9WgXcQ",
    "https://www.youtube.com/embed/dQw4w9WgXcQ?start=10",
    "https://www.youtube.com/shorts/dQw4w9WgXcQ",
    "  https://youtu.be/dQw4w9WgXcQ \n",
])
def test_recognized_shapes_share_one_id(url):
    """Every supported URL shape yields the same canonical ID."""
    assert is_youtube_url(url)
    assert extract_video_id(url) == "dQw4w9WgXcQ"


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "hello world",
    "https://vimeo.com/123456",
    "https://www.youtube.com/",
    "https://www.youtube.com/channel/UC123",
    "https://notyoutube.com/watch?v=dQw4w9WgXcQ",
    "watch this: https://youtu.be/dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ is great",
])
def test_rejects_non_references(text):
    assert not is_youtube_url(text)
    with pytest.raises(NotAReference):
        extract_video_id(text)


def test_short_ids_are_accepted():
    assert extract_video_id("https://youtu.be/abc123") == "abc123"


def test_detection_is_deterministic():
    samples = ["https://youtu.be/abc123", "nope", "https://www.youtube.com/embed/xyz"]
    first = [is_youtube_url(s) for s in samples]
    for _ in range(3):
        assert [is_youtube_url(s) for s in samples] == first


def test_non_string_input_is_not_a_reference():
    assert not is_youtube_url(None)
    with pytest.raises(NotAReference):
        extract_video_id(None)
