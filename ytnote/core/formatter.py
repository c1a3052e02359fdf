"""
Rendering of the Markdown fragment delivered to the document.
"""

from ytnote.models.schemas import Transcript


def format_summary(transcript: Transcript, thumbnail_url: str, source_url: str, summary_text: str) -> str:
    """
    Build the Markdown fragment for a summarized video.

    Title and author are inserted verbatim; Markdown control characters in
    them are not escaped.

    Args:
        transcript: Transcript carrying title, author and channel URL
        thumbnail_url: Thumbnail image URL
        source_url: URL of the video as the user supplied it
        summary_text: Text returned by the provider, inserted unmodified

    Returns:
        Heading, thumbnail, author/link line and summary, separated by blank lines
    """
    sections = [
        f"# {transcript.title}",
        f"![Thumbnail]({thumbnail_url})",
        f"👤 [{transcript.author}]({transcript.channel_url})  🔗 [Watch video]({source_url})",
        summary_text,
    ]
    return "\n\n".join(sections)
