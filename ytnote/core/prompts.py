DEFAULT_PROMPT = """You are an expert summarizer. Summarize the following transcript of a YouTube video in Markdown.

Structure the summary as:
## Summary
A short overview paragraph of what the video covers.

## Key Points
- The main ideas, one bullet each.

## Technical Terms
- Important terms or concepts mentioned, with a one-line explanation each.

## Conclusion
The main takeaway of the video.

Use ONLY information found in the transcript. Do not add a top-level # heading.

Transcript:"""

PROMPT_SEPARATOR = "\n"


class PromptBuilder:
    """Joins the instruction template and transcript text into one prompt."""

    def __init__(self, template: str = ""):
        self.template = template if template and template.strip() else DEFAULT_PROMPT

    def build_prompt(self, transcript_text: str) -> str:
        return f"{self.template}{PROMPT_SEPARATOR}{transcript_text or ''}"
