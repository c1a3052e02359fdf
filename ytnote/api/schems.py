from pydantic import BaseModel
from typing import Optional


class SummarizeRequest(BaseModel):
    """Model for requesting a video summary."""
    url: str
    prompt: Optional[str] = None


class SummarizeResponse(BaseModel):
    """Model for summary responses."""
    url: str
    document: str


class ScanRequest(BaseModel):
    """Model for asking to summarize a web clip note."""
    path: str


class ScanResponse(BaseModel):
    """Outcome of scanning a note."""
    path: str
    status: str
    kind: Optional[str] = None
    message: Optional[str] = None


class StatusResponse(BaseModel):
    """Model for pipeline status."""
    processing: bool
    selected_model: Optional[str] = None
    auto_summarize_webclips: bool
    auto_summarize_pasted_urls: bool
