"""
API routes for the ytnote application.
"""

from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from ytnote.api.schems import (
    ScanRequest,
    ScanResponse,
    StatusResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from ytnote.core.pipeline import SummaryPipeline
from ytnote.core.triggers import YouTubeSummarizer
from ytnote.host.markdown import MarkdownWorkspace
from ytnote.host.notifier import LogNotifier
from ytnote.host.settings import SettingsManager
from ytnote.models.schemas import Failure, FailureKind, Success, TriggerKind
from ytnote.utils.logger import logging

router = APIRouter(prefix="/api/v1", tags=["youtube"])

STATUS_CODES = {
    FailureKind.ALREADY_PROCESSING: 409,
    FailureKind.CONFIGURATION: 400,
    FailureKind.NOT_A_REFERENCE: 400,
    FailureKind.INVALID_REFERENCE: 400,
    FailureKind.TRANSCRIPT_UNAVAILABLE: 404,
    FailureKind.NETWORK: 502,
    FailureKind.PROVIDER: 502,
    FailureKind.UNEXPECTED: 500,
}


@lru_cache()
def get_summarizer() -> YouTubeSummarizer:
    """Process-wide summarizer, so every request shares one processing lock."""
    settings = SettingsManager()
    settings.load_settings()
    notifier = LogNotifier()
    pipeline = SummaryPipeline(settings, notifier)
    settings.on_change(pipeline.reload)
    return YouTubeSummarizer(pipeline, settings, MarkdownWorkspace(), notifier)


def raise_for_failure(failure: Failure) -> None:
    raise HTTPException(
        status_code=STATUS_CODES.get(failure.kind, 500),
        detail={"kind": failure.kind.value, "message": failure.message},
    )


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize_video(
    request: SummarizeRequest,
    summarizer: YouTubeSummarizer = Depends(get_summarizer),
):
    """
    Summarize a YouTube video by URL.

    - Returns the Markdown fragment in the response body
    - Responds 409 while another summary is in progress
    """
    result = await summarizer.pipeline.run(request.url, TriggerKind.COMMAND, request.prompt)
    if isinstance(result, Failure):
        raise_for_failure(result)
    return SummarizeResponse(url=request.url.strip(), document=result.document)


@router.post("/notes/scan", response_model=ScanResponse)
async def scan_note(
    request: ScanRequest,
    summarizer: YouTubeSummarizer = Depends(get_summarizer),
):
    """Summarize a web clip note whose front-matter source is a YouTube URL."""
    path = Path(request.path)
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Note not found: {request.path}")

    result = await summarizer.handle_document_change(path)
    if result is None:
        return ScanResponse(path=request.path, status="skipped")
    if isinstance(result, Success):
        return ScanResponse(path=request.path, status="summarized")
    logging.info(f"Scan of {request.path} failed: {result.message}")
    return ScanResponse(path=request.path, status="failed", kind=result.kind.value, message=result.message)


@router.get("/status", response_model=StatusResponse)
async def status(summarizer: YouTubeSummarizer = Depends(get_summarizer)):
    """Report whether a summary is in progress and the active settings."""
    selected = summarizer.settings.get_selected_model()
    return StatusResponse(
        processing=summarizer.pipeline.is_running,
        selected_model=f"{selected.provider_name}/{selected.model_name}" if selected else None,
        auto_summarize_webclips=summarizer.settings.get_auto_summarize_webclips(),
        auto_summarize_pasted_urls=summarizer.settings.get_auto_summarize_pasted_urls(),
    )
