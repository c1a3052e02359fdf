"""
Trigger consumers: explicit command, clipboard paste and front-matter scan.

All three feed the same ``SummaryPipeline.run`` and differ only in where the
video reference comes from and how a successful document is delivered.
"""

import asyncio
from typing import Optional

from ytnote.config import config
from ytnote.core.detector import is_youtube_url
from ytnote.core.pipeline import SummaryPipeline
from ytnote.host.interfaces import DocumentSurface, DocumentTarget, Notifier, ReferencePrompt, SettingsStore
from ytnote.models.schemas import Failure, FailureKind, PipelineResult, Success, TriggerKind
from ytnote.utils.error_handling import DocumentError
from ytnote.utils.logger import logging


class YouTubeSummarizer:
    """Routes host events into the summarization pipeline."""

    def __init__(
        self,
        pipeline: SummaryPipeline,
        settings: SettingsStore,
        surface: DocumentSurface,
        notifier: Notifier,
        reference_prompt: Optional[ReferencePrompt] = None,
        paste_delay: float = config.PASTE_DELAY_SECONDS,
    ):
        self.pipeline = pipeline
        self.settings = settings
        self.surface = surface
        self.notifier = notifier
        self.reference_prompt = reference_prompt
        self.paste_delay = paste_delay
        self._pending_paste: Optional[asyncio.Task] = None

    def _deliver_failure(self, error: Exception) -> Failure:
        logging.error(f"Could not write summary to the document: {error}")
        failure = Failure(kind=FailureKind.UNEXPECTED, message=f"Could not write summary: {error}")
        self.notifier.notify(f"Error: {failure.message}")
        return failure

    async def summarize_to_selection(
        self, reference: str, trigger: TriggerKind, prompt: Optional[str] = None
    ) -> PipelineResult:
        """Run the pipeline and insert the document at the current selection."""
        result = await self.pipeline.run(reference, trigger, prompt)
        if isinstance(result, Success):
            try:
                self.surface.replace_selection(result.document)
            except (OSError, DocumentError) as e:
                return self._deliver_failure(e)
            self.notifier.notify("Summary generated successfully!")
        return result

    async def handle_command(self, prompt: Optional[str] = None) -> Optional[PipelineResult]:
        """
        Summarize the selected URL, or ask the user for one when nothing is selected.

        Args:
            prompt: Instruction template overriding the configured one for this run

        Returns:
            The pipeline result, or None when the user dismissed the URL prompt
        """
        selected_text = self.surface.get_selection().strip()
        if selected_text and is_youtube_url(selected_text):
            return await self.summarize_to_selection(selected_text, TriggerKind.COMMAND, prompt)
        if selected_text:
            message = "Selected text is not a valid YouTube URL"
            self.notifier.notify(message)
            return Failure(kind=FailureKind.NOT_A_REFERENCE, message=message)

        if self.reference_prompt is None:
            self.notifier.notify("No YouTube URL given")
            return None
        url = await self.reference_prompt.ask()
        if not url or not url.strip():
            logging.info("URL prompt dismissed")
            return None
        return await self.summarize_to_selection(url.strip(), TriggerKind.COMMAND, prompt)

    def handle_paste(self, pasted_text: str) -> Optional[asyncio.Task]:
        """
        Schedule a summary for a pasted YouTube URL.

        The run is deferred by ``paste_delay`` so the pasted text lands in the
        document first. The returned task is not awaited here; a newer paste
        cancels a pending one.

        Args:
            pasted_text: Raw clipboard text

        Returns:
            The scheduled task, or None when nothing was scheduled
        """
        if not self.settings.get_auto_summarize_pasted_urls():
            return None
        reference = (pasted_text or "").strip()
        if not is_youtube_url(reference):
            return None

        self.cancel_pending_paste()
        task = asyncio.get_running_loop().create_task(self._deferred_paste(reference))
        task.add_done_callback(self._paste_done)
        self._pending_paste = task
        return task

    async def _deferred_paste(self, reference: str) -> PipelineResult:
        await asyncio.sleep(self.paste_delay)
        # The pipeline checks and takes the lock without suspending, so once the
        # delay is over nothing can slip in. A run started during the delay
        # itself still wins and this one is rejected as already processing.
        return await self.summarize_to_selection(reference, TriggerKind.PASTE)

    def _paste_done(self, task: asyncio.Task) -> None:
        if self._pending_paste is task:
            self._pending_paste = None
        if task.cancelled():
            logging.info("Pending paste summary cancelled")
        elif task.exception() is not None:
            logging.error(f"Paste summary failed: {task.exception()}")

    @property
    def pending_paste(self) -> Optional[asyncio.Task]:
        return self._pending_paste

    def cancel_pending_paste(self) -> bool:
        """Cancel a paste summary that has not started yet."""
        task = self._pending_paste
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def handle_document_change(self, target: DocumentTarget) -> Optional[PipelineResult]:
        """
        Summarize a note whose front-matter ``source`` is a YouTube URL.

        Notes already marked as summarized are skipped before any network call.
        On success the summary is appended to the note body and the marker set.

        Args:
            target: The changed document

        Returns:
            The pipeline result, or None when the note was skipped
        """
        if not self.settings.get_auto_summarize_webclips():
            return None
        try:
            frontmatter = self.surface.read_frontmatter(target)
        except (OSError, DocumentError) as e:
            logging.error(f"Could not read front-matter of {target}: {e}")
            return None

        source = frontmatter.get(config.SOURCE_KEY)
        if not isinstance(source, str) or not is_youtube_url(source):
            return None
        if frontmatter.get(config.SUMMARIZED_KEY) is True:
            logging.debug(f"{target} already summarized, skipping")
            return None

        result = await self.pipeline.run(source.strip(), TriggerKind.AUTO_DETECT)
        if isinstance(result, Success):
            try:
                self.surface.append(target, "\n" + result.document, mutator=_mark_summarized)
            except (OSError, DocumentError) as e:
                return self._deliver_failure(e)
            self.notifier.notify("Auto-summary generated for webclip!")
        return result


def _mark_summarized(frontmatter) -> None:
    frontmatter[config.SUMMARIZED_KEY] = True
