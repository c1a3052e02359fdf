"""
Single-flight summarization pipeline.

A run goes Idle -> Running -> Idle. While one run holds the processing lock
every other request is rejected with ``AlreadyProcessing``; nothing is queued.
"""

import asyncio
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ytnote.config import config
from ytnote.core.detector import is_youtube_url
from ytnote.core.formatter import format_summary
from ytnote.core.prompts import PromptBuilder
from ytnote.core.providers import SummaryProvider, create_provider
from ytnote.core.transcript import TranscriptFetcher, thumbnail_url
from ytnote.host.interfaces import Notifier, SettingsStore
from ytnote.models.schemas import ModelConfig, PipelineRequest, PipelineResult, Success, TriggerKind
from ytnote.utils.error_handling import (
    AlreadyProcessing,
    MissingApiKey,
    MissingModel,
    NetworkError,
    NotAReference,
    ProviderNotInitialized,
    SummarizerError,
    notification_for,
    to_failure,
)
from ytnote.utils.helpers import truncate_text
from ytnote.utils.logger import logging


class ProcessingLock:
    """Process-wide guard allowing one pipeline run at a time."""

    def __init__(self):
        self._held = False

    @property
    def locked(self) -> bool:
        return self._held

    @contextmanager
    def hold(self) -> Iterator["ProcessingLock"]:
        """Hold the lock for the duration of the ``with`` block, released on any exit."""
        if self._held:
            raise AlreadyProcessing()
        self._held = True
        try:
            yield self
        finally:
            self._held = False


class SummaryPipeline:
    """Fetches a transcript, summarizes it with the selected provider and formats the result."""

    def __init__(
        self,
        settings: SettingsStore,
        notifier: Notifier,
        fetcher: Optional[TranscriptFetcher] = None,
        lock: Optional[ProcessingLock] = None,
        provider_factory: Callable[[ModelConfig], SummaryProvider] = create_provider,
        timeout: Optional[float] = config.PIPELINE_TIMEOUT_SECONDS,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Settings store providing the selected model and prompt
            notifier: Sink for user-facing status and error messages
            fetcher: Transcript fetcher (created if not given)
            lock: Processing lock, shared by every trigger
            provider_factory: Builds the backend for the selected model
            timeout: Optional bound in seconds for one run; None means no bound
        """
        self.settings = settings
        self.notifier = notifier
        self.fetcher = fetcher or TranscriptFetcher()
        self.lock = lock or ProcessingLock()
        self.provider_factory = provider_factory
        self.timeout = timeout
        self.provider: Optional[SummaryProvider] = None
        self.prompt_builder = PromptBuilder()
        self.reload()

    def reload(self) -> None:
        """Rebuild the prompt builder and provider from the current settings."""
        self.prompt_builder = PromptBuilder(self.settings.get_custom_prompt())
        self.provider = None

        selected_model = self.settings.get_selected_model()
        if selected_model is None:
            logging.info("No model selected, provider not initialized")
            return
        try:
            self.provider = self.provider_factory(selected_model)
            logging.info(f"Provider initialized: {selected_model.provider_name}/{selected_model.model_name}")
        except SummarizerError as e:
            logging.error(f"Could not initialize provider: {e.message}")
            self.notifier.notify(f"Error: {e.message}")

    @property
    def is_running(self) -> bool:
        return self.lock.locked

    def check_preconditions(self) -> ModelConfig:
        """
        Verify a run can start.

        Returns:
            The selected model

        Raises:
            MissingModel, MissingApiKey, ProviderNotInitialized
        """
        selected_model = self.settings.get_selected_model()
        if selected_model is None:
            raise MissingModel()
        if not selected_model.api_key:
            raise MissingApiKey(selected_model.provider_name)
        if self.provider is None:
            raise ProviderNotInitialized()
        return selected_model

    async def run(
        self,
        reference: str,
        trigger: TriggerKind = TriggerKind.COMMAND,
        prompt: Optional[str] = None,
    ) -> PipelineResult:
        """
        Summarize one video.

        Never raises for pipeline errors: every failure is logged, reported
        once through the notifier and returned as a ``Failure``.

        Args:
            reference: YouTube URL
            trigger: Which trigger started the run
            prompt: Instruction template overriding the configured one for this run

        Returns:
            Success with the formatted document, or a classified Failure
        """
        try:
            request = PipelineRequest(reference=reference, trigger=trigger)
            # Check and acquisition happen with no await in between, so no other
            # task can start a run after the check passes.
            if self.lock.locked:
                raise AlreadyProcessing()
            self.check_preconditions()
            if not is_youtube_url(request.reference):
                raise NotAReference(request.reference)

            with self.lock.hold():
                logging.info(f"Pipeline started ({request.trigger.value}): {request.reference}")
                document = await self._execute_with_timeout(request, prompt)
            logging.info(f"Pipeline finished ({request.trigger.value}): {request.reference}")
            return Success(document=document)
        except Exception as e:
            failure = to_failure(e)
            logging.warning(f"Pipeline failed ({trigger.value}) [{failure.kind.value}]: {failure.message}")
            self.notifier.notify(notification_for(failure))
            return failure

    async def _execute_with_timeout(self, request: PipelineRequest, prompt: Optional[str]) -> str:
        if self.timeout is None:
            return await self._execute(request, prompt)
        try:
            return await asyncio.wait_for(self._execute(request, prompt), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Summarization timed out after {self.timeout:g} seconds") from e

    async def _execute(self, request: PipelineRequest, prompt: Optional[str]) -> str:
        self.notifier.notify("Fetching video transcript...")
        transcript = await self.fetcher.fetch_transcript(request.reference)
        thumbnail = thumbnail_url(transcript.video_id)

        builder = PromptBuilder(prompt) if prompt else self.prompt_builder
        prompt_text = builder.build_prompt(transcript.text)
        logging.debug(f"Prompt for {transcript.video_id}: {truncate_text(prompt_text, 200)}")

        self.notifier.notify("Generating summary...")
        summary = await self.provider.summarize_video(transcript.video_id, prompt_text)

        return format_summary(transcript, thumbnail, request.reference, summary)
