"""
Centralized error handling for the application.

Leaf modules raise the typed exceptions below; the pipeline converts them
into ``Failure`` results with ``to_failure`` so nothing escapes to a trigger.
"""

import traceback

from ytnote.models.schemas import Failure, FailureKind
from ytnote.utils.logger import logging


class SummarizerError(Exception):
    """Base class for every classified pipeline error."""

    kind = FailureKind.UNEXPECTED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SummarizerError):
    kind = FailureKind.CONFIGURATION


class MissingModel(ConfigurationError):
    def __init__(self, message: str = "No AI model selected. Please select a model in the plugin settings."):
        super().__init__(message)


class MissingApiKey(ConfigurationError):
    def __init__(self, provider_name: str):
        super().__init__(f"{provider_name} API key is missing. Please set it in the plugin settings.")
        self.provider_name = provider_name


class ProviderNotInitialized(ConfigurationError):
    def __init__(self, message: str = "AI provider not initialized. Please check your settings."):
        super().__init__(message)


class UnsupportedProvider(ConfigurationError):
    def __init__(self, provider_name: str):
        super().__init__(f"Unsupported AI provider: {provider_name}")
        self.provider_name = provider_name


class AlreadyProcessing(SummarizerError):
    kind = FailureKind.ALREADY_PROCESSING

    def __init__(self, message: str = "Already processing a video, please wait..."):
        super().__init__(message)


class NotAReference(SummarizerError):
    kind = FailureKind.NOT_A_REFERENCE

    def __init__(self, text: str):
        super().__init__(f"Not a valid YouTube URL: {text!r}")
        self.text = text


class InvalidReference(SummarizerError):
    kind = FailureKind.INVALID_REFERENCE


class TranscriptUnavailable(SummarizerError):
    kind = FailureKind.TRANSCRIPT_UNAVAILABLE


class NetworkError(SummarizerError):
    kind = FailureKind.NETWORK


class DocumentError(SummarizerError):
    """A note could not be read or parsed."""
    kind = FailureKind.UNEXPECTED


class ProviderError(SummarizerError):
    kind = FailureKind.PROVIDER

    def __init__(self, vendor: str, message: str):
        super().__init__(f"{vendor}: {message}")
        self.vendor = vendor


def to_failure(error: Exception) -> Failure:
    """
    Convert an exception raised during a run into a Failure result.

    Args:
        error: The exception that stopped the run

    Returns:
        Failure carrying the error classification and message
    """
    if isinstance(error, SummarizerError):
        return Failure(kind=error.kind, message=error.message)

    logging.error(f"Unexpected error during summarization: {error}")
    logging.error("".join(traceback.format_exception(type(error), error, error.__traceback__)))
    return Failure(kind=FailureKind.UNEXPECTED, message=str(error) or type(error).__name__)


def notification_for(failure: Failure) -> str:
    """Message shown to the user for a failure."""
    if failure.kind in (FailureKind.ALREADY_PROCESSING, FailureKind.CONFIGURATION):
        return failure.message
    return f"Error: {failure.message}"
