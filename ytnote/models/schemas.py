"""
Data models for the ytnote application.
"""
from enum import Enum
from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ytnote.config import config


class TriggerKind(str, Enum):
    """Sources that can start a pipeline run."""
    COMMAND = "command"
    PASTE = "paste"
    AUTO_DETECT = "auto_detect"


class FailureKind(str, Enum):
    """Classification of a failed pipeline run."""
    CONFIGURATION = "configuration"
    ALREADY_PROCESSING = "already_processing"
    NOT_A_REFERENCE = "not_a_reference"
    INVALID_REFERENCE = "invalid_reference"
    TRANSCRIPT_UNAVAILABLE = "transcript_unavailable"
    NETWORK = "network"
    PROVIDER = "provider"
    UNEXPECTED = "unexpected"


class TranscriptLine(BaseModel):
    """A single caption line, ordered by playback position."""
    model_config = ConfigDict(frozen=True)

    text: str
    start: float = 0.0


class Transcript(BaseModel):
    """Transcript lines plus the video metadata needed for formatting."""
    model_config = ConfigDict(frozen=True)

    video_id: str
    title: str
    author: str
    channel_url: str
    lines: List[TranscriptLine] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Space-joined line texts in playback order."""
        return " ".join(line.text for line in self.lines)


class ModelConfig(BaseModel):
    """The selected model together with its provider credential."""
    model_config = ConfigDict(frozen=True)

    provider_name: str
    model_name: str
    api_key: Optional[str] = None
    max_tokens: int = config.DEFAULT_MAX_TOKENS
    temperature: float = config.DEFAULT_TEMPERATURE


class PipelineRequest(BaseModel):
    """One invocation of the pipeline."""
    model_config = ConfigDict(frozen=True)

    reference: str
    trigger: TriggerKind = TriggerKind.COMMAND

    @field_validator("reference")
    def strip_reference(cls, v):
        return v.strip()


class Success(BaseModel):
    """Formatted document ready for delivery."""
    ok: Literal[True] = True
    document: str


class Failure(BaseModel):
    """Classified failure of a pipeline run."""
    ok: Literal[False] = False
    kind: FailureKind
    message: str


PipelineResult = Union[Success, Failure]


class ProviderSettings(BaseModel):
    """Credential for one AI vendor."""
    name: str
    api_key: Optional[str] = None


class ModelEntry(BaseModel):
    """A model the user can select."""
    id: str
    provider: str
    model: str


class PluginSettings(BaseModel):
    """Persisted user settings."""
    providers: Dict[str, ProviderSettings] = Field(default_factory=lambda: {
        "groq": ProviderSettings(name="Groq"),
        "openai": ProviderSettings(name="OpenAI"),
        "gemini": ProviderSettings(name="Gemini"),
    })
    models: List[ModelEntry] = Field(default_factory=lambda: [
        ModelEntry(id="groq-llama", provider="groq", model=config.DEFAULT_GROQ_MODEL),
        ModelEntry(id="openai-mini", provider="openai", model=config.DEFAULT_OPENAI_MODEL),
        ModelEntry(id="gemini-flash", provider="gemini", model=config.DEFAULT_GEMINI_MODEL),
    ])
    selected_model: Optional[str] = None
    custom_prompt: str = ""
    max_tokens: int = Field(default=config.DEFAULT_MAX_TOKENS, gt=0)
    temperature: float = Field(default=config.DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    auto_summarize_webclips: bool = False
    auto_summarize_pasted_urls: bool = False
