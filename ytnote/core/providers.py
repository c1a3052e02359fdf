"""
Summarization backends.

Every backend implements the same awaitable ``summarize_video`` capability and
maps its own vendor errors onto ``ProviderError`` / ``NetworkError``. Backends
are independent classes, chosen by ``create_provider`` from the provider name
of the selected model. None of them retries: SDK retries are switched off and
a run makes a single attempt.
"""

from typing import Callable, Dict, Optional, Protocol, runtime_checkable

import groq
import httpx
import openai
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from langchain.chat_models import init_chat_model

from ytnote.models.schemas import ModelConfig
from ytnote.utils.error_handling import NetworkError, ProviderError, UnsupportedProvider
from ytnote.utils.logger import logging


@runtime_checkable
class SummaryProvider(Protocol):
    """Capability shared by all backends."""

    name: str

    async def summarize_video(self, video_id: str, prompt: str) -> str:
        ...


def _message_text(vendor: str, content) -> str:
    # Chat models may return a list of content blocks instead of a string
    if isinstance(content, list):
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    if not isinstance(content, str) or not content.strip():
        raise ProviderError(vendor, "Empty or malformed response from model")
    return content.strip()


class GroqProvider:
    """Groq chat models through LangChain."""

    name = "Groq"

    def __init__(self, model: str, api_key: Optional[str], max_tokens: int, temperature: float):
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.temperature = temperature

    def _llm(self):
        return init_chat_model(
            model=self.model,
            model_provider="groq",
            api_key=self.api_key,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            max_retries=0,
        )

    async def summarize_video(self, video_id: str, prompt: str) -> str:
        logging.info(f"Requesting summary for {video_id} from {self.name} model {self.model}")
        try:
            response = await self._llm().ainvoke(prompt)
        except groq.APIConnectionError as e:
            raise NetworkError(f"Could not reach {self.name}: {e}") from e
        except groq.APIStatusError as e:
            raise ProviderError(self.name, f"HTTP {e.status_code}: {e.message}") from e
        return _message_text(self.name, getattr(response, "content", None))


class OpenAIProvider:
    """OpenAI chat models through LangChain."""

    name = "OpenAI"

    def __init__(self, model: str, api_key: Optional[str], max_tokens: int, temperature: float):
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.temperature = temperature

    def _llm(self):
        return init_chat_model(
            model=self.model,
            model_provider="openai",
            api_key=self.api_key,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            max_retries=0,
        )

    async def summarize_video(self, video_id: str, prompt: str) -> str:
        logging.info(f"Requesting summary for {video_id} from {self.name} model {self.model}")
        try:
            response = await self._llm().ainvoke(prompt)
        except openai.APIConnectionError as e:
            raise NetworkError(f"Could not reach {self.name}: {e}") from e
        except openai.APIStatusError as e:
            raise ProviderError(self.name, f"HTTP {e.status_code}: {e.message}") from e
        return _message_text(self.name, getattr(response, "content", None))


class GeminiProvider:
    """Google Gemini models through the google-genai async client."""

    name = "Gemini"

    def __init__(self, model: str, api_key: Optional[str], max_tokens: int, temperature: float):
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.temperature = temperature

    def _client(self) -> genai.Client:
        return genai.Client(api_key=self.api_key)

    async def summarize_video(self, video_id: str, prompt: str) -> str:
        logging.info(f"Requesting summary for {video_id} from {self.name} model {self.model}")
        try:
            response = await self._client().aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    max_output_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
            )
        except httpx.TransportError as e:
            raise NetworkError(f"Could not reach {self.name}: {e}") from e
        except genai_errors.APIError as e:
            raise ProviderError(self.name, f"HTTP {e.code}: {e.message}") from e
        return _message_text(self.name, getattr(response, "text", None))


PROVIDERS: Dict[str, Callable[..., SummaryProvider]] = {
    "groq": GroqProvider,
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
}


def create_provider(model_config: ModelConfig) -> SummaryProvider:
    """
    Build the backend for the selected model.

    Args:
        model_config: Selected model with its credential, output limit and temperature

    Returns:
        Backend implementing ``summarize_video``

    Raises:
        UnsupportedProvider: if no backend is registered under the provider name
    """
    factory = PROVIDERS.get(model_config.provider_name.lower())
    if factory is None:
        raise UnsupportedProvider(model_config.provider_name)
    return factory(
        model=model_config.model_name,
        api_key=model_config.api_key,
        max_tokens=model_config.max_tokens,
        temperature=model_config.temperature,
    )
