"""
Configuration for pytest tests.
"""

import os
import tempfile

# Keep test runs away from real data, logs and provider keys
_TEST_ROOT = tempfile.mkdtemp(prefix="ytnote-tests-")
os.environ["DATA_DIR"] = os.path.join(_TEST_ROOT, "data")
os.environ["LOG_DIR"] = os.path.join(_TEST_ROOT, "logs")
os.environ["ENVIRONMENT"] = "development"
for _key in ("GROQ_API_KEY", "OPENAI_API_KEY", "GEMINI_API_KEY", "PIPELINE_TIMEOUT_SECONDS"):
    os.environ.pop(_key, None)

import pytest

from ytnote.core.pipeline import SummaryPipeline
from ytnote.core.triggers import YouTubeSummarizer
from ytnote.host.notifier import CollectingNotifier
from ytnote.host.settings import SettingsManager
from ytnote.models.schemas import PluginSettings, ProviderSettings, Transcript, TranscriptLine


class StubFetcher:
    """Transcript fetcher returning a fixed transcript, optionally waiting on a gate."""

    def __init__(self, transcript, error=None):
        self.transcript = transcript
        self.error = error
        self.gate = None
        self.calls = []

    async def fetch_transcript(self, reference):
        self.calls.append(reference)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.transcript


class StubProvider:
    """Provider returning a fixed summary."""

    name = "Stub"

    def __init__(self, summary="Summary text", error=None):
        self.summary = summary
        self.error = error
        self.calls = []

    async def summarize_video(self, video_id, prompt):
        self.calls.append((video_id, prompt))
        if self.error is not None:
            raise self.error
        return self.summary


class FakeSurface:
    """In-memory document surface recording every mutation."""

    def __init__(self, selection="", frontmatter=None):
        self.selection = selection
        self.frontmatter = dict(frontmatter or {})
        self.inserted = []
        self.appended = []
        self.frontmatter_writes = 0

    def get_selection(self):
        return self.selection

    def replace_selection(self, text):
        self.inserted.append(text)
        self.selection = ""

    def append(self, target, text, mutator=None):
        self.appended.append((target, text))
        if mutator is not None:
            mutator(self.frontmatter)
            self.frontmatter_writes += 1

    def read_frontmatter(self, target):
        return dict(self.frontmatter)

    def write_frontmatter(self, target, mutator):
        mutator(self.frontmatter)
        self.frontmatter_writes += 1


class FakePrompt:
    def __init__(self, answer):
        self.answer = answer
        self.asked = 0

    async def ask(self):
        self.asked += 1
        return self.answer


@pytest.fixture
def test_video_url():
    """Return a test YouTube video URL."""
    return "https://youtu.be/abc123"


@pytest.fixture
def transcript():
    return Transcript(
        video_id="abc123",
        title="T",
        author="A",
        channel_url="C",
        lines=[TranscriptLine(text="hi", start=0)],
    )


@pytest.fixture
def fetcher(transcript):
    return StubFetcher(transcript)


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def plugin_settings():
    return PluginSettings(
        providers={"groq": ProviderSettings(name="Groq", api_key="test_api_key")},
        selected_model="groq-llama",
        custom_prompt="Summarize:",
    )


@pytest.fixture
def settings(tmp_path, plugin_settings):
    return SettingsManager(tmp_path / "settings.json", settings=plugin_settings)


@pytest.fixture
def pipeline(settings, notifier, fetcher, provider):
    return SummaryPipeline(
        settings,
        notifier,
        fetcher=fetcher,
        provider_factory=lambda model_config: provider,
        timeout=None,
    )


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def summarizer(pipeline, settings, surface, notifier):
    return YouTubeSummarizer(pipeline, settings, surface, notifier, paste_delay=0)


@pytest.fixture
def reference_prompt(test_video_url):
    return FakePrompt(test_video_url)
