"""
Collaborators the summarization core depends on.

The core only talks to these protocols; concrete versions for Markdown files,
a JSON settings file and logging live next to this module.
"""

from pathlib import Path
from typing import Any, Callable, Dict, MutableMapping, Optional, Protocol, Union

from ytnote.models.schemas import ModelConfig

DocumentTarget = Union[str, Path]


class DocumentSurface(Protocol):
    def get_selection(self) -> str:
        ...

    def replace_selection(self, text: str) -> None:
        ...

    def append(
        self,
        target: DocumentTarget,
        text: str,
        mutator: Optional[Callable[[MutableMapping[str, Any]], None]] = None,
    ) -> None:
        ...

    def read_frontmatter(self, target: DocumentTarget) -> Dict[str, Any]:
        ...

    def write_frontmatter(self, target: DocumentTarget, mutator: Callable[[MutableMapping[str, Any]], None]) -> None:
        ...


class SettingsStore(Protocol):
    def get_selected_model(self) -> Optional[ModelConfig]:
        ...

    def get_custom_prompt(self) -> str:
        ...

    def get_max_tokens(self) -> int:
        ...

    def get_temperature(self) -> float:
        ...

    def get_auto_summarize_webclips(self) -> bool:
        ...

    def get_auto_summarize_pasted_urls(self) -> bool:
        ...


class Notifier(Protocol):
    def notify(self, message: str) -> None:
        ...


class ReferencePrompt(Protocol):
    async def ask(self) -> Optional[str]:
        """Ask the user for a video URL; None when the prompt is dismissed."""
        ...
