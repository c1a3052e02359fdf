"""
Markdown notes on disk as the document surface.

Front-matter is a YAML block delimited by ``---`` lines at the very top of a
note. Only the active note has a selection; inserting with no active note
writes to stdout.
"""

import re
import sys
from pathlib import Path
from typing import Any, Callable, Dict, MutableMapping, Optional, TextIO, Tuple, Union

import yaml

from ytnote.utils.error_handling import DocumentError
from ytnote.utils.logger import logging

DocumentTarget = Union[str, Path]

_FRONTMATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?(?:\n|\Z)", re.DOTALL | re.MULTILINE)


def split_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """Split note content into (front-matter mapping, body)."""
    match = _FRONTMATTER.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise DocumentError(f"Invalid front-matter: {e}") from e
    if not isinstance(meta, dict):
        logging.warning("Front-matter is not a mapping, ignoring it")
        meta = {}
    return meta, content[match.end():]


def join_frontmatter(meta: Dict[str, Any], body: str) -> str:
    if not meta:
        return body
    block = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True)
    return f"---\n{block}---\n{body}"


class MarkdownWorkspace:
    """Document surface over Markdown files."""

    def __init__(self, active_note: Optional[DocumentTarget] = None, selection: str = "", output: Optional[TextIO] = None):
        self.active_note = Path(active_note) if active_note else None
        self.selection = selection
        self.output = output or sys.stdout

    @staticmethod
    def _read(target: DocumentTarget) -> str:
        path = Path(target)
        if not path.exists():
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DocumentError(f"{path} is not UTF-8 text") from e

    @staticmethod
    def _write(target: DocumentTarget, content: str) -> None:
        Path(target).write_text(content, encoding="utf-8")

    def get_selection(self) -> str:
        return self.selection

    def replace_selection(self, text: str) -> None:
        """Replace the selected text, or insert at the end of the note when nothing is selected."""
        if self.active_note is None:
            self.output.write(text + "\n")
            self.output.flush()
            self.selection = ""
            return

        meta, body = split_frontmatter(self._read(self.active_note))
        if self.selection and self.selection in body:
            body = body.replace(self.selection, text, 1)
        else:
            if body and not body.endswith("\n"):
                body += "\n"
            body += text + "\n"
        self._write(self.active_note, join_frontmatter(meta, body))
        self.selection = ""
        logging.debug(f"Inserted {len(text)} characters into {self.active_note}")

    def append(
        self,
        target: DocumentTarget,
        text: str,
        mutator: Optional[Callable[[MutableMapping[str, Any]], None]] = None,
    ) -> None:
        """
        Append text to the note body.

        With a ``mutator`` the front-matter change and the appended text land
        in a single write.
        """
        if mutator is None:
            with Path(target).open("a", encoding="utf-8") as f:
                f.write(text)
            return
        meta, body = split_frontmatter(self._read(target))
        mutator(meta)
        self._write(target, join_frontmatter(meta, body + text))

    def read_frontmatter(self, target: DocumentTarget) -> Dict[str, Any]:
        meta, _ = split_frontmatter(self._read(target))
        return meta

    def write_frontmatter(self, target: DocumentTarget, mutator: Callable[[MutableMapping[str, Any]], None]) -> None:
        meta, body = split_frontmatter(self._read(target))
        mutator(meta)
        self._write(target, join_frontmatter(meta, body))
