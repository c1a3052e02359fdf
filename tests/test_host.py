"""
Tests for the Markdown workspace, settings store and note watcher.
"""

import asyncio
import io
import json
from unittest.mock import patch

import pytest
from watchdog.events import DirModifiedEvent, FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from ytnote.host.markdown import MarkdownWorkspace, join_frontmatter, split_frontmatter
from ytnote.host.settings import SettingsManager
from ytnote.host.watcher import NoteWatcher
from ytnote.models.schemas import PluginSettings
from ytnote.utils.error_handling import ConfigurationError, DocumentError


CLIP = """---
title: A clipped video
source: https://www.youtube.com/watch?v=dQw4w9WgXcQ
---
Clipped body.
"""


def test_split_and_join_frontmatter():
    meta, body = split_frontmatter(CLIP)
    assert meta == {"title": "A clipped video", "source": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}
    assert body == "Clipped body.\n"
    assert split_frontmatter(join_frontmatter(meta, body)) == (meta, body)


def test_note_without_frontmatter():
    assert split_frontmatter("# Just a note\n") == ({}, "# Just a note\n")
    assert join_frontmatter({}, "body") == "body"


def test_crlf_frontmatter():
    meta, body = split_frontmatter(CLIP.replace("\n", "\r\n"))
    assert meta["source"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert body == "Clipped body.\r\n"


def test_broken_frontmatter_raises_document_error():
    with pytest.raises(DocumentError):
        split_frontmatter("---\ntitle: [unclosed\n---\nbody\n")


def test_write_frontmatter_keeps_body(tmp_path):
    note = tmp_path / "clip.md"
    note.write_text(CLIP, encoding="utf-8")
    workspace = MarkdownWorkspace()

    workspace.write_frontmatter(note, lambda fm: fm.__setitem__("yt-summarized", True))

    assert workspace.read_frontmatter(note)["yt-summarized"] is True
    assert workspace.read_frontmatter(note)["title"] == "A clipped video"
    assert note.read_text(encoding="utf-8").endswith("Clipped body.\n")


def test_append(tmp_path):
    note = tmp_path / "clip.md"
    note.write_text(CLIP, encoding="utf-8")
    MarkdownWorkspace().append(note, "\n# Summary")
    assert note.read_text(encoding="utf-8") == CLIP + "\n# Summary"


def test_append_with_frontmatter_change(tmp_path):
    note = tmp_path / "clip.md"
    note.write_text(CLIP, encoding="utf-8")
    MarkdownWorkspace().append(note, "\n# Summary\n", mutator=lambda fm: fm.__setitem__("yt-summarized", True))

    meta, body = split_frontmatter(note.read_text(encoding="utf-8"))
    assert meta["yt-summarized"] is True
    assert body == "Clipped body.\n\n# Summary\n"


def test_replace_selection_in_active_note(tmp_path):
    note = tmp_path / "note.md"
    note.write_text("Watch https://youtu.be/abc123 later\n", encoding="utf-8")
    workspace = MarkdownWorkspace(active_note=note, selection="https://youtu.be/abc123")

    workspace.replace_selection("# Summary")

    assert note.read_text(encoding="utf-8") == "Watch # Summary later\n"
    assert workspace.get_selection() == ""


def test_insert_without_selection_appends(tmp_path):
    note = tmp_path / "note.md"
    note.write_text("First line", encoding="utf-8")
    MarkdownWorkspace(active_note=note).replace_selection("# Summary")
    assert note.read_text(encoding="utf-8") == "First line\n# Summary\n"


def test_insert_without_active_note_writes_output():
    output = io.StringIO()
    MarkdownWorkspace(output=output).replace_selection("# Summary")
    assert output.getvalue() == "# Summary\n"


def test_settings_defaults_when_file_missing(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    settings = manager.load_settings()
    assert settings == PluginSettings()
    assert manager.get_selected_model() is None


def test_settings_update_persists_and_notifies(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)
    calls = []
    manager.on_change(lambda: calls.append(True))

    manager.update(selected_model="gemini-flash", auto_summarize_webclips=True)

    assert calls == [True]
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["selected_model"] == "gemini-flash"
    reloaded = SettingsManager(path)
    reloaded.load_settings()
    assert reloaded.get_auto_summarize_webclips() is True
    assert reloaded.get_selected_model().provider_name == "gemini"


def test_settings_rejects_invalid_values(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    with pytest.raises(ConfigurationError):
        manager.update(temperature=5)


def test_settings_rejects_broken_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        SettingsManager(path).load_settings()


def test_api_key_falls_back_to_environment(tmp_path, monkeypatch):
    from ytnote.config import config

    monkeypatch.setattr(config, "GROQ_API_KEY", "env_key")
    manager = SettingsManager(tmp_path / "settings.json", settings=PluginSettings(selected_model="groq-llama"))
    model = manager.get_selected_model()
    assert model.api_key == "env_key"
    assert model.model_name == config.DEFAULT_GROQ_MODEL


def test_unknown_selected_model(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json", settings=PluginSettings(selected_model="gone"))
    assert manager.get_selected_model() is None


def test_watcher_feeds_changed_notes(tmp_path):
    note = tmp_path / "clip.md"
    watcher = NoteWatcher(tmp_path)
    seen = []

    async def on_change(path):
        seen.append(path)

    async def scenario():
        task = asyncio.create_task(watcher.watch(on_change))
        await asyncio.sleep(0)
        for event in [
            FileModifiedEvent(str(tmp_path / "other.txt")),
            DirModifiedEvent(str(tmp_path)),
            FileCreatedEvent(str(note)),
            FileModifiedEvent(str(note)),
        ]:
            await asyncio.to_thread(watcher.handler.dispatch, event)
        watcher.stop()
        await asyncio.wait_for(task, timeout=5)

    with patch("ytnote.host.watcher.Observer") as mock_observer_class:
        asyncio.run(scenario())

    observer = mock_observer_class.return_value
    observer.schedule.assert_called_once_with(watcher.handler, str(tmp_path), recursive=True)
    observer.start.assert_called_once()
    observer.stop.assert_called_once()
    assert seen and set(seen) == {note}


def test_watcher_collapses_repeated_events(tmp_path):
    note = tmp_path / "clip.md"
    watcher = NoteWatcher(tmp_path)
    seen = []

    async def on_change(path):
        seen.append(path)

    async def scenario():
        task = asyncio.create_task(watcher.watch(on_change))
        await asyncio.sleep(0)
        watcher.submit(note)
        watcher.submit(note)
        watcher.stop()
        await asyncio.wait_for(task, timeout=5)

    with patch("ytnote.host.watcher.Observer"):
        asyncio.run(scenario())

    assert seen == [note]


def test_watcher_moved_note_uses_destination(tmp_path):
    watcher = NoteWatcher(tmp_path)
    with patch.object(watcher, "submit") as submit:
        watcher.handler.dispatch(FileMovedEvent(str(tmp_path / ".clip.md.tmp"), str(tmp_path / "clip.md")))
    submit.assert_called_once_with(tmp_path / "clip.md")
