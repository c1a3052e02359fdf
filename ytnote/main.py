"""
Command line entry point for the ytnote application.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from ytnote.config import config
from ytnote.core.pipeline import SummaryPipeline
from ytnote.core.triggers import YouTubeSummarizer
from ytnote.host.markdown import MarkdownWorkspace
from ytnote.host.notifier import LogNotifier
from ytnote.host.settings import SettingsManager
from ytnote.host.watcher import NoteWatcher
from ytnote.models.schemas import ProviderSettings, Success
from ytnote.utils.error_handling import ConfigurationError
from ytnote.utils.logger import logging


class ConsolePrompt:
    """Asks for a YouTube URL on stdin."""

    async def ask(self) -> Optional[str]:
        try:
            return await asyncio.to_thread(input, "YouTube URL: ")
        except EOFError:
            return None


def build_summarizer(
    surface: MarkdownWorkspace,
    settings: SettingsManager,
    reference_prompt: Optional[ConsolePrompt] = None,
) -> YouTubeSummarizer:
    """Wire settings, notifier, pipeline and triggers together."""
    notifier = LogNotifier()
    pipeline = SummaryPipeline(settings, notifier)
    settings.on_change(pipeline.reload)
    return YouTubeSummarizer(pipeline, settings, surface, notifier, reference_prompt)


async def summarize_command(args, settings: SettingsManager) -> int:
    surface = MarkdownWorkspace(active_note=args.note, selection=args.url or "")
    summarizer = build_summarizer(surface, settings, ConsolePrompt())
    result = await summarizer.handle_command(prompt=args.prompt)
    return 0 if isinstance(result, Success) else 1


async def paste_command(args, settings: SettingsManager) -> int:
    note = Path(args.note)
    # The pasted text lands in the note first, the summary follows it
    surface = MarkdownWorkspace(active_note=note)
    surface.replace_selection(args.text)

    summarizer = build_summarizer(surface, settings)
    task = summarizer.handle_paste(args.text)
    if task is None:
        logging.info("Paste ignored: auto-summarize on paste is off or the text is not a YouTube URL")
        return 0
    result = await task
    return 0 if isinstance(result, Success) else 1


async def scan_command(args, settings: SettingsManager) -> int:
    if not settings.get_auto_summarize_webclips():
        logging.warning("auto_summarize_webclips is disabled in the settings, nothing to do")
        return 0
    summarizer = build_summarizer(MarkdownWorkspace(), settings)
    status = 0
    for note in args.notes:
        result = await summarizer.handle_document_change(Path(note))
        if result is not None and not isinstance(result, Success):
            status = 1
    return status


async def watch_command(args, settings: SettingsManager) -> int:
    summarizer = build_summarizer(MarkdownWorkspace(), settings)
    watcher = NoteWatcher(args.folder)
    await watcher.watch(summarizer.handle_document_change)
    return 0


def settings_command(args, settings: SettingsManager) -> int:
    changes = {}
    if args.select is not None:
        known = {model.id for model in settings.settings.models}
        if args.select not in known:
            logging.error(f"Unknown model {args.select!r}. Known models: {', '.join(sorted(known))}")
            return 1
        changes["selected_model"] = args.select
    if args.prompt is not None:
        changes["custom_prompt"] = args.prompt
    if args.max_tokens is not None:
        changes["max_tokens"] = args.max_tokens
    if args.temperature is not None:
        changes["temperature"] = args.temperature
    if args.auto_webclips is not None:
        changes["auto_summarize_webclips"] = args.auto_webclips == "on"
    if args.auto_paste is not None:
        changes["auto_summarize_pasted_urls"] = args.auto_paste == "on"
    if args.api_key:
        providers = dict(settings.settings.providers)
        for item in args.api_key:
            provider, _, key = item.partition("=")
            current = providers.get(provider) or ProviderSettings(name=provider)
            providers[provider] = current.model_copy(update={"api_key": key or None})
        changes["providers"] = providers

    if changes:
        settings.update(**changes)
    selected = settings.get_selected_model()
    print(f"Settings file: {settings.path}")
    print(f"Selected model: {selected.provider_name}/{selected.model_name}" if selected else "Selected model: none")
    print(f"Auto-summarize webclips: {settings.get_auto_summarize_webclips()}")
    print(f"Auto-summarize pasted URLs: {settings.get_auto_summarize_pasted_urls()}")
    return 0


def serve_command(args) -> int:
    import uvicorn

    uvicorn.run(
        "ytnote.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=config.LOG_LEVEL.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=config.APP_NAME)
    parser.add_argument("--settings", help="Settings file (default: data/settings.json)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summarize = subparsers.add_parser("summarize", help="Summarize a YouTube video into a note")
    summarize.add_argument("url", nargs="?", help="YouTube video URL (prompted for when omitted)")
    summarize.add_argument("--note", help="Markdown note to insert the summary into (default: stdout)")
    summarize.add_argument("--prompt", help="Instruction template for this run only")

    paste = subparsers.add_parser("paste", help="Paste text into a note, summarizing it if it is a YouTube URL")
    paste.add_argument("text", help="Pasted text")
    paste.add_argument("--note", required=True, help="Markdown note receiving the paste")

    scan = subparsers.add_parser("scan", help="Summarize notes whose front-matter source is a YouTube URL")
    scan.add_argument("notes", nargs="+", help="Markdown notes")

    watch = subparsers.add_parser("watch", help="Watch a folder and summarize web clips as they change")
    watch.add_argument("folder", help="Folder of Markdown notes")

    settings = subparsers.add_parser("settings", help="Show or change settings")
    settings.add_argument("--select", help="Model id to select")
    settings.add_argument("--prompt", help="Custom instruction template (empty string restores the default)")
    settings.add_argument("--max-tokens", type=int)
    settings.add_argument("--temperature", type=float)
    settings.add_argument("--api-key", action="append", metavar="PROVIDER=KEY", help="Store an API key")
    settings.add_argument("--auto-webclips", choices=["on", "off"])
    settings.add_argument("--auto-paste", choices=["on", "off"])

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0", help="Host to bind the server to")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind the server to")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    return parser


def main(argv=None) -> int:
    """Main function to run the application from command line."""
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        return serve_command(args)

    settings = SettingsManager(args.settings)
    try:
        settings.load_settings()
        if args.command == "settings":
            return settings_command(args, settings)
    except ConfigurationError as e:
        logging.error(e.message)
        return 1

    commands = {
        "summarize": summarize_command,
        "paste": paste_command,
        "scan": scan_command,
        "watch": watch_command,
    }
    try:
        return asyncio.run(commands[args.command](args, settings))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
