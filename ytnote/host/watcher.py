"""
Folder watcher that reports created and modified Markdown notes.

watchdog delivers file system events on its observer thread; they are handed
to the asyncio loop and processed one at a time.
"""

import asyncio
import os
from pathlib import Path
from typing import Awaitable, Callable, Optional, Set, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ytnote.utils.logger import logging


class NoteEventHandler(FileSystemEventHandler):
    """Forwards note events from the observer thread to a ``NoteWatcher``."""

    def __init__(self, watcher: "NoteWatcher"):
        self.watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.submit(Path(os.fsdecode(event.src_path)))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.submit(Path(os.fsdecode(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors that save through a temporary file end with a move
        if not event.is_directory:
            self.watcher.submit(Path(os.fsdecode(event.dest_path)))


class NoteWatcher:
    """Watches a folder tree and calls back for each changed note."""

    def __init__(self, folder: Union[str, Path], pattern: str = "*.md"):
        self.folder = Path(folder)
        self.pattern = pattern
        self.handler = NoteEventHandler(self)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional["asyncio.Queue[Optional[Path]]"] = None
        self._queued: Set[Path] = set()

    def submit(self, path: Path) -> None:
        """Queue a changed path; safe to call from the observer thread."""
        if self._loop is None or not path.match(self.pattern):
            return
        self._loop.call_soon_threadsafe(self._enqueue, path)

    def _enqueue(self, path: Optional[Path]) -> None:
        if path is not None:
            # One pending entry per note; bursts of events collapse into it
            if path in self._queued:
                return
            self._queued.add(path)
        self._queue.put_nowait(path)

    def stop(self) -> None:
        """Ask a running ``watch`` to return; safe to call from any thread."""
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._enqueue, None)

    async def watch(self, on_change: Callable[[Path], Awaitable[object]]) -> None:
        """
        Observe the folder and call ``on_change`` for each changed note until ``stop`` is called.

        Args:
            on_change: Coroutine function receiving the changed path
        """
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._queued.clear()

        observer = Observer()
        observer.schedule(self.handler, str(self.folder), recursive=True)
        observer.start()
        logging.info(f"Watching {self.folder} for note changes")
        try:
            while True:
                path = await self._queue.get()
                if path is None:
                    break
                self._queued.discard(path)
                await on_change(path)
        finally:
            observer.stop()
            observer.join()
            self._loop = None
            logging.info(f"Stopped watching {self.folder}")
