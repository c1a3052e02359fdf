from typing import List

from ytnote.utils.logger import logging


class LogNotifier:
    """Shows user-facing notices through the application log."""

    def notify(self, message: str) -> None:
        logging.info(f"Notice: {message}")


class CollectingNotifier(LogNotifier):
    """Logs notices and keeps them for later inspection."""

    def __init__(self):
        self.messages: List[str] = []

    def notify(self, message: str) -> None:
        super().notify(message)
        self.messages.append(message)
