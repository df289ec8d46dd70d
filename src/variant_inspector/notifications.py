"""User-facing notification sinks."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from rich.console import Console

logger = logging.getLogger(__name__)


class NotificationLevel(Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass
class Notification:
    message: str
    level: NotificationLevel = NotificationLevel.INFO


class NotificationSink(Protocol):
    """Receives human-readable events; nothing is returned to the caller."""

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None: ...


class LoggingNotificationSink:
    """Forwards notifications to a logger."""

    LEVELS = {
        NotificationLevel.SUCCESS: logging.INFO,
        NotificationLevel.INFO: logging.INFO,
        NotificationLevel.ERROR: logging.ERROR,
    }

    def __init__(self, target: logging.Logger | None = None):
        self._logger = target or logger

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self._logger.log(self.LEVELS[level], message)


class ConsoleNotificationSink:
    """Prints notifications to a rich console."""

    STYLES = {
        NotificationLevel.SUCCESS: "[green]✓[/green]",
        NotificationLevel.INFO: "[blue]i[/blue]",
        NotificationLevel.ERROR: "[red]✗[/red]",
    }

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self.console.print(f"{self.STYLES[level]} {message}")


class RecordingNotificationSink:
    """Keeps notifications in memory, e.g. for a UI to drain."""

    def __init__(self) -> None:
        self._events: list[Notification] = []

    @property
    def events(self) -> list[Notification]:
        return self._events.copy()

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self._events.append(Notification(message, level))

    def clear(self) -> None:
        self._events.clear()
