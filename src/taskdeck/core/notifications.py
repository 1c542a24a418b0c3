# src/taskdeck/core/notifications.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NotificationLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class Notification:
    level: NotificationLevel
    title: str
    description: str | None = None

    @classmethod
    def success(cls, title: str, description: str | None = None) -> Notification:
        return cls(NotificationLevel.SUCCESS, title, description)

    @classmethod
    def error(cls, title: str, description: str | None = None) -> Notification:
        return cls(NotificationLevel.ERROR, title, description)

    def render(self) -> str:
        mark = "OK" if self.level == NotificationLevel.SUCCESS else "!!"
        if self.description:
            return f"[{mark}] {self.title} ({self.description})"
        return f"[{mark}] {self.title}"


Listener = Callable[[Notification], None]


class NotificationCenter:
    """
    Fan notifications out to subscribers (console printer, tests, ...).

    A crashing subscriber is logged and skipped so one bad listener cannot
    break the operation that emitted the event.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, notification: Notification) -> None:
        if notification.level == NotificationLevel.ERROR:
            logger.info("notify error: %s | %s", notification.title, notification.description)
        else:
            logger.debug("notify: %s | %s", notification.title, notification.description)

        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed.")
