"""User-visible notifications raised by hooks after each operation."""

import logging
from dataclasses import dataclass, field
from typing import Literal, Protocol

from agrostudy.errors import AgroStudyError

logger = logging.getLogger(__name__)

NotificationLevel = Literal["success", "error"]


@dataclass(frozen=True)
class Notification:
    """A toast-style message for the user."""

    level: NotificationLevel
    title: str
    description: str = ""
    error: AgroStudyError | None = None


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class LoggingNotifier:
    """Notifier that only writes notifications to the log."""

    def notify(self, notification: Notification) -> None:
        if notification.level == "error":
            logger.warning("%s: %s", notification.title, notification.description)
        else:
            logger.info("%s: %s", notification.title, notification.description)


@dataclass
class RecordingNotifier:
    """Keeps every notification in order. Used per request by the API."""

    notifications: list[Notification] = field(default_factory=list)

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self.notifications if n.level == "error"]

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()
