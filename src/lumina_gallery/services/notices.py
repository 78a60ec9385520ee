"""User-facing notices."""

import logging
from dataclasses import dataclass, field
from typing import Literal, Protocol

logger = logging.getLogger(__name__)

NoticeLevel = Literal["success", "info", "error"]


@dataclass(frozen=True)
class Notice:
    """A short message shown to the user."""

    level: NoticeLevel
    text: str


class Notifier(Protocol):
    """Interface for surfacing notices to the user."""

    def notify(self, notice: Notice) -> None:
        """Show a notice."""


@dataclass
class NoticeLog(Notifier):
    """Notifier that keeps every notice in order."""

    notices: list[Notice] = field(default_factory=list)

    def notify(self, notice: Notice) -> None:
        """Record and log a notice."""
        if notice.level == "error":
            logger.warning("Notice: %s", notice.text)
        else:
            logger.info("Notice: %s", notice.text)
        self.notices.append(notice)

    @property
    def last(self) -> Notice | None:
        return self.notices[-1] if self.notices else None


def success(text: str) -> Notice:
    return Notice(level="success", text=text)


def info(text: str) -> Notice:
    return Notice(level="info", text=text)


def error(text: str) -> Notice:
    return Notice(level="error", text=text)
