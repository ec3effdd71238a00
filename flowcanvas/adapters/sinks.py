"""Notice sinks: where user-facing outcome messages are delivered."""

import logging
from typing import Protocol

from flowcanvas.models.notice import Notice, NoticeVariant

logger = logging.getLogger(__name__)


class NoticeSink(Protocol):
    """Protocol for receiving notices."""

    def append(self, notice: Notice) -> None:
        """Deliver a notice."""
        ...


class ListSink:
    """Stores notices in a list."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def append(self, notice: Notice) -> None:
        """Append a notice to the list."""
        self.notices.append(notice)

    def clear(self) -> None:
        """Clear all notices."""
        self.notices.clear()

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notices]


class LogSink:
    """Writes notices to a logger; destructive ones at warning level."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def append(self, notice: Notice) -> None:
        level = logging.WARNING if notice.variant is NoticeVariant.destructive else logging.INFO
        self.log.log(level, f"{notice.title}: {notice.description}")
