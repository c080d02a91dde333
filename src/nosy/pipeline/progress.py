"""Progress sink contract used by stages to report what they are doing."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressSink(Protocol):
    """Receives human-readable status updates; rendering is up to the sink."""

    def update(self, message: str) -> None:
        """Replace the current status line with ``message``."""


class NullProgress:
    """Discard every update."""

    def update(self, message: str) -> None:
        return None


class LoggingProgress:
    """Forward updates to the standard logger at DEBUG level."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        self._level = level
        self.messages: list[str] = []

    def update(self, message: str) -> None:
        self.messages.append(message)
        logger.log(self._level, "%s", message)
