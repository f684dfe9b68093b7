# recipe_profile/installer/messenger.py
# -*- coding: utf-8 -*-
"""
User-facing message sinks.

Components that report status to the person running the install receive a
MessageSink when they are constructed. FilteredMessageSink wraps another
sink and drops messages matching configured patterns, which the profile uses
to hide per-extension noise while recipes are applied.
"""

import logging
import re
from typing import Iterable, List, Optional, Pattern, Protocol, Tuple, Union

LEVEL_MAP = {
    "status": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class MessageSink(Protocol):
    def add(self, message: str, level: str = "status") -> None: ...


class LoggingMessageSink:
    """Sends messages to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def add(self, message: str, level: str = "status") -> None:
        self.logger.log(LEVEL_MAP.get(level, logging.INFO), message)


class CollectingMessageSink:
    """Keeps messages in memory, in arrival order."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def add(self, message: str, level: str = "status") -> None:
        self.messages.append((level, message))

    def by_level(self, level: str) -> List[str]:
        return [text for msg_level, text in self.messages if msg_level == level]


class FilteredMessageSink:
    """Forwards messages to `inner` unless they match one of `patterns`."""

    def __init__(
        self,
        inner: MessageSink,
        patterns: Iterable[Union[str, Pattern[str]]],
    ):
        self.inner = inner
        self.patterns = [re.compile(pattern) for pattern in patterns]
        self.suppressed = 0

    def add(self, message: str, level: str = "status") -> None:
        # Errors are never hidden.
        if level != "error" and any(p.search(message) for p in self.patterns):
            self.suppressed += 1
            return
        self.inner.add(message, level)
