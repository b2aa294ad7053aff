"""A bounded message log with a command hook."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Optional

logger = logging.getLogger(__name__)

MAX_MESSAGES = 1000
INPUT_LIMIT = 255


class Console:
    """Keeps the latest messages and dispatches typed commands."""

    def __init__(self, command_callback: Optional[Callable[[str], None]] = None) -> None:
        self.command_callback = command_callback
        self._messages: deque[str] = deque(maxlen=MAX_MESSAGES)
        self.scroll_to_bottom = True
        self.add_message("WIME Editor Console Ready")

    @property
    def messages(self) -> list[str]:
        return list(self._messages)

    def add_message(self, message: str) -> None:
        self._messages.append(message)
        self.scroll_to_bottom = True
        logger.info(message)

    def add_error(self, error: str) -> None:
        self.add_message("ERROR: " + error)

    def add_warning(self, warning: str) -> None:
        self.add_message("WARNING: " + warning)

    def clear(self) -> None:
        self._messages.clear()
        self.add_message("Console cleared")

    def execute_command(self, command: str) -> None:
        """Echo a command and hand it to the callback; empty input is ignored."""
        command = command[:INPUT_LIMIT]
        if not command:
            return
        self.add_message("> " + command)
        if self.command_callback is not None:
            self.command_callback(command)
        else:
            self.add_message("Command callback not set")

    def render(self) -> str:
        """Return the log as text and acknowledge any pending scroll."""
        self.scroll_to_bottom = False
        return "\n".join(self._messages)