"""Base result sink shared by every p4 command."""

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Perforce error severities
E_EMPTY = 0
E_INFO = 1
E_WARN = 2
E_FAILED = 3
E_FATAL = 4

# Perforce generic code for communication failures
EV_COMM = 38


@dataclass(frozen=True)
class P4Message:
    """A diagnostic reported by the server or the p4 client."""

    severity: int
    generic: int
    text: str

    @property
    def is_error(self) -> bool:
        """Check if the message is at least E_FAILED."""
        return self.severity >= E_FAILED

    @property
    def is_fatal(self) -> bool:
        """Check if the message is E_FATAL."""
        return self.severity >= E_FATAL


class CommandResult:
    """Collects the output of one p4 command and its error state.

    Subclasses shape the collected records for a specific command by
    overriding the output hooks. A fresh instance is used for every
    attempt, so nothing from a failed attempt carries over.
    """

    def __init__(self) -> None:
        self.stats: list[dict[str, Any]] = []
        self.info: list[str] = []
        self.messages: list[P4Message] = []

    def output_stat(self, record: dict[str, Any]) -> None:
        """Receive a tagged record."""
        self.stats.append(record)

    def output_info(self, level: int, data: str) -> None:
        """Receive an informational line."""
        self.info.append(data)

    def output_text(self, data: bytes) -> None:
        """Receive a chunk of file content. Ignored unless overridden."""

    def handle_error(self, message: P4Message) -> None:
        """Record a diagnostic reported for this command."""
        if message.is_error:
            logger.debug("p4 error (severity=%d): %s", message.severity, message.text)
        self.messages.append(message)

    @property
    def severity(self) -> int:
        """Return the worst severity seen so far."""
        return max((m.severity for m in self.messages), default=E_EMPTY)

    @property
    def is_error(self) -> bool:
        return self.severity >= E_FAILED

    @property
    def is_fatal(self) -> bool:
        return self.severity >= E_FATAL

    @property
    def error_text(self) -> str:
        """Join the text of every error-level message."""
        return "\n".join(m.text.strip() for m in self.messages if m.is_error)

    @property
    def warnings(self) -> list[str]:
        """Return the text of warning-level messages."""
        return [m.text.strip() for m in self.messages if m.severity == E_WARN]
