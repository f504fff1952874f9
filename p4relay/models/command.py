"""Command invocation data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandInvocation:
    """A single p4 command request: name plus ordered arguments."""

    command: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join(("p4", self.command, *self.args))
