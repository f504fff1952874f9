"""Resilient execution of p4 commands over a single session.

Every command runs to one of two terminal states: a clean result handed
back to the caller, or a FatalCommandError. Recoverable failures are
retried after a fixed delay, reconnecting before every retry.
"""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn, TypeVar

from p4relay.models import CommandInvocation, CommandResult
from p4relay.services.classifier import Outcome, classify
from p4relay.services.connection import ConnectionLifecycle
from p4relay.services.usage import UsageTracker

if TYPE_CHECKING:
    from p4relay.protocols import Transport

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=CommandResult)


class FatalCommandError(Exception):
    """A command could not be completed and no result may be used.

    Raised after the session has been deinitialized. Only the top-level
    entry point should catch this, and it should terminate the process.
    """

    def __init__(
        self,
        invocation: CommandInvocation,
        reason: str,
        messages: Sequence[str] = (),
    ):
        """Initialize fatal command error.

        Args:
            invocation: The command that failed
            reason: Why the failure is fatal
            messages: Error text reported by the last attempt
        """
        self.invocation = invocation
        self.reason = reason
        self.messages = list(messages)
        detail = f": {'; '.join(self.messages)}" if self.messages else ""
        super().__init__(f"{invocation} failed fatally ({reason}){detail}")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry and refresh limits for an executor."""

    retries: int = 10
    delay: float = 5.0
    refresh_threshold: int = 100

    def __post_init__(self) -> None:
        if self.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.retries}")
        if self.refresh_threshold <= 0:
            raise ValueError(
                f"refresh_threshold must be > 0, got {self.refresh_threshold}"
            )


class CommandExecutor:
    """Runs commands on one exclusively owned session.

    An executor is not shared between threads. Several executors may run
    side by side; they only contend on connection establishment.

    Example:
        >>> with CommandExecutor(transport, RetryPolicy(retries=3)) as executor:
        ...     result = executor.run("changes", ["-m", "1", "//depot/..."], ChangesResult)
    """

    def __init__(
        self,
        transport: "Transport",
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the executor.

        Args:
            transport: Connection primitive, owned by this executor from now on
            policy: Retry and refresh limits (defaults to RetryPolicy())
            sleep: Blocking sleep function used for retry delays
        """
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self.usage = UsageTracker(
            threshold=self.policy.refresh_threshold,
            retries=self.policy.retries,
            delay=self.policy.delay,
            sleep=sleep,
        )
        self.lifecycle = ConnectionLifecycle(transport, on_established=self.usage.reset)
        self.reconnects = 0

    def __enter__(self) -> "CommandExecutor":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> bool:
        """Establish the session if it is not open yet."""
        if self.lifecycle.is_open:
            return True
        return self.lifecycle.initialize()

    def close(self) -> None:
        """Tear the session down for good."""
        self.lifecycle.deinitialize()

    def run(
        self,
        command: str,
        args: Sequence[str] = (),
        result_type: Callable[[], R] = CommandResult,  # type: ignore[assignment]
        retries: int | None = None,
    ) -> R:
        """Run a command to completion.

        Args:
            command: p4 command name
            args: Command arguments
            result_type: Factory for a fresh result sink, called once per attempt
            retries: Retry budget for this command (defaults to the policy's)

        Returns:
            The result of the first clean attempt

        Raises:
            FatalCommandError: If the command cannot be completed
        """
        invocation = CommandInvocation(command, tuple(args))
        allowed = self.policy.retries if retries is None else retries
        budget = allowed

        if not self.lifecycle.is_open:
            self.open()

        result = self._dispatch(invocation, result_type)
        dropped = self.lifecycle.transport.dropped()
        outcome = classify(result, dropped, budget)

        while outcome is Outcome.RECOVERABLE:
            budget -= 1
            logger.error(
                "%s, retrying in %.0fs (%d retries left)",
                "Connection dropped" if dropped else "Command errored",
                self.policy.delay,
                budget,
            )
            self._sleep(self.policy.delay)

            self.reconnects += 1
            if self.lifecycle.reinitialize():
                logger.info("Reinitialized session")
            else:
                logger.error("Could not reinitialize session")

            logger.warning("Retrying: %s", invocation)
            result = self._dispatch(invocation, result_type)
            dropped = self.lifecycle.transport.dropped()
            outcome = classify(result, dropped, budget)

        if outcome is Outcome.FATAL:
            if dropped:
                cause = "connection dropped"
            elif result.is_fatal:
                cause = "fatal error"
            else:
                cause = "command error"
            reason = f"{cause} after {allowed - budget} of {allowed} retries"
            self._abort(invocation, reason, result.error_text.splitlines())

        if not self.usage.after_command(self.lifecycle.reinitialize):
            self._abort(invocation, "connection could not be refreshed")

        return result

    def _dispatch(self, invocation: CommandInvocation, result_type: Callable[[], R]) -> R:
        result = result_type()
        transport = self.lifecycle.transport
        transport.set_args(invocation.args)
        transport.run(invocation.command, result)
        return result

    def _abort(
        self,
        invocation: CommandInvocation,
        reason: str,
        messages: Sequence[str] = (),
    ) -> NoReturn:
        logger.critical("Giving up on %s: %s", invocation, reason)
        self.lifecycle.deinitialize()
        raise FatalCommandError(invocation, reason, messages)
