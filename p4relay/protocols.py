"""Protocol interfaces for dependency inversion.

The executor depends on these contracts rather than on the SSH transport,
so tests can drive it with scripted fakes.

Usage Example:

    from p4relay.protocols import Transport

    class FlakyTransport:
        def connect(self) -> None: ...
        def disconnect(self) -> None: ...
        def set_args(self, args): ...
        def run(self, command, sink): ...
        def dropped(self) -> bool:
            return True

    executor = CommandExecutor(FlakyTransport(), RetryPolicy(retries=0))
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from p4relay.models import ConnectionParams, P4Message


@runtime_checkable
class ResultSink(Protocol):
    """Receives the streamed output of a dispatched command.

    Every result type handed to the transport must accept records and
    diagnostics, and expose the accumulated error state.
    """

    def output_stat(self, record: dict[str, Any]) -> None:
        """Receive one tagged record."""
        ...

    def output_info(self, level: int, data: str) -> None:
        """Receive one informational line."""
        ...

    def output_text(self, data: bytes) -> None:
        """Receive a chunk of file content."""
        ...

    def handle_error(self, message: P4Message) -> None:
        """Receive a diagnostic for the running command."""
        ...

    @property
    def is_error(self) -> bool:
        """True when a message of E_FAILED or worse was received."""
        ...

    @property
    def is_fatal(self) -> bool:
        """True when an E_FATAL message was received."""
        ...


@runtime_checkable
class Transport(Protocol):
    """Connection primitive to the remote server.

    Implementations own exactly one live session at a time.

    Example implementation:
        class MyTransport:
            def connect(self) -> None:
                # Open the session, raise TransportError on failure
                ...

            def run(self, command: str, sink: ResultSink) -> None:
                # Dispatch with the args set by set_args()
                ...
    """

    params: ConnectionParams

    @property
    def is_connected(self) -> bool:
        """True while a session is open."""
        ...

    def connect(self) -> None:
        """Open a new session.

        Raises:
            TransportError: If the session cannot be established
        """
        ...

    def disconnect(self) -> None:
        """Close the session.

        Note:
            Safe to call when no session is open.
        """
        ...

    def set_args(self, args: Sequence[str]) -> None:
        """Set the arguments for the next dispatched command."""
        ...

    def run(self, command: str, sink: ResultSink) -> None:
        """Dispatch a named command, streaming its output into sink."""
        ...

    def dropped(self) -> bool:
        """Report whether the connection dropped during the last run."""
        ...
