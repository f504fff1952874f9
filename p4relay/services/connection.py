"""Session lifecycle with serialized connection establishment.

Locking Strategy:
- `initialization_lock`: class-level, shared by every lifecycle in the process
- Held only around the transport connect call, never across a command
- Teardown and command dispatch run without it
"""

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from p4relay.models import ConnectionParams
    from p4relay.protocols import Transport

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Failed to establish a session with the relay host."""

    def __init__(self, host_name: str, original_error: Exception):
        """Initialize transport error.

        Args:
            host_name: Name of the relay host
            original_error: Original exception that caused the failure
        """
        self.host_name = host_name
        self.original_error = original_error
        super().__init__(f"Cannot connect to {host_name}: {original_error}")


class ConnectionLifecycle:
    """Owns initialize, deinitialize and reinitialize of one session."""

    # Concurrent connection setup misbehaves in the transport layer
    initialization_lock = threading.Lock()

    def __init__(
        self,
        transport: "Transport",
        on_established: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the lifecycle around a transport.

        Args:
            transport: Connection primitive owned by this lifecycle
            on_established: Called after every successful initialize
        """
        self.transport = transport
        self._on_established = on_established

    @property
    def is_open(self) -> bool:
        """Return whether the session is currently open."""
        return self.transport.is_connected

    def initialize(self) -> bool:
        """Establish a new session.

        Returns:
            True if the session was established
        """
        with self.initialization_lock:
            try:
                self.transport.connect()
            except (TransportError, OSError) as e:
                logger.error("Could not initialize session: %s", e)
                return False

        logger.debug("Session initialized")
        if self._on_established is not None:
            self._on_established()
        return True

    def deinitialize(self) -> bool:
        """Release the session. Safe to call on a closed session.

        Returns:
            True once the session is closed
        """
        was_open = self.transport.is_connected
        # Also releases what a failed or remotely closed session left behind
        self.transport.disconnect()
        if was_open:
            logger.debug("Session deinitialized")
        return True

    def reinitialize(self) -> bool:
        """Tear down and re-establish the session.

        Returns:
            True if the new session was established
        """
        self.deinitialize()
        return self.initialize()

    def reconfigure(self, params: "ConnectionParams") -> None:
        """Replace the connection parameters used by later sessions.

        The open session is left as is until the next reinitialize.
        """
        logger.info(
            "Reconfiguring session (port=%s, user=%s, client=%s)",
            params.port,
            params.user,
            params.client,
        )
        self.transport.params = params
