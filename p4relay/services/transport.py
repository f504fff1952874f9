"""p4 over a persistent SSH session.

The relay host runs the p4 command-line client with ``-G``, which writes
each output record as a marshalled dict. asyncssh is driven from a private
event loop so that the transport can be used from plain blocking code.
"""

import asyncio
import io
import logging
import marshal
from collections.abc import Iterator, Sequence
from typing import Any

import asyncssh

from p4relay.models import E_FAILED, EV_COMM, ConnectionParams, P4Message, SSHHost
from p4relay.protocols import ResultSink
from p4relay.services.connection import TransportError
from p4relay.utils.shell import quote_arg

logger = logging.getLogger(__name__)


def _text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _decode_record(raw: dict[Any, Any]) -> dict[str, Any]:
    """Convert a marshalled record to str keys and values.

    The ``data`` of text and binary records stays as bytes.
    """
    record = {str(_text(k)): v for k, v in raw.items()}
    keep_data = _text(record.get("code")) in ("text", "binary")
    for key, value in record.items():
        if key == "data" and keep_data:
            continue
        record[key] = _text(value)
    return record


def decode_records(stream: bytes) -> Iterator[dict[str, Any]]:
    """Decode the record stream written by ``p4 -G``.

    Args:
        stream: Raw stdout of the p4 process

    Yields:
        One dict per record
    """
    buffer = io.BytesIO(stream)
    while buffer.tell() < len(stream):
        try:
            raw = marshal.load(buffer)
        except (EOFError, ValueError, TypeError) as e:
            logger.warning("Truncated p4 output at byte %d: %s", buffer.tell(), e)
            return
        if isinstance(raw, dict):
            yield _decode_record(raw)


def dispatch_record(record: dict[str, Any], sink: ResultSink) -> P4Message | None:
    """Route one decoded record to the matching sink hook.

    Returns:
        The message passed to the sink for error records, else None
    """
    code = record.get("code")
    if code == "error":
        message = P4Message(
            severity=int(record.get("severity", E_FAILED)),
            generic=int(record.get("generic", 0)),
            text=str(record.get("data", "")),
        )
        sink.handle_error(message)
        return message
    if code == "info":
        sink.output_info(int(record.get("level", 0)), str(record.get("data", "")))
    elif code in ("text", "binary"):
        data = record.get("data", b"")
        sink.output_text(data if isinstance(data, bytes) else str(data).encode())
    else:
        sink.output_stat(record)
    return None


def build_command_line(
    p4_binary: str,
    params: ConnectionParams,
    command: str,
    args: Sequence[str],
) -> str:
    """Build the shell-quoted p4 invocation run on the relay host."""
    parts = [p4_binary, "-G", *params.global_options(), command, *args]
    return " ".join(quote_arg(part) for part in parts)


class SSHTransport:
    """Runs p4 commands on a relay host over one SSH connection."""

    def __init__(
        self,
        host: SSHHost,
        params: ConnectionParams,
        known_hosts: str | None = None,
        p4_binary: str = "p4",
        command_timeout: float | None = None,
    ) -> None:
        """Initialize the transport. No connection is made yet.

        Args:
            host: Relay host to connect to
            params: Perforce server, user and client for every command
            known_hosts: Path to known_hosts file, or None to disable verification
            p4_binary: p4 executable on the relay host
            command_timeout: Seconds before a command is treated as dropped
        """
        self.host = host
        self.params = params
        self.known_hosts = known_hosts
        self.p4_binary = p4_binary
        self.command_timeout = command_timeout or None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._conn: asyncssh.SSHClientConnection | None = None
        self._args: list[str] = []
        self._dropped = False

    @property
    def is_connected(self) -> bool:
        return self._conn is not None and not self._conn.is_closed()

    def connect(self) -> None:
        """Open the SSH connection.

        Raises:
            TransportError: If the connection cannot be established
        """
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()

        logger.info(
            "Opening SSH connection to %s (%s@%s:%d)",
            self.host.name,
            self.host.user,
            self.host.connection_hostname,
            self.host.connection_port,
        )
        client_keys = [self.host.identity_file] if self.host.identity_file else None
        try:
            self._conn = self._loop.run_until_complete(
                asyncssh.connect(
                    self.host.connection_hostname,
                    port=self.host.connection_port,
                    username=self.host.user,
                    known_hosts=self.known_hosts,
                    client_keys=client_keys,
                )
            )
        except (asyncssh.Error, OSError, ValueError) as e:
            raise TransportError(self.host.name, e) from e

        logger.info("SSH connection established to %s", self.host.name)

    def disconnect(self) -> None:
        """Close the SSH connection and its event loop."""
        conn, self._conn = self._conn, None
        loop, self._loop = self._loop, None

        if conn is not None:
            logger.info("Closing SSH connection to %s", self.host.name)
            conn.close()
            if loop is not None:
                try:
                    loop.run_until_complete(conn.wait_closed())
                except (asyncssh.Error, OSError) as e:
                    logger.debug("Error while closing %s: %s", self.host.name, e)

        if loop is not None:
            loop.close()

    def set_args(self, args: Sequence[str]) -> None:
        self._args = list(args)

    def dropped(self) -> bool:
        return self._dropped

    def run(self, command: str, sink: ResultSink) -> None:
        """Run a p4 command with the current arguments.

        Output records go to the sink. Transport failures are not raised;
        they are reported through dropped().
        """
        self._dropped = False
        if self._conn is None or self._loop is None:
            logger.warning("No open session to %s for p4 %s", self.host.name, command)
            self._dropped = True
            return

        command_line = build_command_line(self.p4_binary, self.params, command, self._args)
        logger.debug("Running on %s: %s", self.host.name, command_line)

        try:
            completed = self._loop.run_until_complete(self._execute(command_line))
        except (asyncssh.Error, OSError, asyncio.TimeoutError) as e:
            logger.warning("Session to %s lost during p4 %s: %s", self.host.name, command, e)
            self._dropped = True
            return

        if completed.exit_signal is not None or completed.exit_status is None:
            logger.warning("p4 %s on %s ended without exit status", command, self.host.name)
            self._dropped = True

        saw_error_record = False
        for record in decode_records(completed.stdout or b""):
            message = dispatch_record(record, sink)
            if message is None:
                continue
            saw_error_record = True
            if message.generic == EV_COMM:
                self._dropped = True

        # p4 also exits non-zero after warnings such as "file(s) up-to-date."
        if completed.exit_status and not saw_error_record:
            stderr = _text(completed.stderr or b"").strip()
            sink.handle_error(
                P4Message(
                    severity=E_FAILED,
                    generic=0,
                    text=stderr or f"p4 exited with status {completed.exit_status}",
                )
            )

    async def _execute(self, command_line: str) -> asyncssh.SSHCompletedProcess:
        assert self._conn is not None
        return await asyncio.wait_for(
            self._conn.run(command_line, check=False, encoding=None),
            timeout=self.command_timeout,
        )
