"""Shared fixtures: a scriptable transport and a recording sleep."""

import time
from collections.abc import Iterable, Sequence

import pytest

from p4relay.models import E_FAILED, E_FATAL, E_WARN, ConnectionParams, P4Message
from p4relay.protocols import ResultSink
from p4relay.services.connection import TransportError


class FakeTransport:
    """Transport whose command attempts follow a script.

    Each script step applies to one run() call: "ok", "drop", "error",
    "fatal" or "warn". Once the script is used up every run is "ok".
    connect_results works the same way for connect() (True succeeds).
    outputs maps a command name to the stat record an "ok" run emits.
    """

    def __init__(
        self,
        script: Iterable[str] = (),
        connect_results: Iterable[bool] = (),
        connect_delay: float = 0.0,
        outputs: dict[str, dict] | None = None,
    ) -> None:
        self.params = ConnectionParams(port="ssl:perforce:1666", user="alice", client="alice-ws")
        self.script = list(script)
        self.connect_results = list(connect_results)
        self.connect_delay = connect_delay
        self.outputs = outputs or {}
        self.connected = False
        self.connects = 0
        self.disconnects = 0
        self.runs: list[tuple[str, tuple[str, ...]]] = []
        self.connect_intervals: list[tuple[float, float]] = []
        self._args: list[str] = []
        self._dropped = False

    @property
    def is_connected(self) -> bool:
        return self.connected

    def connect(self) -> None:
        start = time.monotonic()
        if self.connect_delay:
            time.sleep(self.connect_delay)
        self.connect_intervals.append((start, time.monotonic()))
        self.connects += 1

        ok = self.connect_results.pop(0) if self.connect_results else True
        if not ok:
            raise TransportError("relay", OSError("Connection refused"))
        self.connected = True

    def disconnect(self) -> None:
        if self.connected:
            self.disconnects += 1
        self.connected = False

    def set_args(self, args: Sequence[str]) -> None:
        self._args = list(args)

    def run(self, command: str, sink: ResultSink) -> None:
        self.runs.append((command, tuple(self._args)))
        step = self.script.pop(0) if self.script else "ok"
        self._dropped = step == "drop"

        if step == "ok":
            default = {"code": "stat", "change": str(len(self.runs)), "user": "alice"}
            sink.output_stat(dict(self.outputs.get(command, default)))
        elif step == "error":
            sink.handle_error(P4Message(E_FAILED, 17, "Change 999 unknown."))
        elif step == "fatal":
            sink.handle_error(P4Message(E_FATAL, 6, "Perforce password (P4PASSWD) invalid or unset."))
        elif step == "warn":
            sink.handle_error(P4Message(E_WARN, 17, "//depot/missing/... - no such file(s)."))

    def dropped(self) -> bool:
        return self._dropped


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport() -> type[FakeTransport]:
    """Factory for transports with a custom script."""
    return FakeTransport
