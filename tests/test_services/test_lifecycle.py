"""Tests for ConnectionLifecycle."""

import threading
from unittest.mock import MagicMock

from p4relay.models import ConnectionParams
from p4relay.services.connection import ConnectionLifecycle, TransportError


class TestConnectionLifecycle:
    """Test initialize, deinitialize and reinitialize."""

    def test_initialize_connects(self, transport) -> None:
        lifecycle = ConnectionLifecycle(transport)

        assert lifecycle.initialize() is True
        assert lifecycle.is_open
        assert transport.connects == 1

    def test_initialize_reports_failure(self, make_transport) -> None:
        transport = make_transport(connect_results=[False])
        lifecycle = ConnectionLifecycle(transport)

        assert lifecycle.initialize() is False
        assert not lifecycle.is_open

    def test_on_established_runs_only_on_success(self, make_transport) -> None:
        callback = MagicMock()
        lifecycle = ConnectionLifecycle(
            make_transport(connect_results=[False, True]),
            on_established=callback,
        )

        lifecycle.initialize()
        callback.assert_not_called()

        lifecycle.initialize()
        callback.assert_called_once()

    def test_deinitialize_is_idempotent(self, transport) -> None:
        lifecycle = ConnectionLifecycle(transport)
        lifecycle.initialize()

        assert lifecycle.deinitialize() is True
        assert lifecycle.deinitialize() is True
        assert transport.disconnects == 1

    def test_deinitialize_without_session(self, transport) -> None:
        lifecycle = ConnectionLifecycle(transport)

        assert lifecycle.deinitialize() is True
        assert transport.disconnects == 0

    def test_reinitialize_replaces_session(self, transport) -> None:
        lifecycle = ConnectionLifecycle(transport)
        lifecycle.initialize()

        assert lifecycle.reinitialize() is True
        assert transport.disconnects == 1
        assert transport.connects == 2
        assert lifecycle.is_open

    def test_reinitialize_failure_leaves_session_closed(self, make_transport) -> None:
        transport = make_transport(connect_results=[True, False])
        lifecycle = ConnectionLifecycle(transport)
        lifecycle.initialize()

        assert lifecycle.reinitialize() is False
        assert not lifecycle.is_open

    def test_initialize_catches_os_errors(self) -> None:
        transport = MagicMock()
        transport.connect.side_effect = OSError("Network is unreachable")

        assert ConnectionLifecycle(transport).initialize() is False

    def test_reconfigure_updates_params(self, transport) -> None:
        lifecycle = ConnectionLifecycle(transport)
        params = ConnectionParams(port="ssl:edge:1666", user="bob", client="bob-ws")

        lifecycle.reconfigure(params)

        assert transport.params == params
        assert transport.connects == 0


class TestInitializationLock:
    """Connection setup is serialized across lifecycles."""

    def test_lock_is_shared(self, make_transport) -> None:
        first = ConnectionLifecycle(make_transport())
        second = ConnectionLifecycle(make_transport())

        assert first.initialization_lock is second.initialization_lock

    def test_lock_held_only_during_connect(self, transport) -> None:
        lifecycle = ConnectionLifecycle(transport)
        lifecycle.initialize()

        assert not lifecycle.initialization_lock.locked()

    def test_concurrent_connects_do_not_overlap(self, make_transport) -> None:
        """Slow connects from two threads run one after the other."""
        transports = [make_transport(connect_delay=0.05) for _ in range(2)]
        lifecycles = [ConnectionLifecycle(t) for t in transports]
        barrier = threading.Barrier(2)

        def connect(lifecycle: ConnectionLifecycle) -> None:
            barrier.wait()
            lifecycle.initialize()

        threads = [threading.Thread(target=connect, args=(lc,)) for lc in lifecycles]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        intervals = sorted(t.connect_intervals[0] for t in transports)
        assert intervals[0][1] <= intervals[1][0]

    def test_transport_error_carries_host(self) -> None:
        error = TransportError("relay", OSError("Connection refused"))

        assert error.host_name == "relay"
        assert "relay" in str(error)
        assert "Connection refused" in str(error)
