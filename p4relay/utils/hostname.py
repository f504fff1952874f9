"""Detect whether the relay host is the machine p4relay runs on."""

import socket

LOOPBACK_NAMES = frozenset({"localhost", "127.0.0.1", "::1"})


def get_server_hostname() -> str:
    """Return this machine's hostname, lowercased."""
    return socket.gethostname().lower()


def _short(name: str) -> str:
    return name.split(".", 1)[0]


def is_localhost_target(target_host: str) -> bool:
    """Check if a relay host name refers to this machine.

    Loopback names always match. Otherwise the name is compared with the
    local hostname case-insensitively, allowing either side to be a FQDN
    of the other's short name.

    Args:
        target_host: Relay host name or SSH alias

    Returns:
        True if the relay runs locally
    """
    if not target_host:
        return False

    target = target_host.lower()
    if target in LOOPBACK_NAMES:
        return True

    local = get_server_hostname()
    if target == local:
        return True

    return _short(target) == _short(local) and ("." in target) != ("." in local)
