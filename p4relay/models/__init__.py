"""Data models for p4relay."""

from p4relay.models.command import CommandInvocation
from p4relay.models.result import (
    E_EMPTY,
    E_FAILED,
    E_FATAL,
    E_INFO,
    E_WARN,
    EV_COMM,
    CommandResult,
    P4Message,
)
from p4relay.models.ssh import ConnectionParams, SSHHost

__all__ = [
    "CommandInvocation",
    "CommandResult",
    "ConnectionParams",
    "E_EMPTY",
    "E_FAILED",
    "E_FATAL",
    "E_INFO",
    "E_WARN",
    "EV_COMM",
    "P4Message",
    "SSHHost",
]
