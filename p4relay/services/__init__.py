"""Services for p4relay."""

from p4relay.services.api import P4API
from p4relay.services.classifier import Outcome, classify
from p4relay.services.connection import ConnectionLifecycle, TransportError
from p4relay.services.executor import CommandExecutor, FatalCommandError, RetryPolicy
from p4relay.services.transport import SSHTransport, decode_records, dispatch_record
from p4relay.services.usage import UsageTracker

__all__ = [
    "CommandExecutor",
    "ConnectionLifecycle",
    "FatalCommandError",
    "Outcome",
    "P4API",
    "RetryPolicy",
    "SSHTransport",
    "TransportError",
    "UsageTracker",
    "classify",
    "decode_records",
    "dispatch_record",
]
