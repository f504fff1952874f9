"""Utilities for p4relay."""

from p4relay.utils.console import ColorfulFormatter
from p4relay.utils.depot import (
    ClientView,
    ViewEntry,
    is_depot_path_valid,
    is_file_under_depot_path,
    strip_revision,
)
from p4relay.utils.hostname import get_server_hostname, is_localhost_target
from p4relay.utils.shell import quote_arg

__all__ = [
    "ClientView",
    "ColorfulFormatter",
    "ViewEntry",
    "get_server_hostname",
    "is_depot_path_valid",
    "is_file_under_depot_path",
    "is_localhost_target",
    "quote_arg",
    "strip_revision",
]
