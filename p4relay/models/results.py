"""Result shapes for the individual p4 commands.

Each variant keeps the base error contract of ``CommandResult`` and turns the
tagged records of its command into small dataclasses as they arrive.
"""

from dataclasses import dataclass, field
from typing import Any

from p4relay.models.result import CommandResult


def _indexed(record: dict[str, Any], prefix: str) -> list[str]:
    """Collect numbered fields such as View0, View1, ... in order."""
    values: list[str] = []
    index = 0
    while f"{prefix}{index}" in record:
        values.append(str(record[f"{prefix}{index}"]))
        index += 1
    return values


@dataclass
class ChangeSummary:
    """One submitted changelist as listed by ``p4 changes``."""

    number: str
    user: str = ""
    timestamp: int = 0
    description: str = ""


@dataclass
class FileRevision:
    """A depot file at a specific revision."""

    depot_file: str
    revision: str = ""
    change: str = ""
    action: str = ""
    file_type: str = ""
    size: int = 0


@dataclass
class PrintedFile:
    """Contents of one file revision returned by ``p4 print``."""

    depot_file: str
    revision: str = ""
    file_type: str = ""
    contents: bytearray = field(default_factory=bytearray)


class TestResult(CommandResult):
    """Result of ``p4 login -s``, used to probe a session."""

    __test__ = False  # not a pytest test class

    @property
    def ticket_expiration(self) -> int | None:
        for record in self.stats:
            if "TicketExpiration" in record:
                return int(record["TicketExpiration"])
        return None


class ChangesResult(CommandResult):
    """Result of ``p4 changes``."""

    def __init__(self) -> None:
        super().__init__()
        self.changes: list[ChangeSummary] = []

    def output_stat(self, record: dict[str, Any]) -> None:
        super().output_stat(record)
        self.changes.append(
            ChangeSummary(
                number=str(record.get("change", "")),
                user=str(record.get("user", "")),
                timestamp=int(record.get("time", 0) or 0),
                description=str(record.get("desc", "")),
            )
        )


class DescribeResult(CommandResult):
    """Result of ``p4 describe -s``."""

    def __init__(self) -> None:
        super().__init__()
        self.change = ""
        self.user = ""
        self.timestamp = 0
        self.description = ""
        self.files: list[FileRevision] = []

    def output_stat(self, record: dict[str, Any]) -> None:
        super().output_stat(record)
        self.change = str(record.get("change", ""))
        self.user = str(record.get("user", ""))
        self.timestamp = int(record.get("time", 0) or 0)
        self.description = str(record.get("desc", ""))

        depot_files = _indexed(record, "depotFile")
        revisions = _indexed(record, "rev")
        actions = _indexed(record, "action")
        types = _indexed(record, "type")
        for i, depot_file in enumerate(depot_files):
            self.files.append(
                FileRevision(
                    depot_file=depot_file,
                    revision=revisions[i] if i < len(revisions) else "",
                    change=self.change,
                    action=actions[i] if i < len(actions) else "",
                    file_type=types[i] if i < len(types) else "",
                )
            )


class FileLogResult(CommandResult):
    """Result of ``p4 filelog -m 1``: the latest revision of each file."""

    def __init__(self) -> None:
        super().__init__()
        self.files: list[FileRevision] = []

    def output_stat(self, record: dict[str, Any]) -> None:
        super().output_stat(record)
        self.files.append(
            FileRevision(
                depot_file=str(record.get("depotFile", "")),
                revision=str(record.get("rev0", "")),
                change=str(record.get("change0", "")),
                action=str(record.get("action0", "")),
                file_type=str(record.get("type0", "")),
                size=int(record.get("fileSize0", 0) or 0),
            )
        )


class SizesResult(CommandResult):
    """Result of ``p4 sizes -a``."""

    @property
    def total_size(self) -> int:
        return sum(int(r.get("fileSize", 0) or 0) for r in self.stats)


class SyncResult(CommandResult):
    """Result of ``p4 sync``, including preview runs with ``-n``."""

    def __init__(self) -> None:
        super().__init__()
        self.files: list[FileRevision] = []

    def output_stat(self, record: dict[str, Any]) -> None:
        super().output_stat(record)
        self.files.append(
            FileRevision(
                depot_file=str(record.get("depotFile", "")),
                revision=str(record.get("rev", "")),
                change=str(record.get("change", "")),
                action=str(record.get("action", "")),
                size=int(record.get("fileSize", 0) or 0),
            )
        )


class PrintResult(CommandResult):
    """Result of ``p4 print``.

    Each stat record opens a new file; following text or binary chunks are
    appended to it.
    """

    def __init__(self) -> None:
        super().__init__()
        self.files: list[PrintedFile] = []

    def output_stat(self, record: dict[str, Any]) -> None:
        super().output_stat(record)
        self.files.append(
            PrintedFile(
                depot_file=str(record.get("depotFile", "")),
                revision=str(record.get("rev", "")),
                file_type=str(record.get("type", "")),
            )
        )

    def output_text(self, data: bytes) -> None:
        if not self.files:
            return
        self.files[-1].contents.extend(data)


class UsersResult(CommandResult):
    """Result of ``p4 users``."""

    @property
    def users(self) -> dict[str, str]:
        """Map user names to e-mail addresses."""
        return {str(r["User"]): str(r.get("Email", "")) for r in self.stats if "User" in r}


class InfoResult(CommandResult):
    """Result of ``p4 info``."""

    @property
    def fields(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for record in self.stats:
            merged.update(record)
        return merged

    @property
    def server_version(self) -> str:
        return str(self.fields.get("serverVersion", ""))


class ClientResult(CommandResult):
    """Result of ``p4 client -o``."""

    @property
    def spec(self) -> dict[str, Any]:
        return self.stats[-1] if self.stats else {}

    @property
    def client(self) -> str:
        return str(self.spec.get("Client", ""))

    @property
    def root(self) -> str:
        return str(self.spec.get("Root", ""))

    @property
    def view(self) -> list[str]:
        return _indexed(self.spec, "View")


class StreamResult(CommandResult):
    """Result of ``p4 stream -o``."""

    @property
    def spec(self) -> dict[str, Any]:
        return self.stats[-1] if self.stats else {}

    @property
    def stream(self) -> str:
        return str(self.spec.get("Stream", ""))

    @property
    def paths(self) -> list[str]:
        return _indexed(self.spec, "Paths")
