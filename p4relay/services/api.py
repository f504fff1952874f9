"""Typed p4 commands on top of a CommandExecutor."""

import logging

from p4relay.models import CommandResult
from p4relay.models.results import (
    ChangesResult,
    ClientResult,
    DescribeResult,
    FileLogResult,
    InfoResult,
    PrintResult,
    SizesResult,
    StreamResult,
    SyncResult,
    TestResult,
    UsersResult,
)
from p4relay.services.executor import CommandExecutor
from p4relay.utils.depot import ClientView, strip_revision

logger = logging.getLogger(__name__)


class P4API:
    """One method per p4 command used by callers.

    Every call goes through the executor, so each either returns a clean
    result or raises FatalCommandError.
    """

    def __init__(self, executor: CommandExecutor) -> None:
        self.executor = executor
        self.client_view = ClientView()

    def __enter__(self) -> "P4API":
        self.executor.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.executor.close()

    def test_connection(self, retries: int) -> TestResult:
        """Check that the session is logged in, with its own retry budget."""
        return self.executor.run("login", ["-s"], TestResult, retries=retries)

    def short_changes(self, path: str) -> ChangesResult:
        return self.executor.run("changes", ["-s", "submitted", path], ChangesResult)

    def changes(
        self,
        path: str,
        from_cl: str | None = None,
        max_count: int | None = None,
    ) -> ChangesResult:
        """List submitted changes oldest first, optionally starting at from_cl."""
        args = ["-l", "-s", "submitted", "-r"]
        if max_count is not None and max_count > 0:
            args += ["-m", str(max_count)]
        args.append(f"{path}@{from_cl},@now" if from_cl else path)
        return self.executor.run("changes", args, ChangesResult)

    def changes_from_to(self, path: str, from_cl: str, to_cl: str) -> ChangesResult:
        args = ["-l", "-s", "submitted", "-r", f"{path}@{from_cl},{to_cl}"]
        return self.executor.run("changes", args, ChangesResult)

    def latest_change(self, path: str) -> ChangesResult:
        args = ["-s", "submitted", "-m", "1", path]
        return self.executor.run("changes", args, ChangesResult)

    def oldest_change(self, path: str) -> ChangesResult:
        args = ["-s", "submitted", "-r", "-m", "1", path]
        return self.executor.run("changes", args, ChangesResult)

    def describe(self, cl: str) -> DescribeResult:
        return self.executor.run("describe", ["-s", cl], DescribeResult)

    def filelog(self, cl: str) -> FileLogResult:
        """Latest revision of every file touched by a changelist."""
        return self.executor.run("filelog", ["-c", cl, "-m", "1", f"//...@{cl}"], FileLogResult)

    def size(self, file: str) -> SizesResult:
        return self.executor.run("sizes", ["-a", file], SizesResult)

    def sync(self, path: str | None = None) -> SyncResult:
        return self.executor.run("sync", [path] if path else [], SyncResult)

    def get_files_to_sync_at_cl(self, path: str, cl: str) -> SyncResult:
        """Preview the files a sync to cl would touch, without syncing."""
        return self.executor.run("sync", ["-n", f"{path}@{cl}"], SyncResult)

    def print_file(self, file_revision: str) -> PrintResult:
        return self.print_files([file_revision])

    def print_files(self, file_revisions: list[str]) -> PrintResult:
        if not file_revisions:
            return PrintResult()
        return self.executor.run("print", file_revisions, PrintResult)

    def client(self) -> ClientResult:
        return self.executor.run("client", ["-o"], ClientResult)

    def stream(self, path: str) -> StreamResult:
        return self.executor.run("stream", ["-o", path], StreamResult)

    def users(self) -> UsersResult:
        return self.executor.run("users", [], UsersResult)

    def info(self) -> InfoResult:
        return self.executor.run("info", [], InfoResult)

    def run(self, command: str, args: list[str], retries: int | None = None) -> CommandResult:
        """Run any other command with the untyped base result."""
        return self.executor.run(command, args, CommandResult, retries=retries)

    def update_client_spec(self) -> ClientResult:
        """Load the view of the current client, replacing any mapping held."""
        result = self.client()
        self.client_view.clear()
        self.client_view.add(result.view)
        logger.info(
            "Loaded client %s with %d view lines",
            result.client or "(unnamed)",
            len(self.client_view),
        )
        return result

    def add_client_spec_view(self, views: list[str]) -> None:
        """Append view lines, ``-`` exclusions included, to the mapping."""
        self.client_view.add(views)

    def is_depot_path_under_client_spec(self, depot_path: str) -> bool:
        return self.client_view.includes(depot_path)

    def is_file_under_client_spec(self, file_revision: str) -> bool:
        return self.client_view.includes(strip_revision(file_revision))
