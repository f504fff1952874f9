"""Tests for command result shapes."""

from p4relay.models import E_FAILED, E_FATAL, E_WARN, CommandResult, P4Message
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


class TestCommandResult:
    """Test the shared error contract."""

    def test_starts_clean(self) -> None:
        result = CommandResult()

        assert not result.is_error
        assert not result.is_fatal
        assert result.error_text == ""

    def test_warning_is_not_error(self) -> None:
        result = CommandResult()
        result.handle_error(P4Message(E_WARN, 17, "no such file(s)."))

        assert not result.is_error
        assert result.warnings == ["no such file(s)."]

    def test_worst_severity_accumulates(self) -> None:
        result = CommandResult()
        result.handle_error(P4Message(E_FAILED, 17, "first"))
        result.handle_error(P4Message(E_WARN, 17, "second"))
        result.handle_error(P4Message(E_FATAL, 38, "third"))

        assert result.is_error
        assert result.is_fatal
        assert result.error_text == "first\nthird"


class TestVariants:
    """Test record shaping per command."""

    def test_changes(self) -> None:
        result = ChangesResult()
        result.output_stat({"change": "101", "user": "alice", "time": "1700000000", "desc": "Fix build\n"})

        change = result.changes[0]
        assert change.number == "101"
        assert change.user == "alice"
        assert change.timestamp == 1700000000
        assert change.description == "Fix build\n"

    def test_describe(self) -> None:
        result = DescribeResult()
        result.output_stat(
            {
                "change": "101",
                "user": "alice",
                "time": "1700000000",
                "desc": "Add files",
                "depotFile0": "//depot/a.txt",
                "rev0": "1",
                "action0": "add",
                "type0": "text",
                "depotFile1": "//depot/b.bin",
                "rev1": "3",
                "action1": "edit",
                "type1": "binary",
            }
        )

        assert result.change == "101"
        assert [f.depot_file for f in result.files] == ["//depot/a.txt", "//depot/b.bin"]
        assert result.files[1].action == "edit"
        assert result.files[1].change == "101"

    def test_filelog(self) -> None:
        result = FileLogResult()
        result.output_stat(
            {"depotFile": "//depot/a.txt", "rev0": "2", "change0": "101", "action0": "edit", "type0": "text", "fileSize0": "12"}
        )

        assert result.files[0].revision == "2"
        assert result.files[0].size == 12

    def test_sizes_total(self) -> None:
        result = SizesResult()
        result.output_stat({"depotFile": "//depot/a.txt", "fileSize": "10"})
        result.output_stat({"depotFile": "//depot/a.txt", "fileSize": "32"})

        assert result.total_size == 42

    def test_sync(self) -> None:
        result = SyncResult()
        result.output_stat({"depotFile": "//depot/a.txt", "rev": "2", "action": "updated", "fileSize": "5"})

        assert result.files[0].action == "updated"

    def test_print_splits_files(self) -> None:
        result = PrintResult()
        result.output_text(b"orphan chunk")
        result.output_stat({"depotFile": "//depot/a.txt", "rev": "1", "type": "text"})
        result.output_text(b"aaa")
        result.output_stat({"depotFile": "//depot/b.txt", "rev": "2", "type": "text"})
        result.output_text(b"bbb")
        result.output_text(b"")

        assert [bytes(f.contents) for f in result.files] == [b"aaa", b"bbb"]

    def test_users(self) -> None:
        result = UsersResult()
        result.output_stat({"User": "alice", "Email": "alice@example.com"})
        result.output_stat({"User": "bob"})

        assert result.users == {"alice": "alice@example.com", "bob": ""}

    def test_info(self) -> None:
        result = InfoResult()
        result.output_stat({"userName": "alice", "serverVersion": "P4D/LINUX26X86_64/2023.1"})

        assert result.server_version == "P4D/LINUX26X86_64/2023.1"
        assert result.fields["userName"] == "alice"

    def test_client_view(self) -> None:
        result = ClientResult()
        result.output_stat(
            {"Client": "alice-ws", "Root": "/ws", "View0": "//depot/... //alice-ws/...", "View1": "-//depot/tmp/... //alice-ws/tmp/..."}
        )

        assert result.client == "alice-ws"
        assert result.root == "/ws"
        assert len(result.view) == 2

    def test_stream_paths(self) -> None:
        result = StreamResult()
        result.output_stat({"Stream": "//stream/main", "Paths0": "share ..."})

        assert result.stream == "//stream/main"
        assert result.paths == ["share ..."]

    def test_empty_form_output(self) -> None:
        assert ClientResult().client == ""
        assert StreamResult().paths == []

    def test_ticket_expiration(self) -> None:
        result = TestResult()
        assert result.ticket_expiration is None

        result.output_stat({"User": "alice", "TicketExpiration": "43200"})
        assert result.ticket_expiration == 43200
