"""Depot path helpers and client view mapping."""

import re
import shlex
from collections.abc import Iterable
from dataclasses import dataclass, field

# p4 wildcards on the depot side of a view line
_WILDCARDS = re.compile(r"(\.\.\.|\*|%%\d)")


def is_depot_path_valid(depot_path: str) -> bool:
    """Check that a path names a depot subtree such as ``//depot/main/...``."""
    return len(depot_path) > 5 and depot_path.startswith("//") and depot_path.endswith("/...")


def is_file_under_depot_path(file_revision: str, depot_path: str) -> bool:
    """Check whether a depot file, with or without a revision, is below depot_path.

    Args:
        file_revision: File such as ``//depot/main/a.txt#3``
        depot_path: Subtree such as ``//depot/main/...``
    """
    prefix = depot_path[: -len("...")] if depot_path.endswith("...") else depot_path
    return file_revision.startswith(prefix)


def strip_revision(file_revision: str) -> str:
    """Drop a ``#rev`` or ``@change`` specifier from a depot file."""
    return re.split(r"[#@]", file_revision, maxsplit=1)[0]


def _compile(depot_side: str) -> re.Pattern[str]:
    parts = []
    for part in _WILDCARDS.split(depot_side):
        if part == "...":
            parts.append(".*")
        elif part == "*" or part.startswith("%%"):
            parts.append("[^/]*")
        else:
            parts.append(re.escape(part))
    return re.compile("".join(parts))


@dataclass(frozen=True)
class ViewEntry:
    """One line of a client view."""

    depot_path: str
    client_path: str = ""
    excluded: bool = False
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", _compile(self.depot_path))

    @classmethod
    def parse(cls, line: str) -> "ViewEntry":
        """Parse a view line such as ``-//depot/main/tmp/... //ws/main/tmp/...``.

        Raises:
            ValueError: If the line is empty or badly quoted
        """
        tokens = shlex.split(line)
        if not tokens:
            raise ValueError(f"Empty client view line: {line!r}")
        depot_path = tokens[0]
        excluded = depot_path.startswith("-")
        if depot_path.startswith(("-", "+")):
            depot_path = depot_path[1:]
        client_path = tokens[1] if len(tokens) > 1 else ""
        return cls(depot_path=depot_path, client_path=client_path, excluded=excluded)

    def matches(self, depot_path: str) -> bool:
        return self.pattern.fullmatch(depot_path) is not None


class ClientView:
    """Ordered client view lines. Later lines override earlier ones.

    Example:
        >>> view = ClientView(["//depot/main/... //ws/...", "-//depot/main/tmp/... //ws/tmp/..."])
        >>> view.includes("//depot/main/tmp/a.txt")
        False
    """

    def __init__(self, lines: Iterable[str] = ()) -> None:
        self.entries: list[ViewEntry] = []
        self.add(lines)

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, lines: Iterable[str]) -> None:
        self.entries.extend(ViewEntry.parse(line) for line in lines)

    def clear(self) -> None:
        self.entries.clear()

    def includes(self, depot_path: str) -> bool:
        """Return whether the last view line matching depot_path maps it.

        An empty view maps nothing.
        """
        for entry in reversed(self.entries):
            if entry.matches(depot_path):
                return not entry.excluded
        return False
