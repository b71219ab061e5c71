from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .restore import RestoreReport


class PmuxError(Exception):
    """Base exception for everything pmux reports to the user."""


class TmuxCommandError(PmuxError):
    """tmux could not be executed or exited nonzero."""

    def __init__(self, argv: Sequence[str], returncode: int | None, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr.strip()
        cmd = " ".join(self.argv)
        if returncode is None:
            msg = f"could not run `{cmd}`"
        else:
            msg = f"`{cmd}` exited with status {returncode}"
        if self.stderr:
            msg += f": {self.stderr}"
        super().__init__(msg)


class ParseError(PmuxError):
    """A tmux listing line does not have the expected shape."""

    def __init__(self, kind: str, line: str, reason: str) -> None:
        self.kind = kind
        self.line = line
        self.reason = reason
        super().__init__(f"cannot parse {kind} line {line!r}: {reason}")


class SnapshotError(PmuxError):
    """The snapshot file cannot be read, written or decoded."""


class RestoreError(PmuxError):
    """Recreating a snapshot failed part way through."""

    def __init__(self, message: str, report: "RestoreReport | None" = None) -> None:
        self.report = report
        super().__init__(message)


class SessionCollisionError(RestoreError):
    """A session with the snapshot's name is already running."""

    def __init__(self, name: str, report: "RestoreReport | None" = None) -> None:
        self.name = name
        super().__init__(f"session {name!r} already exists", report)
