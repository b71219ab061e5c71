from __future__ import annotations

import subprocess
from typing import Any

import pytest


class FakeTmux:
    """Scripted stand-in for `subprocess.run` that answers tmux commands.

    Unscripted commands succeed with empty output, except `has-session`,
    which fails the way tmux does for an unknown session.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, ...], tuple[int, str, str]] = {}
        self.queued: dict[tuple[str, ...], list[tuple[int, str, str]]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.argvs: list[list[str]] = []

    def on(self, *args: str, stdout: str = "", returncode: int = 0, stderr: str = "") -> None:
        self.responses[args] = (returncode, stdout, stderr)

    def fail(self, *args: str, stderr: str = "error") -> None:
        self.on(*args, returncode=1, stderr=stderr)

    def queue(self, *args: str, results: list[tuple[int, str, str]]) -> None:
        """Answer successive calls of the same command with `results`, in order."""

        self.queued[args] = list(results)

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.argvs.append(list(cmd))
        args = tuple(cmd[1:])
        if args[:1] == ("-S",):
            args = args[2:]
        self.calls.append(args)

        if self.queued.get(args):
            returncode, stdout, stderr = self.queued[args].pop(0)
        elif args in self.responses:
            returncode, stdout, stderr = self.responses[args]
        elif args[:1] == ("has-session",):
            returncode, stdout, stderr = 1, "", f"can't find session: {args[-1]}\n"
        else:
            returncode, stdout, stderr = 0, "", ""
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    def commands(self, verb: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[:1] == (verb,)]


@pytest.fixture
def fake_tmux() -> FakeTmux:
    return FakeTmux()


@pytest.fixture
def client(fake_tmux: FakeTmux):
    from pmux.tmux import TmuxClient

    return TmuxClient(runner=fake_tmux)
