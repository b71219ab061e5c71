from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable

from .errors import TmuxCommandError

logger = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def window_target(session: str, window: str) -> str:
    """Build a `session:window` target for tmux's `-t` flag."""

    return f"{session}:{window}"


class TmuxClient:
    """Run tmux commands one at a time and hand back their output.

    Commands run synchronously with no deadline. `runner` has the signature of
    `subprocess.run` so tests can swap in a scripted fake.
    """

    def __init__(self, *, socket_path: Path | None = None, runner: Runner = subprocess.run) -> None:
        self.socket_path = socket_path
        self._runner = runner

    def argv(self, *args: str) -> list[str]:
        cmd = ["tmux"]
        if self.socket_path is not None:
            cmd.extend(["-S", str(self.socket_path)])
        cmd.extend(args)
        return cmd

    def run(self, *args: str) -> str:
        """Run `tmux <args>` and return stdout with surrounding whitespace trimmed.

        Raises TmuxCommandError when tmux cannot be started or exits nonzero.
        """

        cmd = self.argv(*args)
        logger.debug("running %s", " ".join(cmd))
        try:
            p = self._runner(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise TmuxCommandError(cmd, None, str(e)) from e

        if p.returncode != 0:
            raise TmuxCommandError(cmd, p.returncode, p.stderr or "")
        return (p.stdout or "").strip()

    def lines(self, *args: str) -> list[str]:
        """Run `tmux <args>` and return the non-blank output lines."""

        return [line for line in self.run(*args).splitlines() if line.strip()]
