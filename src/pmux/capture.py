from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import TmuxCommandError
from .listing import parse_panes, parse_sessions, parse_windows
from .model import Config, Pane, Session, Window
from .tmux import TmuxClient, window_target

logger = logging.getLogger(__name__)

PANE_PATH_FORMAT = "#{pane_current_path}"


@dataclass(frozen=True)
class CaptureWarning:
    """A sub-query that failed, leaving `target` incompletely recorded."""

    target: str
    message: str


@dataclass
class CaptureResult:
    config: Config
    warnings: list[CaptureWarning] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.warnings


def capture(client: TmuxClient, *, with_paths: bool = False) -> CaptureResult:
    """Read the live session/window/pane hierarchy from tmux.

    Only listing commands are issued. A failing `list-sessions` propagates
    (usually: no server running). A failing `list-windows` or `list-panes`,
    e.g. because the window was closed between two queries, leaves that node
    empty and is recorded as a warning instead.

    With `with_paths`, each window gets one more `list-panes` query for the
    panes' working directories.
    """

    result = CaptureResult(config=Config())

    for session_name in parse_sessions(client.lines("list-sessions")):
        session = Session(name=session_name)
        result.config.sessions.append(session)

        try:
            window_names = parse_windows(client.lines("list-windows", "-t", session_name))
        except TmuxCommandError as e:
            _warn(result, session_name, e)
            continue

        for window_name in window_names:
            window = Window(name=window_name)
            session.windows.append(window)

            target = window_target(session_name, window_name)
            try:
                indices = parse_panes(client.lines("list-panes", "-t", target))
            except TmuxCommandError as e:
                _warn(result, target, e)
                continue
            window.panes.extend(Pane(index=i) for i in indices)

            if with_paths:
                _capture_paths(client, result, target, window)

    return result


def _capture_paths(client: TmuxClient, result: CaptureResult, target: str, window: Window) -> None:
    try:
        paths = client.run("list-panes", "-t", target, "-F", PANE_PATH_FORMAT).splitlines()
    except TmuxCommandError as e:
        _warn(result, target, e)
        return
    if len(paths) != len(window.panes):
        logger.warning("pane count of %s changed while reading paths", target)
        result.warnings.append(CaptureWarning(target=target, message="pane count changed while reading paths"))
        return
    for pane, path in zip(window.panes, paths):
        pane.path = path or None


def _warn(result: CaptureResult, target: str, err: TmuxCommandError) -> None:
    logger.warning("partial capture of %s: %s", target, err)
    result.warnings.append(CaptureWarning(target=target, message=str(err)))
