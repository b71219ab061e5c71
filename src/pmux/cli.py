from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.tree import Tree

from .capture import capture
from .errors import PmuxError
from .model import Config
from .paths import resolve_snapshot_path
from .restore import EntityState, RestorePolicy, Restorer
from .snapshot import load_previous, load_snapshot, save_snapshot
from .sync import sync_state
from .tmux import TmuxClient

app = typer.Typer(no_args_is_help=True, help="pmux — save and restore tmux sessions")


@app.callback()
def _setup(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every tmux command")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _fail(err: Exception) -> NoReturn:
    print(f"[red]error:[/red] {escape(str(err))}", file=sys.stderr)
    raise typer.Exit(1)


def _counts(config: Config) -> str:
    windows = sum(len(s.windows) for s in config.sessions)
    panes = sum(1 for _s, _w, p in config.walk() if p is not None)
    return f"{len(config.sessions)} sessions, {windows} windows, {panes} panes"


@app.command("save")
def save(
    file: Path | None = typer.Option(None, "--file", "-f", help="Snapshot file (default: $PMUX_SNAPSHOT or ~/.pmux.config)"),
    tmux_socket: Path | None = typer.Option(None, "--tmux-socket", help="Path to tmux server socket"),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of saving a partial capture"),
    with_paths: bool = typer.Option(False, "--with-paths", help="Also record each pane's working directory"),
) -> None:
    """Capture the running tmux sessions and overwrite the snapshot."""

    path = resolve_snapshot_path(file)
    client = TmuxClient(socket_path=tmux_socket)
    try:
        result = capture(client, with_paths=with_paths)
        if strict and not result.complete:
            raise PmuxError(
                "partial capture: " + ", ".join(w.target for w in result.warnings)
            )
        config = sync_state(load_previous(path), result.config)
        save_snapshot(path, config)
    except PmuxError as e:
        _fail(e)

    print(f"saved {_counts(config)} to {escape(str(path))}")
    if not result.complete:
        print(f"[yellow]{len(result.warnings)} node(s) captured without children[/yellow]")


@app.command("restore")
def restore(
    file: Path | None = typer.Option(None, "--file", "-f", help="Snapshot file (default: $PMUX_SNAPSHOT or ~/.pmux.config)"),
    tmux_socket: Path | None = typer.Option(None, "--tmux-socket", help="Path to tmux server socket"),
    keep_default_window: bool = typer.Option(
        False, "--keep-default-window", help="Keep the window tmux creates with each session"
    ),
    keep_default_pane: bool = typer.Option(
        False, "--keep-default-pane", help="Keep the pane tmux creates with each window"
    ),
    no_collision_check: bool = typer.Option(
        False, "--no-collision-check", help="Do not check for running sessions with the same name"
    ),
) -> None:
    """Recreate the sessions recorded in the snapshot."""

    path = resolve_snapshot_path(file)
    policy = RestorePolicy(
        remove_default_window=not keep_default_window,
        remove_default_pane=not keep_default_pane,
        check_collisions=not no_collision_check,
    )
    restorer = Restorer(TmuxClient(socket_path=tmux_socket), policy)
    try:
        config = load_snapshot(path)
        report = restorer.restore(config)
    except PmuxError as e:
        _fail(e)

    print(f"restored {report.count(EntityState.CREATED)} entities ({_counts(config)}) from {escape(str(path))}")


@app.command("show")
def show(
    file: Path | None = typer.Option(None, "--file", "-f", help="Snapshot file (default: $PMUX_SNAPSHOT or ~/.pmux.config)"),
) -> None:
    """Print the snapshot as a tree."""

    path = resolve_snapshot_path(file)
    try:
        config = load_snapshot(path)
    except PmuxError as e:
        _fail(e)

    tree = Tree(escape(str(path)))
    for session in config.sessions:
        s_node = tree.add(f"[bold]{escape(session.name)}[/bold]")
        for window in session.windows:
            w_node = s_node.add(escape(window.name))
            for pane in window.panes:
                w_node.add(f"pane {escape(pane.index)}")
    print(tree)


@app.command("version")
def version() -> None:
    from . import __version__

    print(__version__)


def main() -> None:
    app()
