from __future__ import annotations

import pytest

SESSIONS = (
    "dev: 2 windows (created Mon Oct 19 10:00:00 2026) (attached)\n"
    "ops: 1 windows (created Mon Oct 19 10:05:00 2026)\n"
)


def _script_dev(fake_tmux) -> None:
    fake_tmux.on("list-sessions", stdout=SESSIONS)
    fake_tmux.on(
        "list-windows", "-t", "dev",
        stdout=(
            "1: editor* (3 panes) [80x24] [layout b25d,80x24,0,0,1] @1 (active)\n"
            "2: logs- (1 panes) [80x24] [layout b25e,80x24,0,0,4] @2\n"
        ),
    )
    fake_tmux.on(
        "list-panes", "-t", "dev:editor",
        stdout=(
            "1: [80x8] [history 0/2000, 0 bytes] %1 (active)\n"
            "2: [80x7] [history 0/2000, 0 bytes] %2\n"
            "3: [80x7] [history 0/2000, 0 bytes] %3\n"
        ),
    )
    fake_tmux.on("list-panes", "-t", "dev:logs", stdout="1: [80x24] [history 0/2000, 0 bytes] %4 (active)\n")


def test_capture_builds_hierarchy(fake_tmux, client) -> None:
    from pmux.capture import capture

    _script_dev(fake_tmux)
    fake_tmux.on("list-windows", "-t", "ops", stdout="1: shell* (1 panes) [80x24] [layout x] @5 (active)\n")
    fake_tmux.on("list-panes", "-t", "ops:shell", stdout="1: [80x24] [history 0/2000, 0 bytes] %6 (active)\n")

    result = capture(client)

    assert result.complete
    cfg = result.config
    assert [s.name for s in cfg.sessions] == ["dev", "ops"]
    assert [w.name for w in cfg.sessions[0].windows] == ["editor", "logs"]
    assert [p.index for p in cfg.sessions[0].windows[0].panes] == ["1", "2", "3"]
    assert [p.index for p in cfg.sessions[0].windows[1].panes] == ["1"]
    assert cfg.sessions[1].windows[0].name == "shell"


def test_capture_addresses_windows_by_stripped_name(fake_tmux, client) -> None:
    from pmux.capture import capture

    _script_dev(fake_tmux)
    fake_tmux.on("list-windows", "-t", "ops", stdout="")

    capture(client)

    targets = [c[2] for c in fake_tmux.commands("list-panes")]
    assert targets == ["dev:editor", "dev:logs"]


def test_capture_is_read_only(fake_tmux, client) -> None:
    from pmux.capture import capture

    _script_dev(fake_tmux)
    capture(client)

    verbs = {c[0] for c in fake_tmux.calls}
    assert verbs == {"list-sessions", "list-windows", "list-panes"}


def test_capture_session_without_windows(fake_tmux, client) -> None:
    from pmux.capture import capture

    fake_tmux.on("list-sessions", stdout="solo: 0 windows (created Mon Oct 19 10:00:00 2026)\n")
    fake_tmux.on("list-windows", "-t", "solo", stdout="")

    result = capture(client)

    assert result.complete
    assert len(result.config.sessions) == 1
    assert result.config.sessions[0].name == "solo"
    assert result.config.sessions[0].windows == []


def test_capture_failed_window_query_is_reported(fake_tmux, client) -> None:
    from pmux.capture import capture

    _script_dev(fake_tmux)
    fake_tmux.fail("list-windows", "-t", "ops", stderr="can't find session: ops")

    result = capture(client)

    assert not result.complete
    assert result.config.sessions[1].name == "ops"
    assert result.config.sessions[1].windows == []
    assert len(result.warnings) == 1
    assert result.warnings[0].target == "ops"
    assert "can't find session" in result.warnings[0].message


def test_capture_failed_pane_query_keeps_going(fake_tmux, client) -> None:
    from pmux.capture import capture

    _script_dev(fake_tmux)
    fake_tmux.fail("list-panes", "-t", "dev:editor", stderr="can't find window: editor")
    fake_tmux.on("list-windows", "-t", "ops", stdout="")

    result = capture(client)

    editor, logs = result.config.sessions[0].windows
    assert editor.panes == []
    assert [p.index for p in logs.panes] == ["1"]
    assert [w.target for w in result.warnings] == ["dev:editor"]


def test_capture_without_server_raises(fake_tmux, client) -> None:
    from pmux.capture import capture
    from pmux.errors import TmuxCommandError

    fake_tmux.fail("list-sessions", stderr="no server running on /tmp/tmux-0/default")

    with pytest.raises(TmuxCommandError):
        capture(client)


def test_capture_malformed_listing_raises(fake_tmux, client) -> None:
    from pmux.capture import capture
    from pmux.errors import ParseError

    fake_tmux.on("list-sessions", stdout="dev: 1 windows\n")
    fake_tmux.on("list-windows", "-t", "dev", stdout="garbage without separator\n")

    with pytest.raises(ParseError):
        capture(client)


def test_capture_then_persist_roundtrip(fake_tmux, client, tmp_path) -> None:
    from pmux.capture import capture
    from pmux.snapshot import load_snapshot, save_snapshot

    _script_dev(fake_tmux)
    fake_tmux.on("list-windows", "-t", "ops", stdout="")

    cfg = capture(client).config
    path = tmp_path / "snap.json"
    save_snapshot(path, cfg)

    assert load_snapshot(path) == cfg


def test_capture_zoomed_and_marked_windows(fake_tmux, client) -> None:
    from pmux.capture import capture

    fake_tmux.on("list-sessions", stdout="dev: 2 windows (created Mon Oct 19 10:00:00 2026)\n")
    fake_tmux.on(
        "list-windows", "-t", "dev",
        stdout=(
            "1: editor*Z (2 panes) [80x24] [layout b25d,80x24,0,0,1] @1 (active)\n"
            "2: logs-M (1 panes) [80x24] [layout b25e,80x24,0,0,4] @2\n"
        ),
    )
    fake_tmux.on("list-panes", "-t", "dev:editor", stdout="1: [80x24] %1 (active)\n2: [80x24] %2\n")
    fake_tmux.on("list-panes", "-t", "dev:logs", stdout="1: [80x24] %3 (active)\n")

    result = capture(client)

    assert result.complete
    assert [w.name for w in result.config.sessions[0].windows] == ["editor", "logs"]
    assert [c[2] for c in fake_tmux.commands("list-panes")] == ["dev:editor", "dev:logs"]


def test_capture_with_paths(fake_tmux, client) -> None:
    from pmux.capture import PANE_PATH_FORMAT, capture

    _script_dev(fake_tmux)
    fake_tmux.on("list-windows", "-t", "ops", stdout="")
    fake_tmux.on("list-panes", "-t", "dev:editor", "-F", PANE_PATH_FORMAT, stdout="/srv/app\n/srv/app/src\n/tmp\n")
    fake_tmux.on("list-panes", "-t", "dev:logs", "-F", PANE_PATH_FORMAT, stdout="/var/log\n")

    result = capture(client, with_paths=True)

    assert result.complete
    editor, logs = result.config.sessions[0].windows
    assert [p.path for p in editor.panes] == ["/srv/app", "/srv/app/src", "/tmp"]
    assert [p.path for p in logs.panes] == ["/var/log"]


def test_capture_without_paths_records_none(fake_tmux, client) -> None:
    from pmux.capture import capture

    _script_dev(fake_tmux)

    result = capture(client)

    assert all(p.path is None for w in result.config.sessions[0].windows for p in w.panes)
    assert not any("-F" in c for c in fake_tmux.commands("list-panes"))


def test_capture_paths_pane_count_changed(fake_tmux, client) -> None:
    from pmux.capture import PANE_PATH_FORMAT, capture

    _script_dev(fake_tmux)
    fake_tmux.on("list-windows", "-t", "ops", stdout="")
    fake_tmux.on("list-panes", "-t", "dev:editor", "-F", PANE_PATH_FORMAT, stdout="/srv/app\n")
    fake_tmux.on("list-panes", "-t", "dev:logs", "-F", PANE_PATH_FORMAT, stdout="/var/log\n")

    result = capture(client, with_paths=True)

    editor, logs = result.config.sessions[0].windows
    assert [p.index for p in editor.panes] == ["1", "2", "3"]
    assert all(p.path is None for p in editor.panes)
    assert [w.target for w in result.warnings] == ["dev:editor"]
