from __future__ import annotations

import re
from typing import Callable, Iterable

from .errors import ParseError

# tmux 3.x default listing formats, for reference:
#   list-sessions:  "dev: 2 windows (created Mon Oct 19 10:00:00 2026) (attached)"
#   list-windows:   "1: bash* (2 panes) [80x24] [layout b25d,80x24,0,0,1] @1 (active)"
#   list-panes:     "1: [80x24] [history 0/2000, 0 bytes] %1 (active)"

# #{window_raw_flags} as tmux appends them to the name, in tmux's order:
# activity (#), bell (!), silence (~), current (*), last (-), marked (M), zoomed (Z).
WINDOW_FLAGS = re.compile(r"#?!?~?[*-]?M?Z?$")


def strip_window_markers(name: str) -> str:
    """Drop the trailing window flags from a listed window name.

    A name that itself ends in a flag character (e.g. "RAM") cannot be told
    apart from a flagged one and loses that character.
    """

    match = WINDOW_FLAGS.search(name)
    return name[: match.start()] if match else name


def _split_leading(kind: str, line: str) -> tuple[str, str]:
    head, sep, rest = line.partition(":")
    if not sep:
        raise ParseError(kind, line, "missing ':' separator")
    head = head.strip()
    if not head:
        raise ParseError(kind, line, "empty leading field")
    return head, rest


def parse_session_line(line: str) -> str:
    """Return the session name from one `list-sessions` line."""

    name, _rest = _split_leading("session", line)
    return name


def parse_window_line(line: str) -> str:
    """Return the flag-stripped window name from one `list-windows` line.

    The name is the first whitespace-delimited token after the index
    separator, so names containing spaces are truncated at the first space.
    """

    _index, rest = _split_leading("window", line)
    tokens = rest.split(None, 1)
    if not tokens:
        raise ParseError("window", line, "no name after separator")
    name = strip_window_markers(tokens[0])
    if not name:
        raise ParseError("window", line, "name consists only of flags")
    return name


def parse_pane_line(line: str) -> str:
    """Return the pane index from one `list-panes` line."""

    index, _rest = _split_leading("pane", line)
    if not index.isdigit():
        raise ParseError("pane", line, f"index {index!r} is not numeric")
    return index


def _parse_lines(lines: Iterable[str], parse_line: Callable[[str], str]) -> list[str]:
    return [parse_line(line) for line in lines if line.strip()]


def parse_sessions(lines: Iterable[str]) -> list[str]:
    return _parse_lines(lines, parse_session_line)


def parse_windows(lines: Iterable[str]) -> list[str]:
    return _parse_lines(lines, parse_window_line)


def parse_panes(lines: Iterable[str]) -> list[str]:
    return _parse_lines(lines, parse_pane_line)
