from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from .errors import SnapshotError


def _require(data: Any, key: str, kind: type, where: str) -> Any:
    if not isinstance(data, dict):
        raise SnapshotError(f"{where}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise SnapshotError(f"{where}: missing key {key!r}")
    value = data[key]
    if not isinstance(value, kind):
        raise SnapshotError(f"{where}: {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _children(data: dict[str, Any], key: str, where: str) -> list[Any]:
    if key not in data:
        raise SnapshotError(f"{where}: missing key {key!r}")
    # Older snapshots wrote null for a node whose sub-query failed.
    value = data[key]
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotError(f"{where}: {key!r} must be a list, got {type(value).__name__}")
    return value


@dataclass
class Pane:
    index: str
    # Working directory, only recorded by `save --with-paths`.
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"PaneIndex": self.index}
        if self.path is not None:
            d["PanePath"] = self.path
        return d

    @staticmethod
    def from_dict(data: Any, where: str = "pane") -> "Pane":
        index = _require(data, "PaneIndex", str, where)
        path = data.get("PanePath")
        if path is not None and not isinstance(path, str):
            raise SnapshotError(f"{where}: 'PanePath' must be str, got {type(path).__name__}")
        return Pane(index=index, path=path)


@dataclass
class Window:
    name: str
    panes: list[Pane] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"WindowName": self.name, "WindowPanes": [p.to_dict() for p in self.panes]}

    @staticmethod
    def from_dict(data: Any, where: str = "window") -> "Window":
        name = _require(data, "WindowName", str, where)
        where = f"{where} {name!r}"
        panes = [
            Pane.from_dict(p, f"{where} pane #{i}")
            for i, p in enumerate(_children(data, "WindowPanes", where))
        ]
        return Window(name=name, panes=panes)


@dataclass
class Session:
    name: str
    windows: list[Window] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"SessionName": self.name, "SessionWindows": [w.to_dict() for w in self.windows]}

    @staticmethod
    def from_dict(data: Any, where: str = "session") -> "Session":
        name = _require(data, "SessionName", str, where)
        where = f"session {name!r}"
        windows = [
            Window.from_dict(w, f"{where} window #{i}")
            for i, w in enumerate(_children(data, "SessionWindows", where))
        ]
        return Session(name=name, windows=windows)


@dataclass
class Config:
    """The whole captured hierarchy: sessions, their windows, their panes."""

    sessions: list[Session] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"Sessions": [s.to_dict() for s in self.sessions]}

    @staticmethod
    def from_dict(data: Any) -> "Config":
        if not isinstance(data, dict):
            raise SnapshotError(f"snapshot: expected an object, got {type(data).__name__}")
        sessions = [
            Session.from_dict(s, f"session #{i}")
            for i, s in enumerate(_children(data, "Sessions", "snapshot"))
        ]
        return Config(sessions=sessions)

    def walk(self) -> Iterator[tuple[Session, Window | None, Pane | None]]:
        """Yield every node top-down as (session, window, pane) triples."""

        for s in self.sessions:
            yield s, None, None
            for w in s.windows:
                yield s, w, None
                for p in w.panes:
                    yield s, w, p
