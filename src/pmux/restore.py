from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from .errors import RestoreError, SessionCollisionError, TmuxCommandError
from .model import Config, Pane, Session, Window
from .tmux import TmuxClient, window_target

logger = logging.getLogger(__name__)


class EntityState(enum.Enum):
    PENDING = "pending"
    CREATING = "creating"
    CREATED = "created"
    FAILED = "failed"


@dataclass
class EntityRecord:
    kind: str  # session|window|pane
    target: str
    state: EntityState = EntityState.PENDING


@dataclass
class RestoreReport:
    """Progress of every declared entity, in the order they are created."""

    records: list[EntityRecord] = field(default_factory=list)

    @staticmethod
    def for_config(config: Config) -> "RestoreReport":
        report = RestoreReport()
        for s in config.sessions:
            report.records.append(EntityRecord("session", s.name))
            for w in s.windows:
                target = window_target(s.name, w.name)
                report.records.append(EntityRecord("window", target))
                for p in w.panes:
                    report.records.append(EntityRecord("pane", f"{target}.{p.index}"))
        return report

    def claim(self, kind: str, target: str) -> EntityRecord:
        # Duplicate window names share a target; take the first one not yet started.
        for rec in self.records:
            if rec.kind == kind and rec.target == target and rec.state is EntityState.PENDING:
                return rec
        rec = EntityRecord(kind, target)
        self.records.append(rec)
        return rec

    def state_of(self, target: str) -> EntityState | None:
        for rec in self.records:
            if rec.target == target:
                return rec.state
        return None

    def count(self, state: EntityState) -> int:
        return sum(1 for rec in self.records if rec.state is state)


@dataclass(frozen=True)
class RestorePolicy:
    """What to do about the entities tmux creates on its own.

    `new-session` always brings a default window and `new-window` a default
    pane. With the removal flags set, those are killed once the declared
    children exist, so the result holds exactly what the snapshot declares.
    """

    remove_default_window: bool = True
    remove_default_pane: bool = True
    check_collisions: bool = True


class Restorer:
    def __init__(self, client: TmuxClient, policy: RestorePolicy | None = None) -> None:
        self.client = client
        self.policy = policy or RestorePolicy()

    def restore(self, config: Config) -> RestoreReport:
        """Recreate every session in `config`, top-down.

        The first failure stops everything and raises RestoreError carrying
        the report. Sessions created before the failure are left running.
        """

        report = RestoreReport.for_config(config)
        for session in config.sessions:
            self._restore_session(session, report)
        return report

    def _session_exists(self, name: str) -> bool:
        try:
            self.client.run("has-session", "-t", f"={name}")
        except TmuxCommandError:
            return False
        return True

    def _restore_session(self, session: Session, report: RestoreReport) -> None:
        rec = report.claim("session", session.name)
        rec.state = EntityState.CREATING

        if self.policy.check_collisions and self._session_exists(session.name):
            rec.state = EntityState.FAILED
            raise SessionCollisionError(session.name, report)

        try:
            default_window = self.client.run(
                "new-session", "-d", "-s", session.name, "-P", "-F", "#{window_id}"
            )
        except TmuxCommandError as e:
            rec.state = EntityState.FAILED
            raise RestoreError(f"cannot create session {session.name!r}: {e}", report) from e
        rec.state = EntityState.CREATED
        logger.info("created session %s", session.name)

        for window in session.windows:
            self._restore_window(session.name, window, report)

        if not self.policy.remove_default_window:
            return
        if not session.windows:
            # Killing the only window would end the session.
            logger.debug("keeping default window of %s: no declared windows", session.name)
            return
        try:
            self.client.run("kill-window", "-t", default_window)
        except TmuxCommandError as e:
            raise RestoreError(f"cannot remove default window of {session.name!r}: {e}", report) from e

    @staticmethod
    def _split_args(window_id: str, pane: Pane) -> list[str]:
        args = ["split-window", "-d", "-t", window_id]
        if pane.path:
            args.extend(["-c", pane.path])
        return args

    def _restore_window(self, session_name: str, window: Window, report: RestoreReport) -> None:
        target = window_target(session_name, window.name)
        rec = report.claim("window", target)
        rec.state = EntityState.CREATING

        # The session's default window may carry the same name, so the new
        # window is addressed by id from here on.
        try:
            out = self.client.run(
                "new-window", "-d", "-t", f"{session_name}:", "-n", window.name,
                "-P", "-F", "#{window_id} #{pane_id}",
            )
        except TmuxCommandError as e:
            rec.state = EntityState.FAILED
            raise RestoreError(f"cannot create window {target!r}: {e}", report) from e
        ids = out.split()
        if len(ids) != 2:
            rec.state = EntityState.FAILED
            raise RestoreError(f"unexpected new-window output for {target!r}: {out!r}", report)
        window_id, default_pane = ids
        rec.state = EntityState.CREATED
        logger.info("created window %s", target)

        for pane in window.panes:
            pane_rec = report.claim("pane", f"{target}.{pane.index}")
            pane_rec.state = EntityState.CREATING
            try:
                self.client.run(*self._split_args(window_id, pane))
            except TmuxCommandError as e:
                pane_rec.state = EntityState.FAILED
                raise RestoreError(f"cannot split pane {pane.index} in {target!r}: {e}", report) from e
            pane_rec.state = EntityState.CREATED

        if not self.policy.remove_default_pane or not window.panes:
            return
        try:
            self.client.run("kill-pane", "-t", default_pane)
        except TmuxCommandError as e:
            raise RestoreError(f"cannot remove default pane of {target!r}: {e}", report) from e
