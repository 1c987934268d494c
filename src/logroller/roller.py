"""Rolling engine: decide, back up, clear, and enforce retention on each write.

Not thread-safe. Callers sharing one engine across threads must serialize
calls to ``write`` and the ``roll_*`` methods themselves.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from logroller.backups import (
    BackupEntry,
    BackupHistory,
    date_backup_name,
    scan_backups,
    size_backup_name,
)
from logroller.errors import RollError
from logroller.filesystem import FileSystem, LocalFileSystem
from logroller.policy import RollPolicy, backup_stamp, date_roll_due, size_roll_due
from logroller.writer import AppendOnlyWriter, LogSink

logger = logging.getLogger(__name__)


@dataclass
class RollOutcome:
    """Backups created while handling one write."""

    date_backup: Path | None = None
    size_backup: Path | None = None

    @property
    def rolled(self) -> bool:
        return self.date_backup is not None or self.size_backup is not None


class RollingLogWriter:
    """Wraps a LogSink with date- and size-based rolling.

    The log's directory is scanned once here; afterwards the two backup
    histories are only changed by this instance.
    """

    def __init__(
        self,
        sink: LogSink,
        policy: RollPolicy | None = None,
        fs: FileSystem | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.sink = sink
        self.policy = policy or RollPolicy()
        self.fs = fs or LocalFileSystem()
        self._clock = clock
        self.date_history, self.size_history = scan_backups(sink.path, self.fs)

    @property
    def log_path(self) -> Path:
        return self.sink.path

    # -- decisions -------------------------------------------------------

    def should_roll_by_date(self) -> bool:
        modified = self.sink.modification_time() if self.sink.exists() else None
        return date_roll_due(modified, self._clock(), self.policy)

    def should_roll_by_size(self) -> bool:
        size = self.sink.size() if self.sink.exists() else None
        return size_roll_due(size, self.policy)

    # -- execution -------------------------------------------------------

    def roll_by_date(self) -> Path:
        """Back up the log under the date of the period that just ended."""
        stamp = backup_stamp(self._clock(), self.policy.rolling_interval)
        destination = self.log_path.parent / date_backup_name(stamp, self.log_path.name)
        self._backup(destination, self.date_history)
        logger.info("Rolled %s by date to %s", self.log_path, destination.name)
        return destination

    def roll_by_size(self) -> Path:
        """Back up the log under the lowest free ``<name>.<N>``."""
        destination = self._next_size_backup()
        self._backup(destination, self.size_history)
        logger.info("Rolled %s by size to %s", self.log_path, destination.name)
        return destination

    def _next_size_backup(self) -> Path:
        # Unbounded probe; retention keeps the occupied range short.
        for index in itertools.count(1):
            candidate = self.log_path.parent / size_backup_name(self.log_path.name, index)
            if not self.fs.exists(candidate):
                break
        return candidate

    def _backup(self, destination: Path, history: BackupHistory) -> None:
        try:
            self.fs.copy_file(self.log_path, destination, overwrite=True)
        except OSError as exc:
            raise RollError(self.log_path, destination, str(exc)) from exc
        try:
            self.sink.clear()
        except OSError as exc:
            # The log keeps this content and the next roll copies it again.
            try:
                self.fs.delete_file(destination)
            except OSError as cleanup_exc:
                logger.warning("Could not remove unused backup %s: %s", destination, cleanup_exc)
            raise RollError(self.log_path, destination, f"clearing log failed: {exc}") from exc
        history.push(BackupEntry(destination))
        self._evict(history)

    def _evict(self, history: BackupHistory) -> None:
        if len(history) <= self.policy.max_log_backups:
            return
        oldest = history.pop_oldest()
        try:
            self.fs.delete_file(oldest.path)
        except OSError as exc:
            logger.warning("Could not delete old backup %s: %s", oldest.path, exc)
        else:
            logger.debug("Deleted old backup %s", oldest.path)

    # -- write path ------------------------------------------------------

    def write(self, message: str) -> RollOutcome:
        """Roll as the policy requires, then append message.

        Raises RollError if a required backup cannot be made; the message is
        not written in that case.
        """
        outcome = RollOutcome()
        if self.should_roll_by_date():
            outcome.date_backup = self.roll_by_date()
        # Re-read after a possible date roll cleared the file.
        if self.should_roll_by_size():
            outcome.size_backup = self.roll_by_size()
        self.sink.write(message)
        return outcome


def open_rolling_log(
    path: Path | str,
    policy: RollPolicy | None = None,
    fs: FileSystem | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> RollingLogWriter:
    """Build a RollingLogWriter around an AppendOnlyWriter for path."""
    return RollingLogWriter(AppendOnlyWriter(Path(path)), policy=policy, fs=fs, clock=clock)
