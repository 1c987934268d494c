"""Backup naming, history bookkeeping, and the startup directory scan."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from logroller.filesystem import FileSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackupEntry:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class BackupHistory:
    """Backups of one policy, oldest first."""

    entries: list[BackupEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def push(self, entry: BackupEntry) -> None:
        self.entries.append(entry)

    def pop_oldest(self) -> BackupEntry:
        return self.entries.pop(0)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.entries]


def size_backup_pattern(log_name: str) -> re.Pattern[str]:
    """``<log_name>.<digits>`` anchored at the start; anything may follow."""
    return re.compile(re.escape(log_name) + r"\.\d+")


def date_backup_pattern(log_name: str) -> re.Pattern[str]:
    """``YYYY-MM-DD-<log_name>``, to be matched in full."""
    return re.compile(r"\d{4}-\d{2}-\d{2}-" + re.escape(log_name))


def date_backup_name(stamp: str, log_name: str) -> str:
    return f"{stamp}-{log_name}"


def size_backup_name(log_name: str, index: int) -> str:
    return f"{log_name}.{index}"


def _sort_by_mtime(fs: FileSystem, paths: list[Path]) -> list[Path]:
    mtimes: dict[Path, float] = {}
    for p in paths:
        try:
            mtimes[p] = fs.modification_time(p)
        except OSError:
            # Vanished between listing and stat; sorts first.
            mtimes[p] = float("-inf")
    # sorted() is stable, so equal mtimes keep listing order.
    return sorted(paths, key=lambda p: mtimes[p])


def scan_backups(
    log_path: Path, fs: FileSystem
) -> tuple[BackupHistory, BackupHistory]:
    """Classify the log's sibling files into (date history, size history)."""
    date_history = BackupHistory()
    size_history = BackupHistory()

    parent = log_path.parent
    try:
        if not fs.is_dir(parent):
            return date_history, size_history
        entries = fs.list_dir(parent)
    except OSError as exc:
        logger.warning("Could not scan %s for backups, starting empty: %s", parent, exc)
        return date_history, size_history

    size_re = size_backup_pattern(log_path.name)
    date_re = date_backup_pattern(log_path.name)
    for entry in _sort_by_mtime(fs, entries):
        if size_re.match(entry.name):
            size_history.push(BackupEntry(entry))
        if date_re.fullmatch(entry.name):
            date_history.push(BackupEntry(entry))

    logger.debug(
        "Found %d date backups and %d size backups for %s",
        len(date_history), len(size_history), log_path,
    )
    return date_history, size_history
