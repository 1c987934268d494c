"""Append-only log writer that the rolling engine wraps."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Protocol


class LogSink(Protocol):
    path: Path

    def exists(self) -> bool: ...

    def size(self) -> int: ...

    def modification_time(self) -> datetime: ...

    def clear(self) -> None: ...

    def write(self, message: str) -> None: ...


def format_line(message: str) -> str:
    """Prefix message with a local ISO-8601 timestamp and terminate the line."""
    timestamp = datetime.now().astimezone().isoformat(timespec="seconds")
    return f"{timestamp} {message}\n"


class AppendOnlyWriter:
    """Appends formatted messages to a single file. No handle is kept open."""

    def __init__(
        self,
        path: Path,
        formatter: Callable[[str], str] = format_line,
    ) -> None:
        self.path = Path(path)
        self.formatter = formatter

    def exists(self) -> bool:
        return self.path.is_file()

    def size(self) -> int:
        return self.path.stat().st_size

    def modification_time(self) -> datetime:
        return datetime.fromtimestamp(self.path.stat().st_mtime)

    def clear(self) -> None:
        """Truncate the file in place."""
        with open(self.path, "w", encoding="utf-8"):
            pass

    def write(self, message: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(self.formatter(message))
