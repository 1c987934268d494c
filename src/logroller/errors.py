"""Exceptions raised by the rolling engine."""

from __future__ import annotations

from pathlib import Path


class RollError(OSError):
    """Raised when the live log cannot be backed up and cleared.

    The roll is aborted: the log is not cleared and no backup is recorded.
    """

    def __init__(self, source: Path, destination: Path, reason: str = "") -> None:
        self.source = source
        self.destination = destination
        message = f"Could not back up {source} to {destination}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
