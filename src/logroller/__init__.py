"""Date- and size-based rolling for append-only log files."""

from logroller.errors import RollError
from logroller.policy import RollingInterval, RollPolicy
from logroller.roller import RollingLogWriter, RollOutcome, open_rolling_log
from logroller.writer import AppendOnlyWriter

__version__ = "0.1.0"

__all__ = [
    "AppendOnlyWriter",
    "RollError",
    "RollOutcome",
    "RollPolicy",
    "RollingInterval",
    "RollingLogWriter",
    "open_rolling_log",
]
