"""Roll policy: intervals, thresholds, and the two roll predicates."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class RollingInterval(str, Enum):
    NO_INTERVAL = "no_interval"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


# Number of leading YYMMDD digits compared for each interval.
PREFIX_LENGTHS: dict[RollingInterval, int] = {
    RollingInterval.DAY: 6,
    RollingInterval.MONTH: 4,
    RollingInterval.YEAR: 2,
}

DEFAULT_MAX_LOG_FILE_WEIGHT = 1_000_000
DEFAULT_MAX_LOG_BACKUPS = 5


@dataclass
class RollPolicy:
    rolling_interval: RollingInterval = RollingInterval.DAY
    max_log_file_weight: int = DEFAULT_MAX_LOG_FILE_WEIGHT
    max_log_backups: int = DEFAULT_MAX_LOG_BACKUPS
    # Compare four-digit calendar fields instead of truncated YYMMDD strings.
    calendar_rollover: bool = False


def _truncated_stamp(moment: datetime, interval: RollingInterval) -> int:
    return int(moment.strftime("%y%m%d")[: PREFIX_LENGTHS[interval]])


def _calendar_key(moment: datetime, interval: RollingInterval) -> tuple[int, ...]:
    fields = (moment.year, moment.month, moment.day)
    return fields[: {RollingInterval.YEAR: 1, RollingInterval.MONTH: 2}.get(interval, 3)]


def date_roll_due(
    modified: datetime | None,
    now: datetime,
    policy: RollPolicy,
) -> bool:
    """Return True when the log was last written in an earlier period than now.

    ``modified`` is None when the log does not exist. The default comparison
    truncates ``YYMMDD`` strings and compares them as integers, so two-digit
    years wrap at the century. Set ``calendar_rollover`` on the policy to
    compare full calendar fields.
    """
    if modified is None or policy.rolling_interval == RollingInterval.NO_INTERVAL:
        return False
    if policy.calendar_rollover:
        return _calendar_key(now, policy.rolling_interval) > _calendar_key(
            modified, policy.rolling_interval
        )
    return _truncated_stamp(now, policy.rolling_interval) > _truncated_stamp(
        modified, policy.rolling_interval
    )


def size_roll_due(size: int | None, policy: RollPolicy) -> bool:
    """Return True when the log is strictly larger than the size threshold.

    ``size`` is None when the log does not exist.
    """
    if size is None or policy.max_log_file_weight == 0:
        return False
    return size > policy.max_log_file_weight


def _shift_months(moment: datetime, months: int) -> datetime:
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def previous_period(now: datetime, interval: RollingInterval) -> datetime:
    """Step ``now`` back by one unit of ``interval`` (days clamped to month length)."""
    if interval == RollingInterval.DAY:
        return now - timedelta(days=1)
    if interval == RollingInterval.MONTH:
        return _shift_months(now, 1)
    if interval == RollingInterval.YEAR:
        return _shift_months(now, 12)
    raise ValueError(f"No period for interval {interval.value!r}")


def backup_stamp(now: datetime, interval: RollingInterval) -> str:
    """Date stamp naming the period that just ended, as ``YYYY-MM-DD``."""
    return previous_period(now, interval).strftime("%Y-%m-%d")
