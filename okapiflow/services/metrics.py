"""
Derived metrics for a loaded Space.

Nothing here is stored. Every value is a pure fold over the log and waste
entries (and the Space's clock state) at read time.

    total points        = sum of log entry points
    total waste points  = sum of waste entry points
    session elapsed     = now - clock_in_start_time while clocked in, else 0
    session points      = points logged at or after clock_in_start_time
    points per hour     = session points / session hours, 0 when no time elapsed
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from okapiflow.models.logs import LogEntry, WasteEntry
from okapiflow.models.space import Space

SECONDS_PER_HOUR = 3600


def total_points(entries: Iterable[LogEntry]) -> int:
    return sum(e.points for e in entries)


def total_waste_points(entries: Iterable[WasteEntry]) -> int:
    return sum(e.points for e in entries)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, floored and never negative."""
    seconds = (end - start).total_seconds()
    return max(int(seconds // 60), 0)


def session_elapsed_seconds(
    is_clocked_in: bool,
    clock_in_start_time: datetime | None,
    now: datetime,
) -> int:
    if not is_clocked_in or clock_in_start_time is None:
        return 0
    return max(int((now - clock_in_start_time).total_seconds()), 0)


def session_points(
    entries: Iterable[LogEntry],
    is_clocked_in: bool,
    clock_in_start_time: datetime | None,
) -> int:
    if not is_clocked_in or clock_in_start_time is None:
        return 0
    return sum(e.points for e in entries if e.timestamp >= clock_in_start_time)


def points_per_hour(points: int, elapsed_seconds: float) -> float:
    """Rate over the elapsed time; 0.0 when no time has elapsed."""
    if elapsed_seconds <= 0:
        return 0.0
    return points / (elapsed_seconds / SECONDS_PER_HOUR)


def average_points_per_hour(points: int, total_clocked_minutes: int) -> float:
    """Lifetime rate over all clocked minutes; 0.0 when nothing was clocked."""
    return points_per_hour(points, total_clocked_minutes * 60)


def format_elapsed(seconds: float) -> str:
    """Format a duration as HH:MM:SS. Negative durations read as zero."""
    if seconds < 0:
        return "00:00:00"
    whole = int(seconds)
    hours, rest = divmod(whole, SECONDS_PER_HOUR)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class SpaceMetrics:
    """Snapshot of every derived value for one Space at one instant."""
    total_points: int
    total_waste_points: int
    session_elapsed_seconds: int
    session_points: int
    points_per_hour: float
    average_points_per_hour: float
    total_clocked_minutes: int

    @property
    def session_elapsed(self) -> str:
        return format_elapsed(self.session_elapsed_seconds)


def compute_metrics(
    space: Space,
    log_entries: list[LogEntry],
    waste_entries: list[WasteEntry],
    now: datetime,
) -> SpaceMetrics:
    """Fold the loaded collections into a SpaceMetrics snapshot."""
    points = total_points(log_entries)
    elapsed = session_elapsed_seconds(space.is_clocked_in, space.clock_in_start_time, now)
    in_session = session_points(log_entries, space.is_clocked_in, space.clock_in_start_time)
    return SpaceMetrics(
        total_points=points,
        total_waste_points=total_waste_points(waste_entries),
        session_elapsed_seconds=elapsed,
        session_points=in_session,
        points_per_hour=points_per_hour(in_session, elapsed),
        average_points_per_hour=average_points_per_hour(points, space.total_clocked_in_time),
        total_clocked_minutes=space.total_clocked_in_time,
    )
