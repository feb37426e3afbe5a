"""
Coverage Gap Detector

Given on-call assignment intervals and a query window, finds the uncovered
sub-intervals of the window and the share of it that is covered.

Algorithm:
    1. Clip every interval to the window, dropping those outside it
    2. Sort by (start, end)
    3. Merge overlapping or touching intervals into covered runs
    4. Emit a gap for each positive-length hole before, between and after runs
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidIntervalError

logger = logging.getLogger(__name__)

CRITICAL_GAP_HOURS = 24
HIGH_GAP_HOURS = 4


def _hours(delta: timedelta) -> float:
    return delta.total_seconds() / 3600


@dataclass(frozen=True)
class CoverageWindow:
    start: datetime
    end: datetime

    @property
    def hours(self) -> float:
        return _hours(self.end - self.start)


@dataclass(frozen=True)
class AssignmentInterval:
    """One on-call shift. Contact fields and priority are carried, not used in gap math."""

    start: datetime
    end: datetime
    assignee_id: Optional[str] = None
    assignee_name: Optional[str] = None
    assignee_phone: Optional[str] = None
    assignee_email: Optional[str] = None
    priority: str = "normal"


@dataclass(frozen=True)
class CoverageGap:
    start: datetime
    end: datetime

    @property
    def hours(self) -> float:
        return _hours(self.end - self.start)

    @property
    def severity(self) -> str:
        return gap_severity(self.hours)


@dataclass(frozen=True)
class ShiftOverlap:
    start: datetime
    end: datetime
    first: AssignmentInterval
    second: AssignmentInterval

    @property
    def hours(self) -> float:
        return _hours(self.end - self.start)


@dataclass(frozen=True)
class CoverageReport:
    window: CoverageWindow
    gaps: List[CoverageGap]
    covered_runs: List[Tuple[datetime, datetime]]

    @property
    def total_hours(self) -> float:
        return self.window.hours

    @property
    def gap_hours(self) -> float:
        return sum(gap.hours for gap in self.gaps)

    @property
    def covered_hours(self) -> float:
        return self.total_hours - self.gap_hours

    @property
    def covered_percentage(self) -> float:
        return (1 - self.gap_hours / self.total_hours) * 100

    @property
    def status(self) -> str:
        """full, partial, or critical when any gap is critical"""
        if not self.gaps:
            return "full"
        if any(gap.severity == "critical" for gap in self.gaps):
            return "critical"
        return "partial"


def gap_severity(hours: float) -> str:
    if hours > CRITICAL_GAP_HOURS:
        return "critical"
    if hours > HIGH_GAP_HOURS:
        return "high"
    return "medium"


def _check_window(window: CoverageWindow) -> None:
    if window.end <= window.start:
        raise InvalidIntervalError(
            f"Coverage window end {window.end.isoformat()} must be after start {window.start.isoformat()}"
        )


def _clip(window: CoverageWindow, intervals: Iterable[AssignmentInterval]) -> List[AssignmentInterval]:
    """Validate, clip to the window, and sort by (start, end)"""
    clipped = []
    for interval in intervals:
        if interval.end <= interval.start:
            raise InvalidIntervalError(
                f"Assignment for {interval.assignee_name or 'unknown assignee'} ends "
                f"{interval.end.isoformat()} before it starts {interval.start.isoformat()}"
            )
        if interval.end <= window.start or interval.start >= window.end:
            continue
        start = max(interval.start, window.start)
        end = min(interval.end, window.end)
        if start != interval.start or end != interval.end:
            interval = AssignmentInterval(
                start=start,
                end=end,
                assignee_id=interval.assignee_id,
                assignee_name=interval.assignee_name,
                assignee_phone=interval.assignee_phone,
                assignee_email=interval.assignee_email,
                priority=interval.priority,
            )
        clipped.append(interval)

    clipped.sort(key=lambda i: (i.start, i.end))
    return clipped


def merge_runs(intervals: List[AssignmentInterval]) -> List[Tuple[datetime, datetime]]:
    """Merge sorted intervals into maximal covered runs. Touching intervals merge."""
    runs: List[Tuple[datetime, datetime]] = []
    for interval in intervals:
        if runs and interval.start <= runs[-1][1]:
            run_start, run_end = runs[-1]
            runs[-1] = (run_start, max(run_end, interval.end))
        else:
            runs.append((interval.start, interval.end))
    return runs


def find_gaps(window: CoverageWindow, intervals: Iterable[AssignmentInterval]) -> CoverageReport:
    """
    Compute the uncovered parts of ``window``.

    Returns:
        CoverageReport with gaps, merged covered runs and covered percentage

    Raises:
        InvalidIntervalError: If the window or any interval ends at or before
            its start. The whole call fails; no partial report is returned.
    """
    _check_window(window)
    runs = merge_runs(_clip(window, intervals))

    gaps = []
    cursor = window.start
    for run_start, run_end in runs:
        if run_start > cursor:
            gaps.append(CoverageGap(start=cursor, end=run_start))
        cursor = max(cursor, run_end)
    if cursor < window.end:
        gaps.append(CoverageGap(start=cursor, end=window.end))

    report = CoverageReport(window=window, gaps=gaps, covered_runs=runs)
    logger.debug(
        f"Coverage {window.start.isoformat()} -> {window.end.isoformat()}: "
        f"{len(gaps)} gaps, {report.covered_percentage:.1f}% covered"
    )
    return report


def find_overlaps(
    window: CoverageWindow, intervals: Iterable[AssignmentInterval]
) -> List[ShiftOverlap]:
    """
    Find pairs of assignments that overlap in time within the window.

    Every overlapping pair is reported once, with the earlier-starting shift
    as `first`. Touching shifts are not overlaps.
    """
    _check_window(window)
    overlaps = []
    open_shifts: List[AssignmentInterval] = []
    for interval in _clip(window, intervals):
        open_shifts = [earlier for earlier in open_shifts if earlier.end > interval.start]
        for earlier in open_shifts:
            overlaps.append(
                ShiftOverlap(
                    start=interval.start,
                    end=min(earlier.end, interval.end),
                    first=earlier,
                    second=interval,
                )
            )
        open_shifts.append(interval)
    return overlaps
