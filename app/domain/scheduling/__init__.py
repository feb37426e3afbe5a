"""
Scheduling Domain

Pure calculators shared by the appointment and on-call domains. Neither
module touches the database; route handlers load rows, call in, and persist
the results.

- recurrence.py: expands "first Monday of every month" style rules into
  concrete occurrences for bulk appointment creation
- coverage.py: finds on-call coverage gaps and overlapping shifts within a
  scheduling window
"""

from .coverage import (
    AssignmentInterval,
    CoverageGap,
    CoverageReport,
    CoverageWindow,
    ShiftOverlap,
    find_gaps,
    find_overlaps,
)
from .errors import InvalidIntervalError, InvalidRuleError, SchedulingError
from .recurrence import Occurrence, RecurrenceRule, expand

__all__ = [
    "AssignmentInterval",
    "CoverageGap",
    "CoverageReport",
    "CoverageWindow",
    "InvalidIntervalError",
    "InvalidRuleError",
    "Occurrence",
    "RecurrenceRule",
    "SchedulingError",
    "ShiftOverlap",
    "expand",
    "find_gaps",
    "find_overlaps",
]
