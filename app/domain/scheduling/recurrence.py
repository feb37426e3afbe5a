"""
Recurring Schedule Expander

Turns a weekday-ordinal rule such as "first Monday of every month at 16:00"
into the concrete list of occurrences for a range of years. The caller
persists each occurrence as its own appointment row.
"""

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from .errors import InvalidRuleError

logger = logging.getLogger(__name__)

ORDINALS = ("first", "second", "third", "fourth", "last")

# Index matches datetime.weekday() (Monday == 0)
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")

DEFAULT_TIME_OF_DAY = "09:00"
DEFAULT_DURATION_MINUTES = 60
MAX_DURATION_MINUTES = 7 * 24 * 60

_PATTERN_RE = re.compile(r"^(?P<ordinal>[a-z]+)_(?P<weekday>[a-z]+)$")
_TIME_RE = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})$")


@dataclass(frozen=True)
class RecurrenceRule:
    """Declarative description of a monthly weekday-ordinal pattern"""

    ordinal: str
    weekday: str
    start_year: int
    end_year: Optional[int] = None
    time_of_day: str = DEFAULT_TIME_OF_DAY
    duration_minutes: int = DEFAULT_DURATION_MINUTES

    @classmethod
    def from_pattern(
        cls,
        pattern: str,
        start_year: int,
        end_year: Optional[int] = None,
        time_of_day: str = DEFAULT_TIME_OF_DAY,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> "RecurrenceRule":
        """
        Build a rule from a pattern token like "first_monday" or "last_friday".

        Raises:
            InvalidRuleError: If the token is not "<ordinal>_<weekday>"
        """
        match = _PATTERN_RE.match((pattern or "").strip().lower())
        if not match:
            raise InvalidRuleError(
                f"Invalid recurring pattern: {pattern}. "
                'Expected format: "first_monday", "second_tuesday", "last_friday", etc.'
            )
        return cls(
            ordinal=match.group("ordinal"),
            weekday=match.group("weekday"),
            start_year=start_year,
            end_year=end_year,
            time_of_day=time_of_day,
            duration_minutes=duration_minutes,
        )

    @property
    def pattern(self) -> str:
        return f"{self.ordinal.lower()}_{self.weekday.lower()}"

    @property
    def last_year(self) -> int:
        return self.start_year if self.end_year is None else self.end_year


@dataclass(frozen=True)
class Occurrence:
    """One concrete instance of a recurrence rule"""

    date: date
    start: datetime
    end: datetime


def parse_time_of_day(value: str) -> time:
    """Parse an HH:mm wall-clock time"""
    match = _TIME_RE.match((value or "").strip())
    if not match:
        raise InvalidRuleError(f"Invalid time of day: {value}. Expected HH:mm")
    hour, minute = int(match.group("hour")), int(match.group("minute"))
    if hour > 23 or minute > 59:
        raise InvalidRuleError(f"Invalid time of day: {value}. Expected HH:mm")
    return time(hour, minute)


def _validate(rule: RecurrenceRule) -> tuple[int, int, time]:
    ordinal = (rule.ordinal or "").lower()
    if ordinal not in ORDINALS:
        raise InvalidRuleError(
            f"Invalid ordinal: {rule.ordinal}. Expected one of {', '.join(ORDINALS)}"
        )

    weekday = (rule.weekday or "").lower()
    if weekday not in WEEKDAYS:
        raise InvalidRuleError(
            f"Invalid weekday: {rule.weekday}. Expected one of {', '.join(WEEKDAYS)}"
        )

    if isinstance(rule.duration_minutes, bool) or not isinstance(rule.duration_minutes, int):
        raise InvalidRuleError("Duration must be a whole number of minutes")
    if rule.duration_minutes < 0:
        raise InvalidRuleError("Duration cannot be negative")
    if rule.duration_minutes > MAX_DURATION_MINUTES:
        raise InvalidRuleError(f"Duration cannot exceed {MAX_DURATION_MINUTES} minutes")

    for year in (rule.start_year, rule.last_year):
        if isinstance(year, bool) or not isinstance(year, int):
            raise InvalidRuleError(f"Invalid year: {year}")
        if not datetime.min.year <= year <= datetime.max.year:
            raise InvalidRuleError(f"Year out of range: {year}")

    return ORDINALS.index(ordinal), WEEKDAYS.index(weekday), parse_time_of_day(rule.time_of_day)


def select_day(year: int, month: int, weekday: int, ordinal_index: int) -> Optional[int]:
    """
    Return the day of month for the given weekday ordinal, or None when the
    month has too few matching weekdays.
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)
    first_match = 1 + (weekday - first_weekday) % 7
    matches = list(range(first_match, days_in_month + 1, 7))

    if ORDINALS[ordinal_index] == "last":
        return matches[-1]
    if ordinal_index < len(matches):
        return matches[ordinal_index]
    return None


def expand(rule: RecurrenceRule) -> List[Occurrence]:
    """
    Expand a rule into chronological occurrences, one per matching month.

    An inverted year range yields an empty list. The rule is validated up
    front so a malformed rule never produces partial output.

    Raises:
        InvalidRuleError: If the ordinal, weekday, time of day, duration or
            years are malformed, or an occurrence would end past datetime.max
    """
    ordinal_index, weekday, start_time = _validate(rule)
    duration = timedelta(minutes=rule.duration_minutes)

    occurrences = []
    for year in range(rule.start_year, rule.last_year + 1):
        for month in range(1, 13):
            day = select_day(year, month, weekday, ordinal_index)
            if day is None:
                continue
            on = date(year, month, day)
            start = datetime.combine(on, start_time)
            try:
                end = start + duration
            except OverflowError as e:
                raise InvalidRuleError(f"Occurrence on {on} ends past the supported date range") from e
            occurrences.append(Occurrence(date=on, start=start, end=end))

    logger.debug(f"Expanded {rule.pattern} {rule.start_year}-{rule.last_year} to {len(occurrences)} dates")
    return occurrences
