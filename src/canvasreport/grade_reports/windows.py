"""
School-calendar aware bucketing of assignments by due date.

Every function takes ``now`` explicitly; a report captures it once so all buckets agree.
Due dates are compared as calendar days in ``now``'s timezone.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List

from canvasreport.grade_reports.assignments import (
    EnrichedAssignment,
    determine_status,
    is_completed,
    is_missing,
)

# Missing work older than this is hidden unless older items are requested
MISSING_LOOKBACK = timedelta(days=30)

FRIDAY = 4
SATURDAY = 5
SUNDAY = 6


@dataclass
class TimeWindows:
    """The three due-date buckets of a report, each sorted by due timestamp."""

    missing: List[EnrichedAssignment] = field(default_factory=list)
    upcoming: List[EnrichedAssignment] = field(default_factory=list)
    week_ahead: List[EnrichedAssignment] = field(default_factory=list)

    @property
    def upcoming_pending(self) -> int:
        return count_pending(self.upcoming)

    @property
    def week_ahead_pending(self) -> int:
        return count_pending(self.week_ahead)


def next_school_day(day: date) -> date:
    """The next weekday after ``day``; Friday and Saturday roll over to Monday."""
    if day.weekday() == FRIDAY:
        return day + timedelta(days=3)
    if day.weekday() == SATURDAY:
        return day + timedelta(days=2)
    return day + timedelta(days=1)


def end_of_school_week(day: date) -> date:
    """
    The Friday that closes the school week ``day`` belongs to.

    On a Friday this is the following Friday, since that day's own work is already
    covered by the today/tomorrow window.
    """
    weekday = day.weekday()
    if weekday == SUNDAY:
        return day + timedelta(days=5)
    if weekday == SATURDAY:
        return day + timedelta(days=6)
    if weekday == FRIDAY:
        return day + timedelta(days=7)
    return day + timedelta(days=FRIDAY - weekday)


def local_date(moment: datetime, now: datetime) -> date:
    return moment.astimezone(now.tzinfo).date()


def sort_by_due(assignments: Iterable[EnrichedAssignment]) -> List[EnrichedAssignment]:
    return sorted(assignments, key=lambda a: a.due_at)


def missing_assignments(
    assignments: Iterable[EnrichedAssignment], now: datetime, include_older: bool = False
) -> List[EnrichedAssignment]:
    """
    Collects past-due work that is missing or graded zero.

    Args:
        assignments (Iterable[EnrichedAssignment]): Enriched assignments of all courses.
        now (datetime): The report's timezone-aware reference time.
        include_older (bool, optional): Also include work due more than 30 days ago. Defaults to False.

    Returns:
        List[EnrichedAssignment]: Copies of the missing assignments with ``status`` set, sorted by due date.
    """
    cutoff = now - MISSING_LOOKBACK
    result = []
    for assignment in assignments:
        if assignment.due_at > now:
            continue
        if not include_older and assignment.due_at < cutoff:
            continue
        if is_missing(assignment.submission):
            result.append(
                dataclasses.replace(assignment, status=determine_status(assignment))
            )
    return sort_by_due(result)


def upcoming_assignments(
    assignments: Iterable[EnrichedAssignment], now: datetime
) -> List[EnrichedAssignment]:
    """Work due later today, or any time on the next school day."""
    today = now.date()
    tomorrow = next_school_day(today)

    result = []
    for assignment in assignments:
        due_date = local_date(assignment.due_at, now)
        if due_date == today:
            if assignment.due_at > now:
                result.append(assignment)
        elif due_date == tomorrow:
            result.append(assignment)
    return sort_by_due(result)


def week_ahead_assignments(
    assignments: Iterable[EnrichedAssignment], now: datetime
) -> List[EnrichedAssignment]:
    """Work due after the next school day and up to the end of the school week."""
    today = now.date()
    week_start = next_school_day(today) + timedelta(days=1)
    week_end = end_of_school_week(today)

    if week_start > week_end:
        return []

    result = [
        a for a in assignments if week_start <= local_date(a.due_at, now) <= week_end
    ]
    return sort_by_due(result)


def count_pending(assignments: Iterable[EnrichedAssignment]) -> int:
    return sum(1 for a in assignments if not is_completed(a.submission))


def classify(
    assignments: List[EnrichedAssignment], now: datetime, include_older: bool = False
) -> TimeWindows:
    return TimeWindows(
        missing=missing_assignments(assignments, now, include_older),
        upcoming=upcoming_assignments(assignments, now),
        week_ahead=week_ahead_assignments(assignments, now),
    )
