from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from canvasreport.api.models import (
    AssignmentGroup,
    GradingPeriod,
    GroupAssignment,
    Submission,
)


@dataclass
class CategoryState:
    """
    Running totals of one grading category within one grading period.

    Built fresh for every course fetch and discarded once impacts are computed.

    Attributes:
        group_id (int): The assignment group this state belongs to.
        name (str): The category name.
        weight (float): The category weight, carried through even when the category is empty.
        points (float): Points earned on assignments that count in the totals.
        possible (float): Points possible of those same assignments.
    """

    group_id: int
    name: str
    weight: float
    points: float = 0.0
    possible: float = 0.0

    @property
    def percent(self) -> float:
        if self.possible > 0:
            return (self.points / self.possible) * 100
        return 0.0


@dataclass
class CategoryGrade:
    """Display row for one weighted category of a course grade."""

    name: str
    points: float
    points_possible: float
    percent: float
    weight: float


def is_weighted_grading(groups: Optional[Iterable[AssignmentGroup]]) -> bool:
    """A course is weighted when any of its assignment groups carries a weight."""
    return any(g.group_weight > 0 for g in groups or [])


def current_grading_period(
    periods: Iterable[GradingPeriod], now: datetime
) -> Optional[GradingPeriod]:
    """
    Finds the grading period whose interval contains ``now``.

    Periods missing either boundary are skipped.

    Args:
        periods (Iterable[GradingPeriod]): The grading periods of a course.
        now (datetime): The moment the report is generated for.

    Returns:
        GradingPeriod or None: The first matching period, or None when no period is current.
    """
    for period in periods:
        if period.contains(now):
            return period
    return None


def assignment_in_period(
    assignment: GroupAssignment, period: Optional[GradingPeriod]
) -> bool:
    # Without period boundaries or a due date everything counts
    if period is None or period.start_date is None or period.end_date is None:
        return True
    if assignment.due_at is None:
        return True
    return period.start_date <= assignment.due_at <= period.end_date


def counts_in_totals(submission: Optional[Submission]) -> Tuple[bool, float]:
    """
    Decides whether a submission's score is already part of the running total.

    A recorded score counts unless the submission is flagged missing with a zero score
    and no grading action: Canvas fills those zeros in automatically, and they only enter
    the grade once an instructor actually grades the work.

    Args:
        submission (Submission, optional): The student's submission, if any.

    Returns:
        tuple[bool, float]: Whether the score counts, and the score (0 when it does not).
    """
    if submission is None or submission.score is None:
        return False, 0.0
    if submission.missing and submission.score == 0 and submission.graded_at is None:
        return False, 0.0
    return True, submission.score


def has_points(assignment: GroupAssignment) -> bool:
    return assignment.points_possible is not None and assignment.points_possible != 0


def build_category_states(
    groups: Iterable[AssignmentGroup],
    submissions: Dict[int, Submission],
    period: Optional[GradingPeriod],
) -> List[CategoryState]:
    """
    Builds the per-category totals the impact calculation starts from.

    Only assignments with a non-zero point value that fall inside ``period`` are
    considered, and of those only the ones whose score already counts in the totals.

    Args:
        groups (Iterable[AssignmentGroup]): The course's assignment groups with their assignments.
        submissions (Dict[int, Submission]): The student's submissions keyed by assignment id.
        period (GradingPeriod, optional): The current grading period.

    Returns:
        List[CategoryState]: One state per group, in group order.
    """
    states = []
    for group in groups:
        state = CategoryState(
            group_id=group.id, name=group.name, weight=group.group_weight
        )
        for assignment in group.assignments:
            if not has_points(assignment) or not assignment_in_period(assignment, period):
                continue
            counted, score = counts_in_totals(submissions.get(assignment.id))
            if counted:
                state.points += score
                state.possible += assignment.points_possible
        states.append(state)
    return states


def build_category_grades(states: Iterable[CategoryState]) -> List[CategoryGrade]:
    """Turns the weighted category states into display rows sorted by category name."""
    categories = [
        CategoryGrade(
            name=state.name,
            points=state.points,
            points_possible=state.possible,
            percent=state.percent,
            weight=state.weight,
        )
        for state in states
        if state.weight != 0
    ]
    categories.sort(key=lambda c: c.name)
    return categories
