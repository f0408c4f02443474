"""
What-if modelling of open assignments.

For every assignment that can still change a course grade, the impact is the swing in the
overall percentage between scoring 100% and scoring 0% on it, with everything else held
fixed. Weighted courses average the category percentages by weight, unweighted courses
divide total points by total points possible.

Deltas are returned raw: a negative gain or loss is not clamped here, that is left to the
code that displays them.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from canvasreport.api.models import AssignmentGroup, GradingPeriod, Submission
from canvasreport.grade_reports.categories import (
    CategoryState,
    assignment_in_period,
    counts_in_totals,
    has_points,
)


@dataclass
class AssignmentImpact:
    """
    Attributes:
        gain (float): Percentage points gained if the assignment were scored 100%.
        loss (float): Percentage points lost if the assignment were scored 0%.
        is_weighted (bool): Whether the course uses weighted categories.
    """

    gain: float
    loss: float
    is_weighted: bool = False


def percent(points: float, possible: float) -> float:
    if possible > 0:
        return (points / possible) * 100
    return 0.0


def weighted_overall(
    states: Iterable[CategoryState],
    target: CategoryState,
    points: float,
    possible: float,
) -> float:
    """
    Computes the weighted overall percentage with ``target``'s totals replaced.

    Categories without any points possible are left out of the average entirely.

    Args:
        states (Iterable[CategoryState]): All category states of the course.
        target (CategoryState): The category whose totals are substituted.
        points (float): Points earned to use for ``target``.
        possible (float): Points possible to use for ``target``.

    Returns:
        float: ``sum(percent * weight) / sum(weight)``, or 0 when no category contributes.
    """
    weighted_sum = 0.0
    weight_sum = 0.0
    for state in states:
        if state is target:
            cat_points, cat_possible = points, possible
        else:
            cat_points, cat_possible = state.points, state.possible
        if cat_possible > 0:
            weighted_sum += percent(cat_points, cat_possible) * state.weight
            weight_sum += state.weight

    if weight_sum == 0:
        return 0.0
    return weighted_sum / weight_sum


def weighted_impact(
    category: CategoryState, assignment_pts: float, states: List[CategoryState]
) -> AssignmentImpact:
    """Impact of an assignment that is not yet part of its weighted category's totals."""
    if category.weight == 0:
        return AssignmentImpact(gain=0.0, loss=0.0, is_weighted=True)

    current = weighted_overall(states, category, category.points, category.possible)
    best = weighted_overall(
        states, category, category.points + assignment_pts, category.possible + assignment_pts
    )
    worst = weighted_overall(
        states, category, category.points, category.possible + assignment_pts
    )
    return AssignmentImpact(gain=best - current, loss=current - worst, is_weighted=True)


def graded_zero_weighted_impact(
    category: CategoryState, assignment_pts: float, states: List[CategoryState]
) -> AssignmentImpact:
    """
    Impact of an assignment already counted as a zero in a weighted category.

    The points possible are already in the category's denominator, so only the numerator
    can move, and the score cannot get any worse.
    """
    if category.weight == 0:
        return AssignmentImpact(gain=0.0, loss=0.0, is_weighted=True)

    current = weighted_overall(states, category, category.points, category.possible)
    best = weighted_overall(
        states, category, category.points + assignment_pts, category.possible
    )
    return AssignmentImpact(gain=best - current, loss=0.0, is_weighted=True)


def unweighted_impact(
    total_points: float, total_possible: float, assignment_pts: float
) -> AssignmentImpact:
    current = percent(total_points, total_possible)
    best = percent(total_points + assignment_pts, total_possible + assignment_pts)
    worst = percent(total_points, total_possible + assignment_pts)
    return AssignmentImpact(gain=best - current, loss=current - worst)


def graded_zero_unweighted_impact(
    total_points: float, total_possible: float, assignment_pts: float
) -> AssignmentImpact:
    current = percent(total_points, total_possible)
    best = percent(total_points + assignment_pts, total_possible)
    return AssignmentImpact(gain=best - current, loss=0.0)


def calculate_assignment_impacts(
    groups: List[AssignmentGroup],
    states: List[CategoryState],
    submissions: Dict[int, Submission],
    weighted: bool,
    period: Optional[GradingPeriod] = None,
) -> Dict[int, AssignmentImpact]:
    """
    Computes the impact of every assignment that can still move the course grade.

    Assignments graded with a positive score are skipped. Assignments counted as a zero
    can only gain; everything else is modelled as not yet part of the totals.

    Args:
        groups (List[AssignmentGroup]): The course's assignment groups.
        states (List[CategoryState]): Category states built from the same groups, in the same order.
        submissions (Dict[int, Submission]): The student's submissions keyed by assignment id.
        weighted (bool): Whether the course uses weighted categories.
        period (GradingPeriod, optional): The current grading period; assignments outside it are skipped.

    Returns:
        Dict[int, AssignmentImpact]: Impacts keyed by assignment id.
    """
    state_by_group = {state.group_id: state for state in states}

    total_points = sum(state.points for state in states)
    total_possible = sum(state.possible for state in states)

    impacts: Dict[int, AssignmentImpact] = {}
    for group in groups:
        category = state_by_group[group.id]
        for assignment in group.assignments:
            if not has_points(assignment) or not assignment_in_period(assignment, period):
                continue

            pts = assignment.points_possible
            counted, score = counts_in_totals(submissions.get(assignment.id))

            if counted and score > 0:
                continue

            if counted and score == 0:
                if weighted:
                    impact = graded_zero_weighted_impact(category, pts, states)
                else:
                    impact = graded_zero_unweighted_impact(total_points, total_possible, pts)
            else:
                if weighted:
                    impact = weighted_impact(category, pts, states)
                else:
                    impact = unweighted_impact(total_points, total_possible, pts)

            impacts[assignment.id] = impact

    return impacts
