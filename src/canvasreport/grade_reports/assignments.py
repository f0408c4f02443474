from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from canvasreport.api.models import Submission
from canvasreport.grade_reports.impact import AssignmentImpact

MISSING = "Missing"


@dataclass
class EnrichedAssignment:
    """
    An assignment joined with the student's submission and its grade impact.

    Attributes:
        id (int): Canvas assignment id.
        name (str): Assignment title.
        course_name (str): Display name of the owning course.
        due_at (datetime): Due timestamp; assignments without one are never enriched.
        points_possible (float, optional): Maximum score.
        submission (Submission, optional): The student's submission, None when there is none.
        category_name (str): Weighted category name, empty for unweighted courses.
        impact (AssignmentImpact, optional): None when the impact could not be computed.
        status (str): Set on missing assignments, see ``determine_status``.
    """

    id: int
    name: str
    course_name: str
    due_at: datetime
    points_possible: Optional[float] = None
    submission: Optional[Submission] = None
    category_name: str = ""
    impact: Optional[AssignmentImpact] = None
    status: str = ""

    @property
    def status_icon(self) -> str:
        if not self.status:
            return ""
        return "✗" if self.status == MISSING else "0"


def is_completed(submission: Optional[Submission]) -> bool:
    if submission is None:
        return False
    return (
        submission.submitted_at is not None
        or submission.graded_at is not None
        or submission.excused
    )


def is_graded_zero(submission: Optional[Submission]) -> bool:
    return (
        submission is not None
        and submission.score is not None
        and submission.score == 0
        and submission.graded_at is not None
    )


def awaiting_grade(submission: Optional[Submission]) -> bool:
    """True when the student resubmitted and the current grade belongs to an older attempt."""
    if submission is None or submission.submitted_at is None:
        return False
    return submission.grade_matches_current_submission is False


def is_missing(submission: Optional[Submission]) -> bool:
    """
    Decides whether an assignment still needs the student's attention.

    Excused work is never missing, even when Canvas also flags it missing. Otherwise an
    assignment is missing when there is no submission, when Canvas flags it missing, or
    when an instructor graded it zero. Resubmissions awaiting a new grade are not missing.
    """
    if submission is None:
        return True
    if submission.excused or awaiting_grade(submission):
        return False
    return submission.missing or is_graded_zero(submission)


def determine_status(assignment: EnrichedAssignment) -> str:
    if is_graded_zero(assignment.submission):
        if assignment.points_possible is not None:
            return f"Graded 0/{int(assignment.points_possible)}"
        return "Graded 0"
    return MISSING
