import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from canvasreport.api.client import CanvasAPIError
from canvasreport.api.models import (
    AssignmentGroup,
    Course,
    Enrollment,
    GradingPeriod,
    Submission,
)
from canvasreport.grade_reports.assignments import EnrichedAssignment
from canvasreport.grade_reports.categories import (
    CategoryGrade,
    CategoryState,
    build_category_grades,
    build_category_states,
    current_grading_period,
    is_weighted_grading,
)
from canvasreport.grade_reports.impact import calculate_assignment_impacts

logger = logging.getLogger(__name__)


class CourseFetchError(RuntimeError):
    """Raised when a course's assignments or submissions cannot be fetched."""

    def __init__(self, course_name: str, message: str):
        super().__init__(f"{course_name}: {message}")
        self.course_name = course_name
        self.message = message


@dataclass
class CourseWarning:
    """A problem with one course that did not stop the report."""

    course_name: str
    message: str

    def __str__(self) -> str:
        return f"{self.course_name}: {self.message}"


@dataclass
class CourseGrade:
    """
    Display row for a course's current grade.

    Weighted courses carry a breakdown per category instead of points.
    """

    course_name: str
    percent: float
    points: float = 0.0
    points_possible: float = 0.0
    weighted: bool = False
    categories: List[CategoryGrade] = field(default_factory=list)


@dataclass
class CourseResult:
    """Everything one course contributes to a student report."""

    course: Course
    assignments: List[EnrichedAssignment] = field(default_factory=list)
    period: Optional[GradingPeriod] = None
    grade: Optional[CourseGrade] = None
    warnings: List[CourseWarning] = field(default_factory=list)


def build_course_grade(
    course_name: str,
    enrollment: Optional[Enrollment],
    weighted: bool,
    states: List[CategoryState],
) -> Optional[CourseGrade]:
    """
    Builds the grade row of a course from its enrollment summary.

    Args:
        course_name (str): Display name of the course.
        enrollment (Enrollment, optional): The student's enrollment in the current grading period.
        weighted (bool): Whether the course uses weighted categories.
        states (List[CategoryState]): The course's category states, used for the weighted breakdown.

    Returns:
        CourseGrade or None: None when Canvas has no current score for the student.
    """
    if enrollment is None or enrollment.current_score is None:
        return None

    percent = enrollment.current_score

    if weighted:
        return CourseGrade(
            course_name=course_name,
            percent=percent,
            weighted=True,
            categories=build_category_grades(states),
        )

    points = enrollment.current_points or 0.0
    # Canvas only reports earned points; possible is derived from the percentage
    points_possible = points / (percent / 100) if percent > 0 else 0.0

    return CourseGrade(
        course_name=course_name,
        percent=percent,
        points=points,
        points_possible=points_possible,
    )


class CourseAggregator:
    """
    Fetches one course for one student and joins it into report-ready records.

    Assignment and submission failures abort the course with ``CourseFetchError``.
    Failures fetching assignment groups, grading periods or the enrollment only cost the
    impact column or the grade row and are recorded as warnings.

    Args:
        client: The Canvas data source, see ``canvasreport.api.client.CanvasClient``.
        student_id (int): The observed student.
        now (datetime): The report's timezone-aware reference time.
    """

    def __init__(self, client, student_id: int, now: datetime):
        self.client = client
        self.student_id = student_id
        self.now = now

    def fetch(self, course: Course) -> CourseResult:
        course_name = course.display_name
        result = CourseResult(course=course)

        try:
            raw_assignments = self.client.assignments(course.id)
        except CanvasAPIError as e:
            raise CourseFetchError(course_name, f"fetching assignments: {e}") from e

        try:
            raw_submissions = self.client.submissions(course.id, self.student_id)
        except CanvasAPIError as e:
            raise CourseFetchError(course_name, f"fetching submissions: {e}") from e

        submissions: Dict[int, Submission] = {
            s.assignment_id: s for s in raw_submissions
        }

        groups = self._fetch_groups(course, result)
        result.period = self._fetch_current_period(course, result)
        enrollment = self._fetch_enrollment(course, result.period, result)

        weighted = is_weighted_grading(groups)
        states: List[CategoryState] = []
        impacts = {}
        category_by_assignment: Dict[int, str] = {}

        if groups is not None:
            states = build_category_states(groups, submissions, result.period)
            impacts = calculate_assignment_impacts(
                groups, states, submissions, weighted, result.period
            )
            if weighted:
                for group in groups:
                    for assignment in group.assignments:
                        category_by_assignment[assignment.id] = group.name

        for assignment in raw_assignments:
            if assignment.due_at is None:
                continue
            result.assignments.append(
                EnrichedAssignment(
                    id=assignment.id,
                    name=assignment.name,
                    course_name=course_name,
                    due_at=assignment.due_at,
                    points_possible=assignment.points_possible,
                    submission=submissions.get(assignment.id),
                    category_name=category_by_assignment.get(assignment.id, ""),
                    impact=impacts.get(assignment.id),
                )
            )

        if result.period is not None:
            result.grade = build_course_grade(course_name, enrollment, weighted, states)

        return result

    def _warn(self, result: CourseResult, message: str) -> None:
        warning = CourseWarning(result.course.display_name, message)
        logger.warning("%s", warning)
        result.warnings.append(warning)

    def _fetch_groups(
        self, course: Course, result: CourseResult
    ) -> Optional[List[AssignmentGroup]]:
        try:
            return self.client.assignment_groups(course.id)
        except CanvasAPIError as e:
            self._warn(result, f"fetching assignment groups, impact unavailable: {e}")
            return None

    def _fetch_current_period(
        self, course: Course, result: CourseResult
    ) -> Optional[GradingPeriod]:
        try:
            periods = self.client.grading_periods(course.id)
        except CanvasAPIError as e:
            self._warn(result, f"fetching grading periods: {e}")
            return None
        return current_grading_period(periods, self.now)

    def _fetch_enrollment(
        self, course: Course, period: Optional[GradingPeriod], result: CourseResult
    ) -> Optional[Enrollment]:
        if period is None:
            return None
        try:
            enrollments = self.client.enrollments(course.id, self.student_id, period.key)
        except CanvasAPIError as e:
            self._warn(result, f"fetching current grade: {e}")
            return None
        return enrollments[0] if enrollments else None
