from datetime import datetime, timedelta, timezone

import pytest

from canvasreport.api.client import CanvasAPIError
from canvasreport.api.models import (
    Assignment,
    AssignmentGroup,
    Course,
    Enrollment,
    GradingPeriod,
    GroupAssignment,
    Observee,
    Submission,
)
from canvasreport.grade_reports.assignments import EnrichedAssignment

EASTERN = timezone(timedelta(hours=-5))

# Wednesday
NOW = datetime(2025, 1, 8, 10, 0, tzinfo=EASTERN)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def friday():
    return datetime(2025, 1, 10, 10, 0, tzinfo=EASTERN)


@pytest.fixture
def make_assignment():
    """Factory for enriched assignments due relative to a given moment."""

    def _make(
        name="Worksheet",
        due_at=None,
        points_possible=10.0,
        submission=None,
        course_name="Math",
        id=1,
        **kwargs,
    ):
        return EnrichedAssignment(
            id=id,
            name=name,
            course_name=course_name,
            due_at=due_at or NOW,
            points_possible=points_possible,
            submission=submission,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_submission():
    def _make(assignment_id=1, **kwargs):
        return Submission(assignment_id=assignment_id, **kwargs)

    return _make


@pytest.fixture
def current_period():
    return GradingPeriod(
        key="7",
        title="Q3",
        start_date=datetime(2025, 1, 6, tzinfo=timezone.utc),
        end_date=datetime(2025, 3, 28, tzinfo=timezone.utc),
    )


class FakeClient:
    """
    In-memory stand-in for ``CanvasClient``.

    Data is keyed by course id (and student id where the real endpoint takes one).
    Any method name listed in ``failures`` raises ``CanvasAPIError`` instead, optionally
    only for the course ids given.
    """

    def __init__(self):
        self.students = []
        self.course_lists = {}
        self.assignment_lists = {}
        self.submission_lists = {}
        self.period_lists = {}
        self.enrollment_lists = {}
        self.group_lists = {}
        self.failures = {}
        self.calls = []

    def fail(self, method, course_id=None):
        self.failures.setdefault(method, set()).add(course_id)

    def _check(self, method, course_id=None):
        self.calls.append((method, course_id))
        failing = self.failures.get(method)
        if failing is not None and (None in failing or course_id in failing):
            raise CanvasAPIError(
                "Canvas API error: 500 - boom", status_code=500, body="boom"
            )

    def observees(self):
        self._check("observees")
        return list(self.students)

    def courses(self, user_id):
        self._check("courses")
        return list(self.course_lists.get(user_id, []))

    def assignments(self, course_id):
        self._check("assignments", course_id)
        return list(self.assignment_lists.get(course_id, []))

    def submissions(self, course_id, student_id):
        self._check("submissions", course_id)
        return list(self.submission_lists.get((course_id, student_id), []))

    def grading_periods(self, course_id):
        self._check("grading_periods", course_id)
        return list(self.period_lists.get(course_id, []))

    def enrollments(self, course_id, student_id, grading_period_id=None):
        self._check("enrollments", course_id)
        return list(self.enrollment_lists.get((course_id, student_id), []))

    def assignment_groups(self, course_id):
        self._check("assignment_groups", course_id)
        return list(self.group_lists.get(course_id, []))


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def math_course(fake_client, current_period):
    """
    An unweighted course for student 42 with three dated assignments and one undated one.

    - 101 "Homework 1": due yesterday, no submission
    - 102 "Quiz 1": due yesterday, graded 0/8
    - 103 "Essay": due Friday, submitted
    - 104 "Extra": no due date
    """
    student = Observee(id=42, name="Alex Doe")
    course = Course(id=1, name="Math")
    yesterday = NOW - timedelta(days=1)
    friday = NOW + timedelta(days=2)

    fake_client.students = [student]
    fake_client.course_lists[42] = [course]
    fake_client.assignment_lists[1] = [
        Assignment(id=101, name="Homework 1", due_at=yesterday, points_possible=10),
        Assignment(id=102, name="Quiz 1", due_at=yesterday, points_possible=8),
        Assignment(id=103, name="Essay", due_at=friday, points_possible=20),
        Assignment(id=104, name="Extra", due_at=None, points_possible=5),
    ]
    fake_client.submission_lists[(1, 42)] = [
        Submission(assignment_id=102, score=0.0, graded_at=yesterday),
        Submission(assignment_id=103, submitted_at=NOW - timedelta(hours=2)),
        Submission(assignment_id=105, score=45.0, graded_at=yesterday),
    ]
    fake_client.group_lists[1] = [
        AssignmentGroup(
            id=10,
            name="Assignments",
            group_weight=0,
            assignments=[
                GroupAssignment(id=101, points_possible=10, due_at=yesterday),
                GroupAssignment(id=102, points_possible=8, due_at=yesterday),
                GroupAssignment(id=103, points_possible=20, due_at=friday),
                GroupAssignment(id=104, points_possible=5),
                GroupAssignment(id=105, points_possible=50, due_at=yesterday),
            ],
        )
    ]
    fake_client.period_lists[1] = [current_period]
    fake_client.enrollment_lists[(1, 42)] = [
        Enrollment(current_score=77.59, current_points=45.0)
    ]
    return student, course
