from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil import parser


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parses a Canvas ISO-8601 timestamp.

    Args:
        value (str, optional): The timestamp as returned by the API, e.g. "2025-01-06T23:59:00Z".

    Returns:
        datetime or None: A timezone-aware datetime, or None when the value is empty.
    """
    if not value:
        return None
    return parser.isoparse(value)


def parse_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


@dataclass
class Observee:
    """A student the observer account is allowed to view."""

    id: int
    name: str = ""
    short_name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.short_name or "Unknown Student"

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Observee":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            short_name=data.get("short_name") or "",
        )


@dataclass
class Course:
    id: int
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or "Unknown Course"

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Course":
        return cls(id=data["id"], name=data.get("name") or "")


@dataclass
class Assignment:
    """
    An assignment as listed for a course.

    Attributes:
        id (int): Canvas assignment id.
        name (str): Assignment title.
        due_at (datetime, optional): Due timestamp. Assignments without one are never analyzed.
        points_possible (float, optional): Maximum score.
    """

    id: int
    name: str = ""
    due_at: Optional[datetime] = None
    points_possible: Optional[float] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Assignment":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            due_at=parse_timestamp(data.get("due_at")),
            points_possible=parse_float(data.get("points_possible")),
        )


@dataclass
class Submission:
    """
    The state of one assignment for one student.

    Attributes:
        assignment_id (int): The assignment this submission belongs to.
        submitted_at (datetime, optional): When the student last submitted.
        graded_at (datetime, optional): When an instructor last graded the submission.
        score (float, optional): The recorded score, None when ungraded.
        missing (bool): Canvas' missing flag.
        excused (bool): Whether the assignment was excused for the student.
        grade_matches_current_submission (bool, optional): False when the student resubmitted
            after the last grading action.
    """

    assignment_id: int
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    score: Optional[float] = None
    missing: bool = False
    excused: bool = False
    grade_matches_current_submission: Optional[bool] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Submission":
        return cls(
            assignment_id=data["assignment_id"],
            submitted_at=parse_timestamp(data.get("submitted_at")),
            graded_at=parse_timestamp(data.get("graded_at")),
            score=parse_float(data.get("score")),
            missing=bool(data.get("missing")),
            excused=bool(data.get("excused")),
            grade_matches_current_submission=data.get("grade_matches_current_submission"),
        )


@dataclass
class GradingPeriod:
    """
    A school-defined date range with its own grade.

    The Canvas id may arrive as a string or an integer; ``key`` holds it normalized to a
    string so it can be used for lookups and as a query parameter.
    """

    key: str
    title: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def contains(self, moment: datetime) -> bool:
        if self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= moment <= self.end_date

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "GradingPeriod":
        return cls(
            key=str(data["id"]),
            title=data.get("title") or "",
            start_date=parse_timestamp(data.get("start_date")),
            end_date=parse_timestamp(data.get("end_date")),
        )


@dataclass
class Enrollment:
    """Grade summary of a student enrollment; only the fields the report needs."""

    current_score: Optional[float] = None
    current_points: Optional[float] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Enrollment":
        grades = data.get("grades") or {}
        return cls(
            current_score=parse_float(grades.get("current_score")),
            current_points=parse_float(grades.get("current_points")),
        )


@dataclass
class GroupAssignment:
    """An assignment as embedded in an assignment group."""

    id: int
    name: str = ""
    points_possible: Optional[float] = None
    due_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "GroupAssignment":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            points_possible=parse_float(data.get("points_possible")),
            due_at=parse_timestamp(data.get("due_at")),
        )


@dataclass
class AssignmentGroup:
    """
    A grading category.

    Attributes:
        id (int): Canvas group id.
        name (str): Category name, e.g. "Homework".
        group_weight (float): Percentage weight; 0 for unweighted courses.
        assignments (List[GroupAssignment]): Member assignments with their point values.
    """

    id: int
    name: str = ""
    group_weight: float = 0.0
    assignments: List[GroupAssignment] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "AssignmentGroup":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            group_weight=float(data.get("group_weight") or 0.0),
            assignments=[
                GroupAssignment.from_json(a) for a in data.get("assignments") or []
            ],
        )
