import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import tqdm

from canvasreport.api.client import CanvasAPIError
from canvasreport.api.models import Course, GradingPeriod, Observee
from canvasreport.grade_reports.assignments import EnrichedAssignment
from canvasreport.grade_reports.course_report import (
    CourseAggregator,
    CourseFetchError,
    CourseGrade,
    CourseResult,
    CourseWarning,
)
from canvasreport.grade_reports.windows import TimeWindows, classify

logger = logging.getLogger(__name__)


@dataclass
class PeriodGrades:
    """Course grades of one grading period, merged across courses by period title."""

    period: GradingPeriod
    grades: List[CourseGrade] = field(default_factory=list)


@dataclass
class StudentReport:
    """
    The complete report of one student.

    Attributes:
        name (str): The student's display name.
        windows (TimeWindows): Missing, due today/tomorrow and week-ahead buckets.
        grades (List[PeriodGrades]): Current grades grouped by grading period.
        course_count (int): Number of active courses.
        assignment_count (int): Number of enriched assignments across all courses.
        warnings (List[CourseWarning]): Per-course problems that did not stop the report.
        error (str, optional): Set when the student's courses could not be listed at all.
    """

    name: str
    windows: TimeWindows = field(default_factory=TimeWindows)
    grades: List[PeriodGrades] = field(default_factory=list)
    course_count: int = 0
    assignment_count: int = 0
    warnings: List[CourseWarning] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def missing(self) -> List[EnrichedAssignment]:
        return self.windows.missing

    @property
    def upcoming(self) -> List[EnrichedAssignment]:
        return self.windows.upcoming

    @property
    def week_ahead(self) -> List[EnrichedAssignment]:
        return self.windows.week_ahead

    @property
    def grade_count(self) -> int:
        return sum(len(pg.grades) for pg in self.grades)


def _period_sort_key(period_grades: PeriodGrades):
    start = period_grades.period.start_date
    # Periods without a start date sort first
    return (0,) if start is None else (1, start)


def group_grades_by_period(results: List[CourseResult]) -> List[PeriodGrades]:
    """
    Groups course grades by grading-period title.

    Courses that share a period title land in one group whose period, and so whose sort
    position, comes from the first course in ``results`` with that title.

    Args:
        results (List[CourseResult]): Course results in course order.

    Returns:
        List[PeriodGrades]: Groups sorted by start date, grades within a group by course name.
    """
    by_title: Dict[str, PeriodGrades] = {}
    for result in results:
        if result.period is None or result.grade is None:
            continue
        group = by_title.setdefault(result.period.title, PeriodGrades(period=result.period))
        group.grades.append(result.grade)

    grouped = list(by_title.values())
    for group in grouped:
        group.grades.sort(key=lambda g: g.course_name)
    grouped.sort(key=_period_sort_key)
    return grouped


class ReportAssembler:
    """
    Builds student reports, fetching every course of a student concurrently.

    Course fetches run in a thread pool; their results are collected by the submitting
    thread as they complete and merged only after all of them have finished, so the
    merge itself needs no locking. The time windows are applied once over the merged
    assignments of all courses.

    Args:
        client: The Canvas data source, see ``canvasreport.api.client.CanvasClient``.
        now (datetime): Timezone-aware reference time shared by every bucket of the run.
        include_older (bool, optional): Keep missing work older than 30 days. Defaults to False.
        max_workers (int, optional): Upper bound on concurrent course fetches per student.
            Defaults to one worker per course.
        max_students (int, optional): Upper bound on students built at the same time.
            Defaults to all of them.
        progress (bool, optional): Show a tqdm progress bar per student. Defaults to True.
    """

    def __init__(
        self,
        client,
        now: datetime,
        include_older: bool = False,
        max_workers: Optional[int] = None,
        max_students: Optional[int] = None,
        progress: bool = True,
    ):
        self.client = client
        self.now = now
        self.include_older = include_older
        self.max_workers = max_workers
        self.max_students = max_students
        self.progress = progress

    def build(self, student: Observee, position: int = 0) -> StudentReport:
        name = student.display_name

        try:
            courses = self.client.courses(student.id)
        except CanvasAPIError as e:
            logger.error("%s: fetching courses failed: %s", name, e)
            return StudentReport(name=name, error=f"fetching courses: {e}")

        results, warnings = self._fetch_courses(student, courses, name, position)

        assignments = [a for result in results for a in result.assignments]

        return StudentReport(
            name=name,
            windows=classify(assignments, self.now, self.include_older),
            grades=group_grades_by_period(results),
            course_count=len(courses),
            assignment_count=len(assignments),
            warnings=warnings,
        )

    def build_all(self, students: List[Observee]) -> List[StudentReport]:
        """Builds the reports of several students concurrently, in the order given."""
        if not students:
            return []

        workers = len(students)
        if self.max_students:
            workers = min(workers, self.max_students)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self.build, student, position)
                for position, student in enumerate(students)
            ]
            return [future.result() for future in futures]

    def _fetch_courses(self, student: Observee, courses: List[Course], name: str, position: int):
        aggregator = CourseAggregator(self.client, student.id, self.now)
        results: Dict[int, CourseResult] = {}
        failures: Dict[int, CourseWarning] = {}

        if not courses:
            return [], []

        workers = len(courses)
        if self.max_workers:
            workers = min(workers, self.max_workers)

        with tqdm.tqdm(
            total=len(courses),
            desc=name,
            unit="course",
            position=position,
            disable=not self.progress,
        ) as bar, ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(aggregator.fetch, course): index
                for index, course in enumerate(courses)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except CourseFetchError as e:
                    logger.warning("%s", e)
                    failures[index] = CourseWarning(e.course_name, e.message)
                bar.update(1)

        # Restore course order so merging does not depend on completion order
        ordered = [results[i] for i in sorted(results)]
        warnings: List[CourseWarning] = []
        for index in range(len(courses)):
            if index in failures:
                warnings.append(failures[index])
            elif index in results:
                warnings.extend(results[index].warnings)
        return ordered, warnings
