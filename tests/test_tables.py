from datetime import datetime, timedelta, timezone

import pytest
from dateutil import tz

from canvasreport.api.models import GradingPeriod
from canvasreport.grade_reports.categories import CategoryGrade
from canvasreport.grade_reports.course_report import CourseGrade, CourseWarning
from canvasreport.grade_reports.impact import AssignmentImpact
from canvasreport.grade_reports.student_report import (
    PeriodGrades,
    ReportAssembler,
    StudentReport,
)
from canvasreport.printing.tables import (
    FIXED_COLUMNS_WIDTH,
    calculate_column_widths,
    format_due,
    format_impact,
    grades_table,
    header_box,
    period_heading,
    render_report,
    render_reports,
    truncate_string,
)


@pytest.mark.parametrize(
    "impact, expected",
    [
        (None, "-"),
        (AssignmentImpact(0.0, 0.0), "-"),
        (AssignmentImpact(0.04, 0.049), "-"),
        (AssignmentImpact(1.0, 19.0), "+1.0/-19.0%"),
        (AssignmentImpact(2.345, 0.0), "+2.3%"),
        (AssignmentImpact(0.0, 4.0), "-4.0%"),
        (AssignmentImpact(-3.0, 2.0), "-2.0%"),
        (AssignmentImpact(0.06, -1.0), "+0.1%"),
    ],
)
def test_format_impact(impact, expected):
    assert format_impact(impact) == expected


def test_truncate_string():
    assert truncate_string("Algebra", 10) == "Algebra"
    assert truncate_string("Introduction to Algebra", 10) == "Introduct…"
    assert len(truncate_string("Introduction to Algebra", 10)) == 10


def test_format_due_uses_local_time(now):
    due = datetime(2025, 1, 9, 4, 59, tzinfo=timezone.utc)
    assert format_due(due, now) == "wed 1/8 11pm"
    assert format_due(now + timedelta(hours=2), now) == "wed 1/8 12pm"


def test_format_due_across_daylight_saving_change():
    now = datetime(2026, 10, 30, 10, 0, tzinfo=tz.gettz("America/New_York"))
    due = datetime(2026, 11, 3, 4, 59, tzinfo=timezone.utc)
    assert format_due(due, now) == "mon 11/2 11pm"


def test_column_widths_fit(make_assignment):
    a = make_assignment(name="Essay", course_name="English")
    widths = calculate_column_widths([a], width=120)
    assert (widths.subject, widths.assignment) == (7, 5)


def test_column_widths_scale_proportionally(make_assignment):
    a = make_assignment(name="A" * 60, course_name="S" * 40)

    widths = calculate_column_widths([a], [], width=100)

    flexible = 100 - FIXED_COLUMNS_WIDTH
    assert widths.subject == flexible * 40 // 100
    assert widths.subject + widths.assignment == flexible


def test_header_box(now):
    lines = header_box("Alex Doe", now)
    assert "Generated: Wed Jan 8, 2025 at 10:00 AM" in lines[2]
    assert lines[0].startswith("┌") and lines[-1].startswith("└")
    assert len({len(line) for line in lines}) == 1


def test_period_heading(now, current_period):
    assert period_heading(PeriodGrades(current_period), now) == "GRADES - Q3 (Jan 5 - Mar 27)"
    assert period_heading(PeriodGrades(GradingPeriod(key="1")), now) == "GRADES - Current Period"


def test_grades_table_weighted_rows():
    grades = PeriodGrades(
        GradingPeriod(key="1", title="Q3"),
        [
            CourseGrade("Art", 95.0, points=19, points_possible=20),
            CourseGrade(
                "Chemistry",
                88.5,
                weighted=True,
                categories=[CategoryGrade("Labs", 27, 30, 90.0, 40)],
            ),
        ],
    )

    table = grades_table(grades)

    assert "95.00%" in table
    assert "88.50%" in table
    assert "Labs" in table
    assert "40%" in table


def test_render_report(fake_client, math_course, now):
    student, _ = math_course
    report = ReportAssembler(fake_client, now, progress=False).build(student)

    text = render_report(report, now)

    assert "Alex Doe" in text
    assert "MISSING/INCOMPLETE (2)" in text
    assert "✗" in text
    assert "Graded" not in text
    assert "DUE TODAY/TOMORROW (0 pending)" in text
    assert "Nothing due today or tomorrow." in text
    assert "WEEK AHEAD (0 pending)" in text
    assert "✓" in text
    assert "GRADES - Q3" in text
    assert "77.59%" in text
    assert text.rstrip().endswith("2 missing | 0 due soon | 0 this week")


def test_render_empty_report(now):
    text = render_report(StudentReport(name="Sam"), now)

    assert "MISSING/INCOMPLETE (0)" in text
    assert "All caught up!" in text
    assert "WEEK AHEAD" not in text
    assert "GRADES" not in text


def test_render_report_lists_warnings_and_errors(now):
    warned = StudentReport(name="Sam", warnings=[CourseWarning("Art", "fetching grading periods: boom")])
    failed = StudentReport(name="Kim", error="fetching courses: boom")

    assert "warning: Art: fetching grading periods: boom" in render_report(warned, now)
    failed_text = render_report(failed, now)
    assert "Could not generate report: fetching courses: boom" in failed_text
    assert "MISSING" not in failed_text


def test_render_reports_separates_students(now):
    text = render_reports([StudentReport(name="Sam"), StudentReport(name="Kim")], now, width=100)

    assert text.count("═") > 0
    assert text.index("Sam") < text.index("═") < text.index("Kim")
