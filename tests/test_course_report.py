import pytest

from canvasreport.api.models import Course, Enrollment
from canvasreport.grade_reports.categories import CategoryState
from canvasreport.grade_reports.course_report import (
    CourseAggregator,
    CourseFetchError,
    build_course_grade,
)


def test_fetch_enriches_dated_assignments(fake_client, math_course, now):
    student, course = math_course

    result = CourseAggregator(fake_client, student.id, now).fetch(course)

    assert [a.id for a in result.assignments] == [101, 102, 103]
    by_id = {a.id: a for a in result.assignments}
    assert by_id[101].submission is None
    assert by_id[102].submission.score == 0.0
    assert by_id[101].course_name == "Math"
    # Unweighted courses carry no category names
    assert by_id[101].category_name == ""
    assert result.warnings == []


def test_fetch_computes_impacts(fake_client, math_course, now):
    student, course = math_course

    result = CourseAggregator(fake_client, student.id, now).fetch(course)
    by_id = {a.id: a for a in result.assignments}

    # Totals are 45/58: the graded zero counts, the ungraded work does not
    assert by_id[101].impact.gain == pytest.approx(55 / 68 * 100 - 45 / 58 * 100)
    assert by_id[101].impact.loss == pytest.approx(45 / 58 * 100 - 45 / 68 * 100)
    assert by_id[102].impact.gain == pytest.approx(53 / 58 * 100 - 45 / 58 * 100)
    assert by_id[102].impact.loss == 0.0


def test_fetch_builds_grade_for_current_period(fake_client, math_course, now, current_period):
    student, course = math_course

    result = CourseAggregator(fake_client, student.id, now).fetch(course)

    assert result.period == current_period
    assert result.grade.percent == pytest.approx(77.59)
    assert result.grade.points == 45.0
    assert result.grade.points_possible == pytest.approx(58.0, abs=0.01)
    assert not result.grade.weighted


def test_weighted_course_gets_category_names_and_rows(fake_client, math_course, now):
    student, course = math_course
    fake_client.group_lists[1][0].group_weight = 100

    result = CourseAggregator(fake_client, student.id, now).fetch(course)

    assert {a.category_name for a in result.assignments} == {"Assignments"}
    assert result.grade.weighted
    [category] = result.grade.categories
    assert (category.name, category.points, category.points_possible) == ("Assignments", 45, 58)
    assert result.assignments[0].impact.is_weighted


@pytest.mark.parametrize("method", ["assignments", "submissions"])
def test_core_fetch_failure_aborts_course(fake_client, math_course, now, method):
    student, course = math_course
    fake_client.fail(method)

    with pytest.raises(CourseFetchError) as excinfo:
        CourseAggregator(fake_client, student.id, now).fetch(course)

    assert excinfo.value.course_name == "Math"
    assert excinfo.value.message.startswith(f"fetching {method}:")


def test_missing_groups_degrade_to_no_impact(fake_client, math_course, now):
    student, course = math_course
    fake_client.fail("assignment_groups")

    result = CourseAggregator(fake_client, student.id, now).fetch(course)

    assert len(result.assignments) == 3
    assert all(a.impact is None for a in result.assignments)
    [warning] = result.warnings
    assert warning.course_name == "Math"
    assert "impact unavailable" in warning.message


def test_missing_periods_degrade_to_no_grade(fake_client, math_course, now):
    student, course = math_course
    fake_client.fail("grading_periods")

    result = CourseAggregator(fake_client, student.id, now).fetch(course)

    assert result.period is None
    assert result.grade is None
    assert str(result.warnings[0]).startswith("Math: fetching grading periods:")
    assert ("enrollments", 1) not in fake_client.calls


def test_enrollment_failure_degrades_to_no_grade(fake_client, math_course, now):
    student, course = math_course
    fake_client.fail("enrollments")

    result = CourseAggregator(fake_client, student.id, now).fetch(course)

    assert result.period is not None
    assert result.grade is None
    assert "fetching current grade" in result.warnings[0].message
    assert len(result.assignments) == 3


def test_no_current_period_means_no_grade(fake_client, math_course, now):
    student, course = math_course
    fake_client.period_lists[1] = []

    result = CourseAggregator(fake_client, student.id, now).fetch(course)

    assert result.grade is None
    assert result.warnings == []


def test_course_without_name(fake_client, now):
    fake_client.assignment_lists[5] = []
    result = CourseAggregator(fake_client, 42, now).fetch(Course(id=5))
    assert result.course.display_name == "Unknown Course"


def test_build_course_grade_without_score():
    assert build_course_grade("Art", None, False, []) is None
    assert build_course_grade("Art", Enrollment(current_points=3), False, []) is None


def test_build_course_grade_unweighted_zero_percent():
    grade = build_course_grade("Art", Enrollment(current_score=0.0, current_points=0.0), False, [])
    assert (grade.percent, grade.points, grade.points_possible) == (0.0, 0.0, 0.0)


def test_build_course_grade_weighted():
    states = [CategoryState(1, "Labs", 30, 27, 30), CategoryState(2, "Bonus", 0, 5, 5)]
    grade = build_course_grade("Chem", Enrollment(current_score=91.2), True, states)
    assert grade.weighted
    assert [c.name for c in grade.categories] == ["Labs"]
