"""
Plain-text rendering of student reports.

Tables are built as pandas DataFrames and printed with ``DataFrame.to_string``.
"""

import shutil
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

import pandas as pd

from canvasreport.grade_reports.assignments import EnrichedAssignment, is_completed
from canvasreport.grade_reports.impact import AssignmentImpact
from canvasreport.grade_reports.student_report import PeriodGrades, StudentReport

MIN_TERMINAL_WIDTH = 80

# Due, Pts, Impact and status columns plus separators
FIXED_COLUMNS_WIDTH = 18 + 5 + 13 + 3 + 20


@dataclass
class ColumnWidths:
    subject: int
    assignment: int


def terminal_width() -> int:
    return max(shutil.get_terminal_size((120, 24)).columns, MIN_TERMINAL_WIDTH)


def calculate_column_widths(
    *assignment_lists: Iterable[EnrichedAssignment], width: Optional[int] = None
) -> ColumnWidths:
    """
    Sizes the Subject and Assignment columns to share the terminal width.

    The widths are computed across every list passed in, so all tables of all students
    line up. When the longest names do not fit, the space is split in proportion to them.

    Args:
        *assignment_lists (Iterable[EnrichedAssignment]): The assignment tables to size for.
        width (int, optional): Total width to fit into. Defaults to the terminal width.

    Returns:
        ColumnWidths: The subject and assignment column widths.
    """
    width = width or terminal_width()

    max_subject = 0
    max_assignment = 0
    for assignments in assignment_lists:
        for a in assignments:
            max_subject = max(max_subject, len(a.course_name))
            max_assignment = max(max_assignment, len(a.name))

    flexible = width - FIXED_COLUMNS_WIDTH
    total = max_subject + max_assignment
    if total <= flexible:
        return ColumnWidths(subject=max_subject, assignment=max_assignment)

    subject = flexible * max_subject // total
    return ColumnWidths(subject=subject, assignment=flexible - subject)


def truncate_string(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    if max_len <= 1:
        return text[:max_len]
    return text[: max_len - 1] + "…"


def format_assignment_name(name: str, category: str, max_width: int) -> str:
    if not category:
        return truncate_string(name, max_width)
    return truncate_string(f"{name} ({category})", max_width)


def format_due(due_at: datetime, now: datetime) -> str:
    """Formats a due timestamp in ``now``'s timezone, e.g. "thu 12/18 11pm"."""
    local = due_at.astimezone(now.tzinfo)
    hour = local.hour % 12 or 12
    return f"{local:%a} {local.month}/{local.day} {hour}{local:%p}".lower()


def format_points(points_possible: Optional[float]) -> str:
    if points_possible is None:
        return ""
    return str(int(points_possible))


def format_impact(impact: Optional[AssignmentImpact]) -> str:
    """
    Formats an impact for display.

    Negative deltas are shown as zero, and anything under 0.1 percentage points is hidden.

    Args:
        impact (AssignmentImpact, optional): The impact to format.

    Returns:
        str: "+g/-l%", "+g%", "-l%" or "-" when there is nothing to show.
    """
    if impact is None:
        return "-"

    gain = max(impact.gain, 0.0)
    loss = max(impact.loss, 0.0)

    has_gain = int(gain * 10 + 0.5) / 10 >= 0.1
    has_loss = int(loss * 10 + 0.5) / 10 >= 0.1

    if has_gain and has_loss:
        return f"+{gain:.1f}/-{loss:.1f}%"
    if has_gain:
        return f"+{gain:.1f}%"
    if has_loss:
        return f"-{loss:.1f}%"
    return "-"


def assignment_table(
    assignments: List[EnrichedAssignment],
    missing_section: bool,
    widths: ColumnWidths,
    now: datetime,
) -> str:
    """
    Renders one bucket as a text table.

    Missing rows carry the missing/graded-zero icon. In the other buckets completed work
    is marked with a check and shows no impact.
    """
    rows = []
    for a in assignments:
        row = {
            "Subject": truncate_string(a.course_name, widths.subject),
            "Assignment": format_assignment_name(a.name, a.category_name, widths.assignment),
            "Due": format_due(a.due_at, now),
            "Pts": format_points(a.points_possible),
            "Impact": format_impact(a.impact),
            "": "",
        }
        if missing_section:
            row[""] = a.status_icon
        elif is_completed(a.submission):
            row["Impact"] = ""
            row[""] = "✓"
        rows.append(row)

    df = pd.DataFrame(rows, columns=["Subject", "Assignment", "Due", "Pts", "Impact", ""])
    return df.to_string(index=False, justify="left")


def grades_table(period_grades: PeriodGrades) -> str:
    rows = []
    for g in period_grades.grades:
        if g.weighted:
            rows.append([g.course_name, f"{g.percent:.2f}%", "", "", ""])
            for cat in g.categories:
                rows.append(
                    [
                        f"  {cat.name}",
                        f"{cat.percent:.2f}%",
                        f"{cat.points:.0f}",
                        f"{cat.points_possible:.0f}",
                        f"{cat.weight:.0f}%",
                    ]
                )
        else:
            rows.append(
                [
                    g.course_name,
                    f"{g.percent:.2f}%",
                    f"{g.points:.0f}",
                    f"{g.points_possible:.0f}",
                    "",
                ]
            )

    df = pd.DataFrame(rows, columns=["Subject", "%", "Points", "Possible", "Weight"])
    return df.to_string(index=False, justify="left")


def period_heading(period_grades: PeriodGrades, now: datetime) -> str:
    period = period_grades.period
    title = period.title or "Current Period"
    date_range = ""
    if period.start_date is not None and period.end_date is not None:
        start = period.start_date.astimezone(now.tzinfo)
        end = period.end_date.astimezone(now.tzinfo)
        date_range = f" ({start:%b} {start.day} - {end:%b} {end.day})"
    return f"GRADES - {title}{date_range}"


def header_box(name: str, now: datetime) -> List[str]:
    hour = now.hour % 12 or 12
    date_line = f"Generated: {now:%a %b} {now.day}, {now:%Y} at {hour}:{now:%M %p}"
    width = max(len(name), len(date_line))
    return [
        "┌" + "─" * (width + 2) + "┐",
        f"│ {name:<{width}} │",
        f"│ {date_line:<{width}} │",
        "└" + "─" * (width + 2) + "┘",
    ]


def render_report(
    report: StudentReport, now: datetime, widths: Optional[ColumnWidths] = None
) -> str:
    if widths is None:
        widths = calculate_column_widths(report.missing, report.upcoming, report.week_ahead)

    lines = [""] + header_box(report.name, now) + [""]

    if report.error:
        lines.append(f"Could not generate report: {report.error}")
        return "\n".join(lines)

    for warning in report.warnings:
        lines.append(f"  warning: {warning}")
    if report.warnings:
        lines.append("")

    if report.missing:
        lines.append(f"MISSING/INCOMPLETE ({len(report.missing)})")
        lines.append(assignment_table(report.missing, True, widths, now))
    else:
        lines.append("MISSING/INCOMPLETE (0)")
        lines.append("  All caught up!")

    lines.append("")
    lines.append(f"DUE TODAY/TOMORROW ({report.windows.upcoming_pending} pending)")
    if report.upcoming:
        lines.append(assignment_table(report.upcoming, False, widths, now))
    else:
        lines.append("  Nothing due today or tomorrow.")

    if report.week_ahead:
        lines.append("")
        lines.append(f"WEEK AHEAD ({report.windows.week_ahead_pending} pending)")
        lines.append(assignment_table(report.week_ahead, False, widths, now))

    for period_grades in report.grades:
        lines.append("")
        lines.append(period_heading(period_grades, now))
        lines.append(grades_table(period_grades))

    lines.append("")
    lines.append(
        f"{len(report.missing)} missing | "
        f"{report.windows.upcoming_pending} due soon | "
        f"{report.windows.week_ahead_pending} this week"
    )
    return "\n".join(lines)


def render_reports(
    reports: List[StudentReport], now: datetime, width: Optional[int] = None
) -> str:
    """Renders all student reports with shared column widths, separated by a rule."""
    lists = []
    for report in reports:
        lists.extend([report.missing, report.upcoming, report.week_ahead])
    widths = calculate_column_widths(*lists, width=width)

    rule_width = widths.subject + widths.assignment + FIXED_COLUMNS_WIDTH - 1
    rendered = []
    for i, report in enumerate(reports):
        if i > 0:
            rendered.append("\n" + "═" * rule_width)
        rendered.append(render_report(report, now, widths))
    return "\n".join(rendered)
