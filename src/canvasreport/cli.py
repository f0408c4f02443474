import argparse
import logging
import sys
from datetime import datetime

from dateutil import tz

from canvasreport.api.client import CanvasAPIError, CanvasClient
from canvasreport.config import ConfigError, load_config, run_setup
from canvasreport.grade_reports.student_report import ReportAssembler
from canvasreport.printing.tables import render_reports
from canvasreport.utils.logging import Logger, configure_logging

logger = logging.getLogger(__name__)

# Concurrent students times course fetches per student, bounded by the client pool size
MAX_STUDENT_WORKERS = 4
MAX_COURSE_WORKERS = 8


def current_time() -> datetime:
    """The current moment in the local timezone, with its daylight-saving rules."""
    return datetime.now(tz=tz.tzlocal())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canvas-report",
        description="Print missing work, upcoming assignments and current grades for every student observed by a Canvas parent account.",
    )

    parser.add_argument(
        "--all",
        action="store_true",
        help="include missing assignments older than 30 days",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log debug output to stderr",
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="hide the per-student progress bars",
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    status = Logger(verbose=True, log=args.verbose)

    try:
        config = load_config()
    except FileNotFoundError:
        try:
            config = run_setup()
        except (ConfigError, OSError) as e:
            print(f"Setup failed: {e}", file=sys.stderr)
            return 1
    except (ConfigError, OSError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    client = CanvasClient(
        config.base_url,
        config.access_token,
        pool_maxsize=MAX_STUDENT_WORKERS * MAX_COURSE_WORKERS,
    )

    try:
        students = client.observees()
    except CanvasAPIError as e:
        print(f"Error: fetching observees: {e}", file=sys.stderr)
        return 1

    if not students:
        print("No students found. Is this account linked to a student as an observer?")
        return 0

    now = current_time()
    assembler = ReportAssembler(
        client,
        now,
        include_older=args.all,
        max_workers=MAX_COURSE_WORKERS,
        max_students=MAX_STUDENT_WORKERS,
        progress=not args.no_progress,
    )
    reports = assembler.build_all(students)

    for report in reports:
        if report.error:
            status.print_and_log(f"[✘] {report.name}: {report.error}", file=sys.stderr)
            continue
        status.print_and_log(
            f"[✔] {report.name}: {report.course_count} courses, "
            f"{report.assignment_count} assignments, {report.grade_count} grades",
            file=sys.stderr,
        )

    print(render_reports(reports, now))
    return 0


if __name__ == "__main__":
    sys.exit(main())
