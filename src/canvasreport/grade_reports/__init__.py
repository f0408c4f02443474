from canvasreport.grade_reports import assignments
from canvasreport.grade_reports import categories
from canvasreport.grade_reports import course_report
from canvasreport.grade_reports import impact
from canvasreport.grade_reports import student_report
from canvasreport.grade_reports import windows

from canvasreport.grade_reports.assignments import (EnrichedAssignment,
                                                    MISSING, awaiting_grade,
                                                    determine_status,
                                                    is_completed,
                                                    is_graded_zero,
                                                    is_missing,)
from canvasreport.grade_reports.categories import (CategoryGrade,
                                                   CategoryState,
                                                   assignment_in_period,
                                                   build_category_grades,
                                                   build_category_states,
                                                   counts_in_totals,
                                                   current_grading_period,
                                                   has_points,
                                                   is_weighted_grading,)
from canvasreport.grade_reports.course_report import (CourseAggregator,
                                                      CourseFetchError,
                                                      CourseGrade,
                                                      CourseResult,
                                                      CourseWarning,
                                                      build_course_grade,)
from canvasreport.grade_reports.impact import (AssignmentImpact,
                                               calculate_assignment_impacts,
                                               graded_zero_unweighted_impact,
                                               graded_zero_weighted_impact,
                                               percent, unweighted_impact,
                                               weighted_impact,
                                               weighted_overall,)
from canvasreport.grade_reports.student_report import (PeriodGrades,
                                                       ReportAssembler,
                                                       StudentReport,
                                                       group_grades_by_period,)
from canvasreport.grade_reports.windows import (FRIDAY, MISSING_LOOKBACK,
                                                SATURDAY, SUNDAY, TimeWindows,
                                                classify, count_pending,
                                                end_of_school_week,
                                                local_date,
                                                missing_assignments,
                                                next_school_day, sort_by_due,
                                                upcoming_assignments,
                                                week_ahead_assignments,)

__all__ = ['AssignmentImpact', 'CategoryGrade', 'CategoryState',
           'CourseAggregator', 'CourseFetchError', 'CourseGrade',
           'CourseResult', 'CourseWarning', 'EnrichedAssignment', 'FRIDAY',
           'MISSING', 'MISSING_LOOKBACK', 'PeriodGrades', 'ReportAssembler',
           'SATURDAY', 'SUNDAY', 'StudentReport', 'TimeWindows',
           'assignment_in_period', 'assignments', 'awaiting_grade',
           'build_category_grades', 'build_category_states',
           'build_course_grade', 'calculate_assignment_impacts',
           'categories', 'classify', 'count_pending', 'counts_in_totals',
           'course_report', 'current_grading_period', 'determine_status',
           'end_of_school_week', 'graded_zero_unweighted_impact',
           'graded_zero_weighted_impact', 'group_grades_by_period',
           'has_points', 'impact', 'is_completed', 'is_graded_zero',
           'is_missing', 'is_weighted_grading', 'local_date',
           'missing_assignments', 'next_school_day', 'percent',
           'sort_by_due', 'student_report', 'unweighted_impact',
           'upcoming_assignments', 'week_ahead_assignments',
           'weighted_impact', 'weighted_overall', 'windows']
