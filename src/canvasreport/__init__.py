from canvasreport import api
from canvasreport import cli
from canvasreport import config
from canvasreport import grade_reports
from canvasreport import printing
from canvasreport import utils

from canvasreport.api import (Assignment, AssignmentGroup, CanvasAPIError,
                              CanvasClient, Course, Enrollment,
                              GradingPeriod, GroupAssignment, Observee,
                              Submission,)
from canvasreport.config import (Config, ConfigError, config_path,
                                 load_config, run_setup, save_config,)
from canvasreport.grade_reports import (AssignmentImpact, CourseAggregator,
                                        EnrichedAssignment, ReportAssembler,
                                        StudentReport, TimeWindows,
                                        calculate_assignment_impacts,
                                        classify,)
from canvasreport.printing import (render_report, render_reports,)
from canvasreport.utils import (Logger, configure_logging,)

__all__ = ['Assignment', 'AssignmentGroup', 'AssignmentImpact',
           'CanvasAPIError', 'CanvasClient', 'Config', 'ConfigError',
           'Course', 'CourseAggregator', 'EnrichedAssignment', 'Enrollment',
           'GradingPeriod', 'GroupAssignment', 'Logger', 'Observee',
           'ReportAssembler', 'StudentReport', 'Submission', 'TimeWindows',
           'api', 'calculate_assignment_impacts', 'classify', 'cli',
           'config', 'config_path', 'configure_logging', 'grade_reports',
           'load_config', 'printing', 'render_report', 'render_reports',
           'run_setup', 'save_config', 'utils']
