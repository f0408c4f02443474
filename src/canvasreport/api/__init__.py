from canvasreport.api import client
from canvasreport.api import models

from canvasreport.api.client import (CanvasAPIError, CanvasClient,)
from canvasreport.api.models import (Assignment, AssignmentGroup, Course,
                                     Enrollment, GradingPeriod,
                                     GroupAssignment, Observee, Submission,
                                     parse_float, parse_timestamp,)

__all__ = ['Assignment', 'AssignmentGroup', 'CanvasAPIError', 'CanvasClient',
           'Course', 'Enrollment', 'GradingPeriod', 'GroupAssignment',
           'Observee', 'Submission', 'client', 'models', 'parse_float',
           'parse_timestamp']
