"""Services - Business rules for departments, students, courses and enrollments."""

from coursemanager.services.courses import CourseService
from coursemanager.services.departments import DepartmentService
from coursemanager.services.enrollment import EnrollmentService
from coursemanager.services.models import EnrollmentPolicy, EnrollmentReportRow
from coursemanager.services.result import ErrorKind, ServiceResult, catch_faults
from coursemanager.services.students import StudentService

__all__ = [
    "CourseService",
    "DepartmentService",
    "EnrollmentPolicy",
    "EnrollmentReportRow",
    "EnrollmentService",
    "ErrorKind",
    "ServiceResult",
    "StudentService",
    "catch_faults",
]
