"""REST API for Course Manager."""

from coursemanager.api.app import app, create_app
from coursemanager.api.models import (
    APIResponse,
    CourseCreate,
    DepartmentCreate,
    EnrollmentCreate,
    EnrollmentResponse,
    GradeAssign,
    StudentCreate,
)

__all__ = [
    "APIResponse",
    "CourseCreate",
    "DepartmentCreate",
    "EnrollmentCreate",
    "EnrollmentResponse",
    "GradeAssign",
    "StudentCreate",
    "app",
    "create_app",
]
