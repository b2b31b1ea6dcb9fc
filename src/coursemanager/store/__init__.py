"""Store - Relational persistence for departments, students, courses and enrollments."""

from coursemanager.store.database import Database
from coursemanager.store.exceptions import (
    StoreError,
    TransactionError,
    UnknownEntityError,
)
from coursemanager.store.models import (
    Course,
    CourseStatus,
    Department,
    Enrollment,
    EnrollmentState,
    Student,
)
from coursemanager.store.repository import Repository
from coursemanager.store.unit_of_work import NullTransaction, Transaction, UnitOfWork

__all__ = [
    "Course",
    "CourseStatus",
    "Database",
    "Department",
    "Enrollment",
    "EnrollmentState",
    "NullTransaction",
    "Repository",
    "StoreError",
    "Student",
    "Transaction",
    "TransactionError",
    "UnitOfWork",
    "UnknownEntityError",
]
