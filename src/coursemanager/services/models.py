"""Data models for the services package."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - dataclass field type
from decimal import Decimal  # noqa: TC003 - dataclass field type


@dataclass(frozen=True)
class EnrollmentPolicy:
    """Tunable limits of the enrollment workflow.

    Attributes:
        max_enrollments: Most enrollments a student may hold at once.
        grading_period_days: Days after the enroll date during which a grade
            may be assigned or changed.
        minimum_age: Minimum age of a student on the enroll date.
    """

    max_enrollments: int = 5
    grading_period_days: int = 30
    minimum_age: int = 18


@dataclass
class EnrollmentReportRow:
    """One line of the enrollment report.

    Attributes:
        student_id: Enrolled student's ID.
        course_id: Course ID.
        student_name: Student's full name, None if the student row is gone.
        course_title: Course title, None if the course row is gone.
        enroll_date: Enroll date (naive UTC).
        grade: Assigned grade, None when not graded yet.
        is_grade_finalized: Whether the grade is final.
    """

    student_id: int
    course_id: int
    student_name: str | None
    course_title: str | None
    enroll_date: datetime
    grade: Decimal | None
    is_grade_finalized: bool
