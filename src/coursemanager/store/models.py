"""SQLAlchemy models for the course management store."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from decimal import Decimal  # noqa: TC003 - used at runtime for SQLAlchemy
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


class CourseStatus(StrEnum):
    """Course status enum."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class EnrollmentState(StrEnum):
    """Grading state of an enrollment, derived from its stored columns."""

    ENROLLED = "enrolled"
    GRADED = "graded"
    FINALIZED = "finalized"


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Department(Base):
    """Department model.

    Students and courses reference a department by ``department_id`` only;
    there is no owning collection on this side.
    """

    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __init__(
        self,
        name: str,
        description: str | None = None,
        id: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if id is not None:
            self.id = id
        self.name = name
        self.description = description

    def __repr__(self) -> str:
        return f"<Department(id={self.id!r}, name={self.name!r})>"


class Student(Base):
    """Student model."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(100), nullable=True, unique=True)
    department_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=False
    )
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False)

    def __init__(
        self,
        student_code: str,
        full_name: str,
        department_id: int,
        date_of_birth: date,
        email: str | None = None,
        is_active: bool = True,
        id: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if id is not None:
            self.id = id
        self.student_code = student_code
        self.full_name = full_name
        self.email = email
        self.department_id = department_id
        self.date_of_birth = date_of_birth
        self.is_active = is_active

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id!r}, student_code={self.student_code!r}, "
            f"department_id={self.department_id!r})>"
        )


class Course(Base):
    """Course model."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)
    department_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)

    def __init__(
        self,
        course_code: str,
        title: str,
        credits: int,
        department_id: int,
        status: str | None = None,
        id: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if id is not None:
            self.id = id
        self.course_code = course_code
        self.title = title
        self.credits = credits
        self.department_id = department_id
        self.status = status if status is not None else CourseStatus.ACTIVE.value

    @property
    def course_status(self) -> CourseStatus:
        """Get status as CourseStatus enum."""
        return CourseStatus(self.status)

    @course_status.setter
    def course_status(self, value: CourseStatus) -> None:
        """Set status from CourseStatus enum."""
        self.status = value.value

    def __repr__(self) -> str:
        return (
            f"<Course(id={self.id!r}, course_code={self.course_code!r}, status={self.status!r})>"
        )


class Enrollment(Base):
    """Enrollment model - one row per (student, course) pair.

    ``enroll_date`` is stored as a naive UTC datetime.
    """

    __tablename__ = "enrollments"

    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id"), primary_key=True
    )
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id"), primary_key=True)
    enroll_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    grade: Mapped[Decimal | None] = mapped_column(Numeric(3, 1), nullable=True)
    is_grade_finalized: Mapped[bool] = mapped_column(Boolean, nullable=False)

    def __init__(
        self,
        student_id: int,
        course_id: int,
        enroll_date: datetime,
        grade: Decimal | None = None,
        is_grade_finalized: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_id = course_id
        self.enroll_date = enroll_date
        self.grade = grade
        self.is_grade_finalized = is_grade_finalized

    @property
    def state(self) -> EnrollmentState:
        """Current grading state."""
        if self.is_grade_finalized:
            return EnrollmentState.FINALIZED
        if self.grade is not None:
            return EnrollmentState.GRADED
        return EnrollmentState.ENROLLED

    def __repr__(self) -> str:
        return (
            f"<Enrollment(student_id={self.student_id!r}, course_id={self.course_id!r}, "
            f"grade={self.grade!r}, finalized={self.is_grade_finalized!r})>"
        )
