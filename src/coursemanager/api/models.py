"""Pydantic models for REST API."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from coursemanager.store import CourseStatus, EnrollmentState

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None
    message: str | None = None


# Department models


class DepartmentCreate(BaseModel):
    """Request model for creating a department."""

    name: str = Field(..., max_length=100)
    description: str | None = Field(default=None, max_length=255)


class DepartmentUpdate(BaseModel):
    """Request model for updating a department (partial update)."""

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class DepartmentResponse(BaseModel):
    """Response model for a department."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None


def department_to_response(department: Any) -> DepartmentResponse:
    """Convert a Department model to DepartmentResponse."""
    return DepartmentResponse.model_validate(department)


# Student models


class StudentCreate(BaseModel):
    """Request model for creating a student."""

    student_code: str = Field(..., max_length=20)
    full_name: str = Field(..., max_length=100)
    email: str | None = Field(default=None, max_length=100)
    department_id: int
    date_of_birth: date
    is_active: bool = True


class StudentUpdate(BaseModel):
    """Request model for updating a student (partial update)."""

    student_code: str | None = Field(default=None, max_length=20)
    full_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=100)
    department_id: int | None = None
    date_of_birth: date | None = None
    is_active: bool | None = None


class StudentResponse(BaseModel):
    """Response model for a student."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    student_code: str
    full_name: str
    email: str | None
    department_id: int
    date_of_birth: date
    is_active: bool


def student_to_response(student: Any) -> StudentResponse:
    """Convert a Student model to StudentResponse."""
    return StudentResponse.model_validate(student)


# Course models


class CourseCreate(BaseModel):
    """Request model for creating a course."""

    course_code: str = Field(..., max_length=20)
    title: str = Field(..., max_length=100)
    credits: int
    department_id: int
    status: CourseStatus = CourseStatus.ACTIVE


class CourseUpdate(BaseModel):
    """Request model for updating a course (partial update)."""

    course_code: str | None = Field(default=None, max_length=20)
    title: str | None = Field(default=None, max_length=100)
    credits: int | None = None
    department_id: int | None = None
    status: CourseStatus | None = None


class CourseResponse(BaseModel):
    """Response model for a course."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    course_code: str
    title: str
    credits: int
    department_id: int
    status: str


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course model to CourseResponse."""
    return CourseResponse.model_validate(course)


# Enrollment models


class EnrollmentCreate(BaseModel):
    """Request model for enrolling a student. Omitted date means now."""

    student_id: int
    course_id: int
    enroll_date: date | datetime | None = Field(default=None, union_mode="left_to_right")


class GradeAssign(BaseModel):
    """Request model for assigning a grade."""

    grade: Decimal


class EnrollmentResponse(BaseModel):
    """Response model for an enrollment."""

    model_config = ConfigDict(from_attributes=True)

    student_id: int
    course_id: int
    enroll_date: datetime
    grade: float | None
    is_grade_finalized: bool
    state: EnrollmentState


def enrollment_to_response(enrollment: Any) -> EnrollmentResponse:
    """Convert an Enrollment model to EnrollmentResponse."""
    return EnrollmentResponse.model_validate(enrollment)


class EnrollmentReportResponse(BaseModel):
    """Response model for one enrollment report row."""

    model_config = ConfigDict(from_attributes=True)

    student_id: int
    course_id: int
    student_name: str | None
    course_title: str | None
    enroll_date: datetime
    grade: float | None
    is_grade_finalized: bool


def report_row_to_response(row: Any) -> EnrollmentReportResponse:
    """Convert an EnrollmentReportRow to EnrollmentReportResponse."""
    return EnrollmentReportResponse.model_validate(row)
