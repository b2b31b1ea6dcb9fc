"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator
from datetime import UTC, date, datetime

import pytest

from coursemanager.store import Course, Database, Department, Student, UnitOfWork

# A fixed instant so age and grading-window rules are deterministic
NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def now() -> datetime:
    """The fixed current instant used by clock-driven tests."""
    return NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock pinned to NOW."""
    return lambda: NOW


@pytest.fixture
def database() -> Iterator[Database]:
    """In-memory database with tables created."""
    db = Database(":memory:")
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def uow(database: Database) -> Iterator[UnitOfWork]:
    """Unit of work on the in-memory database."""
    with UnitOfWork(database) as unit:
        yield unit


@pytest.fixture
def seeded(uow: UnitOfWork) -> UnitOfWork:
    """Two departments, three students and four courses.

    Department 1: student 1 (adult, active), student 2 (adult, inactive),
    student 3 (minor on NOW). Courses 1 and 2 active, course 3 inactive,
    course 4 belongs to department 2.
    """
    uow.departments.add(Department(name="Computer Science", description="CS", id=1))
    uow.departments.add(Department(name="Mathematics", id=2))
    uow.save()

    uow.students.add(
        Student(
            student_code="S001",
            full_name="Ada Lovelace",
            department_id=1,
            date_of_birth=date(2000, 1, 15),
            email="ada@uni.edu",
            id=1,
        )
    )
    uow.students.add(
        Student(
            student_code="S002",
            full_name="Alan Turing",
            department_id=1,
            date_of_birth=date(1999, 6, 23),
            is_active=False,
            id=2,
        )
    )
    uow.students.add(
        Student(
            student_code="S003",
            full_name="Young Student",
            department_id=1,
            date_of_birth=date(2010, 5, 1),
            id=3,
        )
    )
    uow.courses.add(Course(course_code="CS101", title="Intro", credits=3, department_id=1, id=1))
    uow.courses.add(Course(course_code="CS102", title="Data", credits=4, department_id=1, id=2))
    uow.courses.add(
        Course(
            course_code="CS900",
            title="Retired",
            credits=2,
            department_id=1,
            status="inactive",
            id=3,
        )
    )
    uow.courses.add(Course(course_code="MA101", title="Calculus", credits=5, department_id=2, id=4))
    uow.save()
    return uow
