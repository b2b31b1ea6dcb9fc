"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from coursemanager.services import (
    CourseService,
    DepartmentService,
    EnrollmentPolicy,
    EnrollmentService,
    StudentService,
)
from coursemanager.store import Database, UnitOfWork

# Global Database instance (initialized on app startup)
_database: Database | None = None
_policy: EnrollmentPolicy = EnrollmentPolicy()


def init_database(
    db_path: str = "coursemanager.db",
    transactional: bool = True,
    policy: EnrollmentPolicy | None = None,
) -> Database:
    """Initialize the global Database instance and create tables."""
    global _database, _policy  # noqa: PLW0603
    _database = Database(db_path, transactional=transactional)
    _database.create_tables()
    _policy = policy if policy is not None else EnrollmentPolicy()
    return _database


def close_database() -> None:
    """Close the global Database instance."""
    global _database  # noqa: PLW0603
    if _database is not None:
        _database.close()
        _database = None


def get_unit_of_work() -> Generator[UnitOfWork, None, None]:
    """Dependency that provides a per-request UnitOfWork."""
    if _database is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    with UnitOfWork(_database) as uow:
        yield uow


# Type alias for dependency injection
UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]


def get_department_service(uow: UnitOfWorkDep) -> DepartmentService:
    """Dependency that provides a DepartmentService."""
    return DepartmentService(uow)


def get_student_service(uow: UnitOfWorkDep) -> StudentService:
    """Dependency that provides a StudentService."""
    return StudentService(uow)


def get_course_service(uow: UnitOfWorkDep) -> CourseService:
    """Dependency that provides a CourseService."""
    return CourseService(uow)


def get_enrollment_service(uow: UnitOfWorkDep) -> EnrollmentService:
    """Dependency that provides an EnrollmentService using the configured policy."""
    return EnrollmentService(uow, policy=_policy)


DepartmentServiceDep = Annotated[DepartmentService, Depends(get_department_service)]
StudentServiceDep = Annotated[StudentService, Depends(get_student_service)]
CourseServiceDep = Annotated[CourseService, Depends(get_course_service)]
EnrollmentServiceDep = Annotated[EnrollmentService, Depends(get_enrollment_service)]
