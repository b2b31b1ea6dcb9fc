"""CLI entry point for Course Manager.

Each command opens the configured database, runs one service operation and
prints its outcome. Commands exit with status 1 when the operation fails.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import click

from coursemanager.config import AppConfig, ConfigError, resolve_config
from coursemanager.logging import setup_logging
from coursemanager.services import (
    CourseService,
    DepartmentService,
    EnrollmentService,
    ServiceResult,
    StudentService,
)
from coursemanager.store import CourseStatus, Database, UnitOfWork

DATE_FORMATS = ["%Y-%m-%d"]
DATETIME_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


@dataclass
class Services:
    """Services sharing one unit of work for the duration of a command."""

    departments: DepartmentService
    students: StudentService
    courses: CourseService
    enrollments: EnrollmentService


@contextmanager
def open_services(config: AppConfig) -> Iterator[Services]:
    """Open the configured database and yield services bound to one unit of work."""
    database = Database(config.get_db_path(), transactional=config.database.transactional)
    database.create_tables()
    try:
        with UnitOfWork(database) as uow:
            yield Services(
                departments=DepartmentService(uow),
                students=StudentService(uow),
                courses=CourseService(uow),
                enrollments=EnrollmentService(uow, policy=config.enrollment),
            )
    finally:
        database.close()


def report(result: ServiceResult[Any]) -> None:
    """Print a result and exit with status 1 if it failed."""
    if result.success:
        click.echo(f"✓ Success: {result.message}")
        return
    click.echo(f"✗ Failed: {result.message}", err=True)
    sys.exit(1)


def _format_grade(grade: Decimal | None) -> str:
    return f"{grade:.1f}" if grade is not None else "N/A"


@click.group()
@click.version_option(package_name="coursemanager")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to coursemanager.yaml (auto-detected if not specified)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging on the console")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Course Manager - departments, students, courses and enrollments."""
    try:
        config = resolve_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(
        log_dir=config.logging.dir,
        level="DEBUG" if verbose else config.logging.level,
        console=verbose,
    )
    ctx.obj = config


@main.command("init-db")
@click.pass_obj
def init_db(config: AppConfig) -> None:
    """Create the database tables."""
    database = Database(config.get_db_path(), transactional=config.database.transactional)
    database.create_tables()
    database.close()
    click.echo(f"Database ready at {config.get_db_path()}")


@main.command()
@click.option("--host", default=None, help="Bind address (default: from config)")
@click.option("--port", type=int, default=None, help="Port (default: from config)")
@click.pass_obj
def serve(config: AppConfig, host: str | None, port: int | None) -> None:
    """Run the REST API server."""
    import uvicorn  # noqa: PLC0415

    from coursemanager.api import create_app  # noqa: PLC0415

    uvicorn.run(
        create_app(config),
        host=host or config.api.host,
        port=port or config.api.port,
    )


# --- Listings ---


@main.command()
@click.pass_obj
def departments(config: AppConfig) -> None:
    """Display all departments."""
    with open_services(config) as services:
        result = services.departments.get_all_departments()
        if not result.success:
            report(result)
        for d in result.data or []:
            click.echo(f"{d.id} - {d.name} - {d.description or ''}")


@main.command()
@click.pass_obj
def students(config: AppConfig) -> None:
    """Display all students."""
    with open_services(config) as services:
        result = services.students.get_all_students()
        if not result.success:
            report(result)
        for s in result.data or []:
            active = "active" if s.is_active else "inactive"
            click.echo(
                f"{s.id} - {s.student_code} - {s.full_name} - {s.email or ''} "
                f"- Dept:{s.department_id} - {active}"
            )


@main.command()
@click.pass_obj
def courses(config: AppConfig) -> None:
    """Display all courses."""
    with open_services(config) as services:
        result = services.courses.get_all_courses()
        if not result.success:
            report(result)
        for c in result.data or []:
            click.echo(
                f"{c.id} - {c.course_code} - {c.title} - Credits:{c.credits} - Status:{c.status}"
            )


@main.command("report")
@click.pass_obj
def enrollment_report(config: AppConfig) -> None:
    """Display the enrollment report."""
    with open_services(config) as services:
        result = services.enrollments.enrollment_report()
        if not result.success:
            report(result)
        click.echo(
            f"{'Student':<20} | {'Course':<25} | {'Enroll Date':<12} | {'Grade':<6} | Finalized"
        )
        click.echo("-" * 85)
        for row in result.data or []:
            click.echo(
                f"{row.student_name or '':<20} | {row.course_title or '':<25} | "
                f"{row.enroll_date:%Y-%m-%d}   | {_format_grade(row.grade):<6} | "
                f"{'Yes' if row.is_grade_finalized else 'No'}"
            )


# --- Mutations ---


@main.command("add-department")
@click.argument("name")
@click.option("--description", default=None, help="Optional description")
@click.pass_obj
def add_department(config: AppConfig, name: str, description: str | None) -> None:
    """Add a new department."""
    with open_services(config) as services:
        report(services.departments.add_department(name, description=description))


@main.command("add-student")
@click.argument("student_code")
@click.argument("full_name")
@click.option("--department-id", type=int, required=True, help="Department ID")
@click.option(
    "--dob",
    type=click.DateTime(formats=DATE_FORMATS),
    required=True,
    help="Date of birth (YYYY-MM-DD)",
)
@click.option("--email", default=None, help="E-mail address")
@click.option("--inactive", is_flag=True, help="Create the student as inactive")
@click.pass_obj
def add_student(
    config: AppConfig,
    student_code: str,
    full_name: str,
    department_id: int,
    dob: datetime,
    email: str | None,
    inactive: bool,
) -> None:
    """Add a new student."""
    with open_services(config) as services:
        report(
            services.students.add_student(
                student_code=student_code,
                full_name=full_name,
                department_id=department_id,
                date_of_birth=dob.date(),
                email=email,
                is_active=not inactive,
            )
        )


@main.command("update-student")
@click.argument("student_id", type=int)
@click.option("--code", "student_code", default=None, help="New student code")
@click.option("--name", "full_name", default=None, help="New full name")
@click.option("--email", default=None, help="New e-mail address")
@click.option("--department-id", type=int, default=None, help="New department ID")
@click.option(
    "--dob",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="New date of birth (YYYY-MM-DD)",
)
@click.option("--active/--inactive", "is_active", default=None, help="Change active status")
@click.pass_obj
def update_student(
    config: AppConfig,
    student_id: int,
    student_code: str | None,
    full_name: str | None,
    email: str | None,
    department_id: int | None,
    dob: datetime | None,
    is_active: bool | None,
) -> None:
    """Update a student's information. Options left out stay unchanged."""
    with open_services(config) as services:
        report(
            services.students.update_student(
                student_id,
                student_code=student_code,
                full_name=full_name,
                email=email,
                department_id=department_id,
                date_of_birth=dob.date() if dob is not None else None,
                is_active=is_active,
            )
        )


@main.command("add-course")
@click.argument("course_code")
@click.argument("title")
@click.option("--credits", type=int, required=True, help="Credits (1-6)")
@click.option("--department-id", type=int, required=True, help="Department ID")
@click.option(
    "--status",
    type=click.Choice([s.value for s in CourseStatus], case_sensitive=False),
    default=CourseStatus.ACTIVE.value,
    show_default=True,
)
@click.pass_obj
def add_course(
    config: AppConfig,
    course_code: str,
    title: str,
    credits: int,
    department_id: int,
    status: str,
) -> None:
    """Add a new course."""
    with open_services(config) as services:
        report(
            services.courses.add_course(
                course_code=course_code,
                title=title,
                credits=credits,
                department_id=department_id,
                status=CourseStatus(status.lower()),
            )
        )


@main.command()
@click.argument("student_id", type=int)
@click.argument("course_id", type=int)
@click.option(
    "--date",
    "enroll_date",
    type=click.DateTime(formats=DATETIME_FORMATS),
    default=None,
    help="Enrollment date (default: now)",
)
@click.pass_obj
def enroll(
    config: AppConfig, student_id: int, course_id: int, enroll_date: datetime | None
) -> None:
    """Enroll a student into a course."""
    with open_services(config) as services:
        report(services.enrollments.enroll_student(student_id, course_id, enroll_date))


@main.command()
@click.argument("student_id", type=int)
@click.argument("course_id", type=int)
@click.argument("grade", type=str)
@click.option("--finalize", is_flag=True, help="Finalize the grade after assigning it")
@click.pass_obj
def grade(config: AppConfig, student_id: int, course_id: int, grade: str, finalize: bool) -> None:
    """Assign a grade (0-10) to a student's enrollment."""
    with open_services(config) as services:
        report(services.enrollments.assign_grade(student_id, course_id, grade))
        if finalize:
            report(services.enrollments.finalize_grade(student_id, course_id))


@main.command()
@click.argument("student_id", type=int)
@click.argument("course_id", type=int)
@click.pass_obj
def finalize(config: AppConfig, student_id: int, course_id: int) -> None:
    """Finalize a student's grade."""
    with open_services(config) as services:
        report(services.enrollments.finalize_grade(student_id, course_id))


@main.command()
@click.argument("student_id", type=int)
@click.argument("course_id", type=int)
@click.pass_obj
def unenroll(config: AppConfig, student_id: int, course_id: int) -> None:
    """Remove a student's enrollment."""
    with open_services(config) as services:
        report(services.enrollments.unenroll_student(student_id, course_id))


@main.command("delete-course")
@click.argument("course_id", type=int)
@click.pass_obj
def delete_course(config: AppConfig, course_id: int) -> None:
    """Delete a course without enrollments."""
    with open_services(config) as services:
        report(services.courses.delete_course(course_id))


if __name__ == "__main__":
    main()
