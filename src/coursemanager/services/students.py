"""Student service - CRUD with code, name, e-mail and department checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func

from coursemanager.logging import sanitize_for_log
from coursemanager.services.result import ErrorKind, ServiceResult, catch_faults
from coursemanager.store import Enrollment, Student

if TYPE_CHECKING:
    from datetime import date

    from coursemanager.store import UnitOfWork

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3


def _name_error(full_name: str | None) -> str | None:
    if full_name is None or not full_name.strip():
        return "Student full name cannot be empty"
    if len(full_name.strip()) < MIN_NAME_LENGTH:
        return f"Student full name must be at least {MIN_NAME_LENGTH} characters long"
    return None


def _clean_email(email: str | None) -> str | None:
    if email is None or not email.strip():
        return None
    return email.strip()


class StudentService:
    """Student CRUD.

    Student codes are unique; e-mail addresses are unique ignoring case when
    given. The department must exist. A student with enrollments cannot be
    deleted.
    """

    def __init__(self, unit_of_work: UnitOfWork) -> None:
        self._uow = unit_of_work

    def _validate(
        self,
        student_code: str,
        full_name: str,
        email: str | None,
        department_id: int,
        exclude_id: int | None = None,
    ) -> ServiceResult[Student] | None:
        error = _name_error(full_name)
        if error is not None:
            return ServiceResult.fail(error)

        if not student_code or not student_code.strip():
            return ServiceResult.fail("Student code cannot be empty")

        code_criteria = [Student.student_code == student_code]
        if exclude_id is not None:
            code_criteria.append(Student.id != exclude_id)
        if self._uow.students.exists(*code_criteria):
            return ServiceResult.fail(f"Student with code '{student_code}' already exists")

        if email is not None:
            email_criteria = [func.lower(Student.email) == email.lower()]
            if exclude_id is not None:
                email_criteria.append(Student.id != exclude_id)
            if self._uow.students.exists(*email_criteria):
                return ServiceResult.fail(f"Email '{email}' is already in use")

        if self._uow.departments.get_by_id(department_id) is None:
            return ServiceResult.fail(
                f"Department with ID {department_id} does not exist", ErrorKind.NOT_FOUND
            )
        return None

    @catch_faults("retrieving students")
    def get_all_students(self) -> ServiceResult[list[Student]]:
        """List all students."""
        return ServiceResult.ok(self._uow.students.get_all())

    @catch_faults("retrieving student")
    def get_student_by_id(self, student_id: int) -> ServiceResult[Student]:
        """Get a student by ID."""
        student = self._uow.students.get_by_id(student_id)
        if student is None:
            return ServiceResult.fail(
                f"Student with ID {student_id} not found", ErrorKind.NOT_FOUND
            )
        return ServiceResult.ok(student)

    @catch_faults("retrieving student")
    def get_student_by_code(self, student_code: str) -> ServiceResult[Student]:
        """Get a student by student code."""
        student = self._uow.students.first(Student.student_code == student_code)
        if student is None:
            return ServiceResult.fail(
                f"Student with code '{student_code}' not found", ErrorKind.NOT_FOUND
            )
        return ServiceResult.ok(student)

    @catch_faults("adding student")
    def add_student(
        self,
        student_code: str,
        full_name: str,
        department_id: int,
        date_of_birth: date,
        email: str | None = None,
        is_active: bool = True,
    ) -> ServiceResult[Student]:
        """Create a student."""
        email = _clean_email(email)
        rejection = self._validate(student_code, full_name, email, department_id)
        if rejection is not None:
            return rejection

        student = Student(
            student_code=student_code,
            full_name=full_name.strip(),
            email=email,
            department_id=department_id,
            date_of_birth=date_of_birth,
            is_active=is_active,
        )
        self._uow.students.add(student)
        self._uow.save()

        logger.info(
            "Student %s created (%s, %s)",
            student.id,
            student.student_code,
            sanitize_for_log(email or "no email"),
        )
        return ServiceResult.ok(student, f"Student '{student.full_name}' added successfully")

    @catch_faults("updating student")
    def update_student(
        self,
        student_id: int,
        student_code: str | None = None,
        full_name: str | None = None,
        email: str | None = None,
        department_id: int | None = None,
        date_of_birth: date | None = None,
        is_active: bool | None = None,
    ) -> ServiceResult[Student]:
        """Update a student. Only provided fields are changed.

        Department reassignment does not touch existing enrollments.
        """
        existing = self._uow.students.get_by_id(student_id)
        if existing is None:
            return ServiceResult.fail(
                f"Student with ID {student_id} not found", ErrorKind.NOT_FOUND
            )

        new_code = student_code if student_code is not None else existing.student_code
        new_name = full_name if full_name is not None else existing.full_name
        new_email = _clean_email(email) if email is not None else existing.email
        new_department = department_id if department_id is not None else existing.department_id

        rejection = self._validate(
            new_code, new_name, new_email, new_department, exclude_id=student_id
        )
        if rejection is not None:
            return rejection

        existing.student_code = new_code
        existing.full_name = new_name.strip()
        existing.email = new_email
        existing.department_id = new_department
        if date_of_birth is not None:
            existing.date_of_birth = date_of_birth
        if is_active is not None:
            existing.is_active = is_active

        self._uow.students.update(existing)
        self._uow.save()

        logger.info("Student %s updated", student_id)
        return ServiceResult.ok(existing, f"Student '{existing.full_name}' updated successfully")

    @catch_faults("deleting student")
    def delete_student(self, student_id: int) -> ServiceResult[None]:
        """Delete a student that has no enrollments."""
        student = self._uow.students.get_by_id(student_id)
        if student is None:
            return ServiceResult.fail(
                f"Student with ID {student_id} not found", ErrorKind.NOT_FOUND
            )

        if self._uow.enrollments.exists(Enrollment.student_id == student_id):
            return ServiceResult.fail(
                "Cannot delete student: student has active enrollments", ErrorKind.STATE_CONFLICT
            )

        self._uow.students.delete(student_id)
        self._uow.save()

        logger.info("Student %s deleted", student_id)
        return ServiceResult.ok(message="Student deleted successfully")
