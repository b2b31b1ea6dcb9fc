"""Department service - CRUD with name validation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func

from coursemanager.services.result import ErrorKind, ServiceResult, catch_faults
from coursemanager.store import Course, Department, Student

if TYPE_CHECKING:
    from coursemanager.store import UnitOfWork

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3


def _name_error(name: str | None) -> str | None:
    if name is None or not name.strip():
        return "Department name cannot be empty"
    if len(name.strip()) < MIN_NAME_LENGTH:
        return f"Department name must be at least {MIN_NAME_LENGTH} characters long"
    return None


class DepartmentService:
    """Department CRUD.

    Names are trimmed and unique ignoring case. A department cannot be
    deleted while students or courses reference it.
    """

    def __init__(self, unit_of_work: UnitOfWork) -> None:
        self._uow = unit_of_work

    def _name_taken(self, name: str, exclude_id: int | None = None) -> bool:
        criteria = [func.lower(Department.name) == name.strip().lower()]
        if exclude_id is not None:
            criteria.append(Department.id != exclude_id)
        return self._uow.departments.exists(*criteria)

    @catch_faults("retrieving departments")
    def get_all_departments(self) -> ServiceResult[list[Department]]:
        """List all departments."""
        return ServiceResult.ok(self._uow.departments.get_all())

    @catch_faults("retrieving department")
    def get_department_by_id(self, department_id: int) -> ServiceResult[Department]:
        """Get a department by ID."""
        department = self._uow.departments.get_by_id(department_id)
        if department is None:
            return ServiceResult.fail(
                f"Department with ID {department_id} not found", ErrorKind.NOT_FOUND
            )
        return ServiceResult.ok(department)

    @catch_faults("adding department")
    def add_department(
        self, name: str, description: str | None = None
    ) -> ServiceResult[Department]:
        """Create a department."""
        error = _name_error(name)
        if error is not None:
            return ServiceResult.fail(error)

        if self._name_taken(name):
            return ServiceResult.fail(f"Department with name '{name}' already exists")

        department = Department(name=name.strip(), description=description)
        self._uow.departments.add(department)
        self._uow.save()

        logger.info("Department %s created: %s", department.id, department.name)
        return ServiceResult.ok(department, f"Department '{department.name}' added successfully")

    @catch_faults("updating department")
    def update_department(
        self,
        department_id: int,
        name: str | None = None,
        description: str | None = None,
    ) -> ServiceResult[Department]:
        """Update a department. Only provided fields are changed."""
        existing = self._uow.departments.get_by_id(department_id)
        if existing is None:
            return ServiceResult.fail(
                f"Department with ID {department_id} not found", ErrorKind.NOT_FOUND
            )

        new_name = name if name is not None else existing.name
        error = _name_error(new_name)
        if error is not None:
            return ServiceResult.fail(error)

        if self._name_taken(new_name, exclude_id=department_id):
            return ServiceResult.fail(f"Department with name '{new_name}' already exists")

        existing.name = new_name.strip()
        if description is not None:
            existing.description = description

        self._uow.departments.update(existing)
        self._uow.save()

        logger.info("Department %s updated", department_id)
        return ServiceResult.ok(existing, f"Department '{existing.name}' updated successfully")

    @catch_faults("deleting department")
    def delete_department(self, department_id: int) -> ServiceResult[None]:
        """Delete a department that has no students and no courses."""
        department = self._uow.departments.get_by_id(department_id)
        if department is None:
            return ServiceResult.fail(
                f"Department with ID {department_id} not found", ErrorKind.NOT_FOUND
            )

        if self._uow.students.exists(Student.department_id == department_id):
            return ServiceResult.fail(
                "Cannot delete department: it has students enrolled", ErrorKind.STATE_CONFLICT
            )

        if self._uow.courses.exists(Course.department_id == department_id):
            return ServiceResult.fail(
                "Cannot delete department: it has courses assigned", ErrorKind.STATE_CONFLICT
            )

        self._uow.departments.delete(department_id)
        self._uow.save()

        logger.info("Department %s deleted", department_id)
        return ServiceResult.ok(message="Department deleted successfully")
