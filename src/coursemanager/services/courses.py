"""Course service - CRUD with credit, code and status checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coursemanager.services.result import ErrorKind, ServiceResult, catch_faults
from coursemanager.store import Course, CourseStatus, Enrollment

if TYPE_CHECKING:
    from coursemanager.store import UnitOfWork

logger = logging.getLogger(__name__)

MIN_CREDITS = 1
MAX_CREDITS = 6


class CourseService:
    """Course CRUD.

    Codes are unique, credits lie in 1..6 and the department must exist.
    Inactive or archived courses are read-only, and a course with
    enrollments cannot be deleted.
    """

    def __init__(self, unit_of_work: UnitOfWork) -> None:
        self._uow = unit_of_work

    def _validate(
        self,
        course_code: str,
        title: str,
        credits: int,
        department_id: int,
        exclude_id: int | None = None,
    ) -> ServiceResult[Course] | None:
        if credits < MIN_CREDITS or credits > MAX_CREDITS:
            return ServiceResult.fail(
                f"Course credits must be between {MIN_CREDITS} and {MAX_CREDITS}"
            )

        if not course_code or not course_code.strip():
            return ServiceResult.fail("Course code cannot be empty")

        if not title or not title.strip():
            return ServiceResult.fail("Course title cannot be empty")

        criteria = [Course.course_code == course_code]
        if exclude_id is not None:
            criteria.append(Course.id != exclude_id)
        if self._uow.courses.exists(*criteria):
            return ServiceResult.fail(f"Course with code '{course_code}' already exists")

        if self._uow.departments.get_by_id(department_id) is None:
            return ServiceResult.fail(
                f"Department with ID {department_id} does not exist", ErrorKind.NOT_FOUND
            )
        return None

    @catch_faults("retrieving courses")
    def get_all_courses(self) -> ServiceResult[list[Course]]:
        """List all courses."""
        return ServiceResult.ok(self._uow.courses.get_all())

    @catch_faults("retrieving course")
    def get_course_by_id(self, course_id: int) -> ServiceResult[Course]:
        """Get a course by ID."""
        course = self._uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail(f"Course with ID {course_id} not found", ErrorKind.NOT_FOUND)
        return ServiceResult.ok(course)

    @catch_faults("retrieving course")
    def get_course_by_code(self, course_code: str) -> ServiceResult[Course]:
        """Get a course by course code."""
        course = self._uow.courses.first(Course.course_code == course_code)
        if course is None:
            return ServiceResult.fail(
                f"Course with code '{course_code}' not found", ErrorKind.NOT_FOUND
            )
        return ServiceResult.ok(course)

    @catch_faults("adding course")
    def add_course(
        self,
        course_code: str,
        title: str,
        credits: int,
        department_id: int,
        status: CourseStatus = CourseStatus.ACTIVE,
    ) -> ServiceResult[Course]:
        """Create a course."""
        rejection = self._validate(course_code, title, credits, department_id)
        if rejection is not None:
            return rejection

        course = Course(
            course_code=course_code,
            title=title,
            credits=credits,
            department_id=department_id,
            status=CourseStatus(status).value,
        )
        self._uow.courses.add(course)
        self._uow.save()

        logger.info("Course %s created (%s)", course.id, course.course_code)
        return ServiceResult.ok(course, f"Course '{course.title}' added successfully")

    @catch_faults("updating course")
    def update_course(
        self,
        course_id: int,
        course_code: str | None = None,
        title: str | None = None,
        credits: int | None = None,
        department_id: int | None = None,
        status: CourseStatus | None = None,
    ) -> ServiceResult[Course]:
        """Update an active course. Only provided fields are changed."""
        existing = self._uow.courses.get_by_id(course_id)
        if existing is None:
            return ServiceResult.fail(f"Course with ID {course_id} not found", ErrorKind.NOT_FOUND)

        if existing.course_status in (CourseStatus.INACTIVE, CourseStatus.ARCHIVED):
            return ServiceResult.fail(
                f"Cannot update course: course status is {existing.status}",
                ErrorKind.STATE_CONFLICT,
            )

        new_code = course_code if course_code is not None else existing.course_code
        new_title = title if title is not None else existing.title
        new_credits = credits if credits is not None else existing.credits
        new_department = department_id if department_id is not None else existing.department_id

        rejection = self._validate(
            new_code, new_title, new_credits, new_department, exclude_id=course_id
        )
        if rejection is not None:
            return rejection

        existing.course_code = new_code
        existing.title = new_title
        existing.credits = new_credits
        existing.department_id = new_department
        if status is not None:
            existing.course_status = CourseStatus(status)

        self._uow.courses.update(existing)
        self._uow.save()

        logger.info("Course %s updated (status=%s)", course_id, existing.status)
        return ServiceResult.ok(existing, f"Course '{existing.title}' updated successfully")

    @catch_faults("deleting course")
    def delete_course(self, course_id: int) -> ServiceResult[None]:
        """Delete a course that has no enrollments."""
        course = self._uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail(f"Course with ID {course_id} not found", ErrorKind.NOT_FOUND)

        if self._uow.enrollments.exists(Enrollment.course_id == course_id):
            return ServiceResult.fail(
                "Cannot delete course: course has active enrollments", ErrorKind.STATE_CONFLICT
            )

        self._uow.courses.delete(course_id)
        self._uow.save()

        logger.info("Course %s deleted", course_id)
        return ServiceResult.ok(message="Course deleted successfully")
