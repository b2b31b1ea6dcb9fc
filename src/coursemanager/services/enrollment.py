"""Enrollment workflow - enroll, grade, finalize and unenroll.

An enrollment moves through ``enrolled -> graded -> finalized`` and can be
removed from any state. Every rule check runs in a fixed order and the first
failure is returned as a ``ServiceResult``; enroll and unenroll run inside a
transaction that is rolled back on any failure.
"""

from __future__ import annotations

import logging
from datetime import UTC, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from coursemanager.services.clock import (
    Clock,
    age_on,
    as_aware,
    calendar_day,
    local_now,
    to_utc_naive,
)
from coursemanager.services.models import EnrollmentPolicy, EnrollmentReportRow
from coursemanager.services.result import ErrorKind, ServiceResult
from coursemanager.store import CourseStatus, Enrollment

if TYPE_CHECKING:
    from datetime import date, datetime

    from coursemanager.store import UnitOfWork

logger = logging.getLogger(__name__)

MIN_GRADE = Decimal("0")
MAX_GRADE = Decimal("10")
GRADE_STEP = Decimal("0.1")


def _parse_grade(value: Any) -> Decimal | None:
    """Convert a grade to Decimal; None if it is not a finite number."""
    if isinstance(value, bool):
        return None
    try:
        grade = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return grade if grade.is_finite() else None


class EnrollmentService:
    """Business rules for the student/course enrollment lifecycle.

    The unit of work is the only storage dependency. ``clock`` supplies the
    current instant (an aware datetime) and exists so time-dependent rules
    can be pinned in tests.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        policy: EnrollmentPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            unit_of_work: Unit of work giving access to all repositories.
            policy: Enrollment limits. Defaults to 5 courses, 30 days, age 18.
            clock: Returns the current time. Defaults to local wall clock.
        """
        self._uow = unit_of_work
        self.policy = policy if policy is not None else EnrollmentPolicy()
        self._clock = clock if clock is not None else local_now

    def _now(self) -> datetime:
        return as_aware(self._clock())

    def _find(self, student_id: int, course_id: int) -> Enrollment | None:
        return self._uow.enrollments.first(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )

    # --- Queries ---

    def get_all_enrollments(self) -> ServiceResult[list[Enrollment]]:
        """List every enrollment."""
        try:
            return ServiceResult.ok(self._uow.enrollments.get_all())
        except Exception as e:
            logger.exception("Error retrieving enrollments")
            return ServiceResult.fail(
                f"Error retrieving enrollments: {e}", ErrorKind.INFRASTRUCTURE
            )

    def get_enrollment(self, student_id: int, course_id: int) -> ServiceResult[Enrollment]:
        """Get the enrollment of one student in one course."""
        try:
            enrollment = self._find(student_id, course_id)
        except Exception as e:
            logger.exception("Error retrieving enrollment %s/%s", student_id, course_id)
            return ServiceResult.fail(f"Error retrieving enrollment: {e}", ErrorKind.INFRASTRUCTURE)
        if enrollment is None:
            return ServiceResult.fail(
                f"Enrollment not found for student {student_id} in course {course_id}",
                ErrorKind.NOT_FOUND,
            )
        return ServiceResult.ok(enrollment)

    def get_enrollments_by_student(self, student_id: int) -> ServiceResult[list[Enrollment]]:
        """List a student's enrollments."""
        try:
            return ServiceResult.ok(
                self._uow.enrollments.find(Enrollment.student_id == student_id)
            )
        except Exception as e:
            logger.exception("Error retrieving enrollments of student %s", student_id)
            return ServiceResult.fail(
                f"Error retrieving enrollments: {e}", ErrorKind.INFRASTRUCTURE
            )

    def get_enrollments_by_course(self, course_id: int) -> ServiceResult[list[Enrollment]]:
        """List a course's enrollments."""
        try:
            return ServiceResult.ok(self._uow.enrollments.find(Enrollment.course_id == course_id))
        except Exception as e:
            logger.exception("Error retrieving enrollments of course %s", course_id)
            return ServiceResult.fail(
                f"Error retrieving enrollments: {e}", ErrorKind.INFRASTRUCTURE
            )

    def enrollment_report(self) -> ServiceResult[list[EnrollmentReportRow]]:
        """Join every enrollment with its student's name and course's title."""
        try:
            students = {s.id: s for s in self._uow.students.get_all()}
            courses = {c.id: c for c in self._uow.courses.get_all()}
            rows = []
            for enrollment in self._uow.enrollments.get_all():
                student = students.get(enrollment.student_id)
                course = courses.get(enrollment.course_id)
                rows.append(
                    EnrollmentReportRow(
                        student_id=enrollment.student_id,
                        course_id=enrollment.course_id,
                        student_name=student.full_name if student else None,
                        course_title=course.title if course else None,
                        enroll_date=enrollment.enroll_date,
                        grade=enrollment.grade,
                        is_grade_finalized=enrollment.is_grade_finalized,
                    )
                )
            return ServiceResult.ok(rows)
        except Exception as e:
            logger.exception("Error building enrollment report")
            return ServiceResult.fail(
                f"Error retrieving enrollments: {e}", ErrorKind.INFRASTRUCTURE
            )

    # --- Transitions ---

    def enroll_student(
        self,
        student_id: int,
        course_id: int,
        enroll_date: date | datetime | None = None,
    ) -> ServiceResult[Enrollment]:
        """Enroll a student in a course.

        Args:
            student_id: Student to enroll.
            course_id: Course to enroll in.
            enroll_date: Enrollment date; defaults to now.

        Returns:
            Success with the new Enrollment, or the first failing rule.
        """
        uow = self._uow
        try:
            now = self._now()
            when = enroll_date if enroll_date is not None else now
            uow.begin_transaction()
            rejection = self._check_enrollment(student_id, course_id, when, now)
            if rejection is not None:
                uow.rollback()
                logger.info(
                    "Enrollment of student %s in course %s rejected: %s",
                    student_id,
                    course_id,
                    rejection.message,
                )
                return rejection

            enrollment = Enrollment(
                student_id=student_id,
                course_id=course_id,
                enroll_date=to_utc_naive(when),
                grade=None,
                is_grade_finalized=False,
            )
            uow.enrollments.add(enrollment)
            uow.save()
            uow.commit()
        except Exception as e:
            uow.rollback()
            logger.exception("Error enrolling student %s in course %s", student_id, course_id)
            return ServiceResult.fail(f"Error enrolling student: {e}", ErrorKind.INFRASTRUCTURE)

        logger.info("Student %s enrolled in course %s", student_id, course_id)
        return ServiceResult.ok(enrollment, "Student enrolled successfully in course")

    def _check_enrollment(
        self,
        student_id: int,
        course_id: int,
        when: date | datetime,
        now: datetime,
    ) -> ServiceResult[Enrollment] | None:
        """Run the enrollment rules in order; return the first failure or None."""
        uow = self._uow

        student = uow.students.get_by_id(student_id)
        if student is None:
            return ServiceResult.fail(
                f"Student with ID {student_id} does not exist", ErrorKind.NOT_FOUND
            )

        course = uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail(
                f"Course with ID {course_id} does not exist", ErrorKind.NOT_FOUND
            )

        enroll_day = calendar_day(when, now)
        if enroll_day < now.date():
            return ServiceResult.fail("Enrollment date cannot be in the past")

        if self._find(student_id, course_id) is not None:
            return ServiceResult.fail("Student is already enrolled in this course")

        held = uow.enrollments.count(Enrollment.student_id == student_id)
        if held >= self.policy.max_enrollments:
            return ServiceResult.fail(
                f"Student cannot enroll in more than {self.policy.max_enrollments} courses"
            )

        if student.department_id != course.department_id:
            return ServiceResult.fail(
                "Student can only enroll in courses from their own department"
            )

        if not student.is_active:
            return ServiceResult.fail("Student is inactive", ErrorKind.STATE_CONFLICT)

        if course.status != CourseStatus.ACTIVE.value:
            return ServiceResult.fail("Course is inactive", ErrorKind.STATE_CONFLICT)

        if course.credits < 1:
            return ServiceResult.fail("Course credit must be at least 1")

        if age_on(student.date_of_birth, enroll_day) < self.policy.minimum_age:
            return ServiceResult.fail(f"Student must be at least {self.policy.minimum_age}")

        return None

    def assign_grade(
        self,
        student_id: int,
        course_id: int,
        grade: Decimal | float | int | str,
    ) -> ServiceResult[Enrollment]:
        """Assign or change the grade of an enrollment.

        Allowed while the grade is not finalized and the grading period is open.
        The grade is stored with one decimal place.
        """
        try:
            enrollment = self._find(student_id, course_id)
            if enrollment is None:
                return ServiceResult.fail("Enrollment does not exist", ErrorKind.NOT_FOUND)

            # Both sides in UTC so local offsets cannot shift the window
            enrolled_at = enrollment.enroll_date.replace(tzinfo=UTC)
            elapsed = self._now().astimezone(UTC) - enrolled_at
            if elapsed > timedelta(days=self.policy.grading_period_days):
                logger.info(
                    "Grade for student %s in course %s rejected: %s days since enrollment",
                    student_id,
                    course_id,
                    elapsed.days,
                )
                return ServiceResult.fail("Outside grading period")

            if enrollment.is_grade_finalized:
                return ServiceResult.fail(
                    "Grade is finalized and cannot be modified", ErrorKind.STATE_CONFLICT
                )

            value = _parse_grade(grade)
            if value is None or value < MIN_GRADE or value > MAX_GRADE:
                return ServiceResult.fail("Grade must be between 0 and 10")

            value = value.quantize(GRADE_STEP, rounding=ROUND_HALF_UP)
            previous = enrollment.state
            enrollment.grade = value
            self._uow.enrollments.update(enrollment)
            self._uow.save()
        except Exception as e:
            logger.exception(
                "Error assigning grade to student %s in course %s", student_id, course_id
            )
            return ServiceResult.fail(f"Error assigning grade: {e}", ErrorKind.INFRASTRUCTURE)

        logger.info(
            "Enrollment %s/%s transitioned from %s to %s (grade=%s)",
            student_id,
            course_id,
            previous.value,
            enrollment.state.value,
            value,
        )
        return ServiceResult.ok(enrollment, f"Grade {value} assigned successfully")

    def finalize_grade(self, student_id: int, course_id: int) -> ServiceResult[Enrollment]:
        """Mark a grade as final. It can no longer be changed afterwards."""
        try:
            enrollment = self._find(student_id, course_id)
            if enrollment is None:
                return ServiceResult.fail("Enrollment does not exist", ErrorKind.NOT_FOUND)

            if enrollment.grade is None:
                return ServiceResult.fail(
                    "Cannot finalize: no grade has been assigned", ErrorKind.STATE_CONFLICT
                )

            if enrollment.is_grade_finalized:
                return ServiceResult.fail("Grade is already finalized", ErrorKind.STATE_CONFLICT)

            enrollment.is_grade_finalized = True
            self._uow.enrollments.update(enrollment)
            self._uow.save()
        except Exception as e:
            logger.exception(
                "Error finalizing grade of student %s in course %s", student_id, course_id
            )
            return ServiceResult.fail(f"Error finalizing grade: {e}", ErrorKind.INFRASTRUCTURE)

        logger.info("Enrollment %s/%s grade finalized", student_id, course_id)
        return ServiceResult.ok(enrollment, "Grade finalized successfully")

    def unenroll_student(self, student_id: int, course_id: int) -> ServiceResult[None]:
        """Remove an enrollment, whatever its grading state."""
        uow = self._uow
        try:
            uow.begin_transaction()
            enrollment = self._find(student_id, course_id)
            if enrollment is None:
                uow.rollback()
                return ServiceResult.fail("Enrollment does not exist", ErrorKind.NOT_FOUND)

            state = enrollment.state
            uow.enrollments.delete(enrollment)
            uow.save()
            uow.commit()
        except Exception as e:
            uow.rollback()
            logger.exception("Error unenrolling student %s from course %s", student_id, course_id)
            return ServiceResult.fail(f"Error unenrolling student: {e}", ErrorKind.INFRASTRUCTURE)

        logger.info(
            "Student %s unenrolled from course %s (was %s)", student_id, course_id, state.value
        )
        return ServiceResult.ok(message="Student unenrolled successfully")
