"""Unit tests for StudentService."""

from datetime import date, datetime

import pytest

from coursemanager.services import ErrorKind, StudentService
from coursemanager.store import Enrollment, UnitOfWork


@pytest.fixture
def service(seeded: UnitOfWork) -> StudentService:
    return StudentService(seeded)


def add(service: StudentService, **overrides):
    fields = {
        "student_code": "S010",
        "full_name": "Grace Hopper",
        "department_id": 1,
        "date_of_birth": date(1990, 12, 9),
        "email": "grace@uni.edu",
    }
    fields.update(overrides)
    return service.add_student(**fields)


@pytest.mark.unit
class TestStudentQueries:
    """Tests for student lookups."""

    def test_get_all(self, service: StudentService) -> None:
        assert [s.student_code for s in service.get_all_students().data] == [
            "S001",
            "S002",
            "S003",
        ]

    def test_get_by_id(self, service: StudentService) -> None:
        assert service.get_student_by_id(1).data.full_name == "Ada Lovelace"

    def test_get_by_id_missing(self, service: StudentService) -> None:
        result = service.get_student_by_id(99)
        assert result.message == "Student with ID 99 not found"
        assert result.error == ErrorKind.NOT_FOUND

    def test_get_by_code(self, service: StudentService) -> None:
        assert service.get_student_by_code("S002").data.id == 2

    def test_get_by_code_missing(self, service: StudentService) -> None:
        assert service.get_student_by_code("X").message == "Student with code 'X' not found"


@pytest.mark.unit
class TestAddStudent:
    """Tests for add_student."""

    def test_add(self, service: StudentService) -> None:
        result = add(service)
        assert result.success
        assert result.message == "Student 'Grace Hopper' added successfully"
        assert result.data.is_active is True

    def test_blank_email_stored_as_none(self, service: StudentService) -> None:
        assert add(service, email="   ").data.email is None

    def test_name_checked_first(self, service: StudentService) -> None:
        """Name errors win over a duplicate code."""
        result = add(service, full_name="", student_code="S001")
        assert result.message == "Student full name cannot be empty"

    def test_short_name(self, service: StudentService) -> None:
        result = add(service, full_name="Al")
        assert result.message == "Student full name must be at least 3 characters long"

    def test_empty_code(self, service: StudentService) -> None:
        assert add(service, student_code=" ").message == "Student code cannot be empty"

    def test_duplicate_code(self, service: StudentService) -> None:
        assert add(service, student_code="S001").message == (
            "Student with code 'S001' already exists"
        )

    def test_duplicate_email_ignores_case(self, service: StudentService) -> None:
        result = add(service, email="ADA@uni.edu")
        assert result.message == "Email 'ADA@uni.edu' is already in use"

    def test_unknown_department(self, service: StudentService) -> None:
        result = add(service, department_id=9)
        assert result.message == "Department with ID 9 does not exist"
        assert result.error == ErrorKind.NOT_FOUND

    def test_email_masked_in_log(
        self, service: StudentService, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level("INFO", logger="coursemanager")
        add(service)
        assert "g***@uni.edu" in caplog.text
        assert "grace@uni.edu" not in caplog.text


@pytest.mark.unit
class TestUpdateStudent:
    """Tests for update_student."""

    def test_partial_update(self, service: StudentService) -> None:
        result = service.update_student(1, full_name="Augusta Ada King")
        assert result.success
        assert result.data.full_name == "Augusta Ada King"
        assert result.data.student_code == "S001"
        assert result.data.email == "ada@uni.edu"

    def test_deactivate(self, service: StudentService) -> None:
        assert service.update_student(1, is_active=False).data.is_active is False

    def test_keep_own_code_and_email(self, service: StudentService) -> None:
        assert service.update_student(1, student_code="S001", email="ada@uni.edu").success

    def test_code_taken_by_other(self, service: StudentService) -> None:
        result = service.update_student(1, student_code="S002")
        assert result.message == "Student with code 'S002' already exists"

    def test_move_department_keeps_enrollments(self, seeded: UnitOfWork) -> None:
        seeded.enrollments.add(
            Enrollment(student_id=1, course_id=1, enroll_date=datetime(2025, 3, 10))
        )
        seeded.save()

        result = StudentService(seeded).update_student(1, department_id=2)

        assert result.data.department_id == 2
        assert seeded.enrollments.count(Enrollment.student_id == 1) == 1

    def test_update_missing(self, service: StudentService) -> None:
        assert service.update_student(99, full_name="Nobody").error == ErrorKind.NOT_FOUND


@pytest.mark.unit
class TestDeleteStudent:
    """Tests for delete_student."""

    def test_delete(self, service: StudentService) -> None:
        result = service.delete_student(3)
        assert result.message == "Student deleted successfully"
        assert service.get_student_by_id(3).error == ErrorKind.NOT_FOUND

    def test_delete_with_enrollments(self, seeded: UnitOfWork, service: StudentService) -> None:
        seeded.enrollments.add(
            Enrollment(student_id=1, course_id=1, enroll_date=datetime(2025, 3, 10))
        )
        seeded.save()

        result = service.delete_student(1)
        assert result.message == "Cannot delete student: student has active enrollments"
        assert result.error == ErrorKind.STATE_CONFLICT
