"""Unit tests for enrollment routes."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from coursemanager.services import EnrollmentService


@pytest.mark.unit
class TestEnroll:
    """Tests for POST /enrollments."""

    def test_enroll(self, catalog: TestClient) -> None:
        response = catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Student enrolled successfully in course"
        assert body["data"]["state"] == "enrolled"
        assert body["data"]["grade"] is None
        assert body["data"]["enroll_date"].startswith("2025-03-10T12:00")

    def test_enroll_with_date(self, catalog: TestClient) -> None:
        response = catalog.post(
            "/api/v1/enrollments",
            json={"student_id": 1, "course_id": 1, "enroll_date": "2025-04-01"},
        )
        assert response.status_code == 201
        assert response.json()["data"]["enroll_date"].startswith("2025-04-01T00:00")

    def test_enroll_past_date(self, catalog: TestClient) -> None:
        response = catalog.post(
            "/api/v1/enrollments",
            json={"student_id": 1, "course_id": 1, "enroll_date": "2025-03-01"},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "Enrollment date cannot be in the past"

    def test_enroll_unknown_student(self, catalog: TestClient) -> None:
        response = catalog.post("/api/v1/enrollments", json={"student_id": 9, "course_id": 1})
        assert response.status_code == 404
        assert response.json()["error"] == "Student with ID 9 does not exist"

    def test_enroll_other_department(self, catalog: TestClient) -> None:
        response = catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 2})
        assert response.status_code == 422

    def test_enroll_inactive_student(self, catalog: TestClient) -> None:
        catalog.patch("/api/v1/students/1", json={"is_active": False})

        response = catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})

        assert response.status_code == 409
        assert response.json()["error"] == "Student is inactive"

    def test_infrastructure_fault_maps_to_500(self, catalog: TestClient) -> None:
        with patch.object(
            EnrollmentService, "_check_enrollment", side_effect=RuntimeError("db gone")
        ):
            response = catalog.post(
                "/api/v1/enrollments", json={"student_id": 1, "course_id": 1}
            )

        assert response.status_code == 500
        assert response.json()["error"] == "Error enrolling student: db gone"


@pytest.mark.unit
class TestGrading:
    """Tests for grade and finalize endpoints."""

    def test_assign_grade(self, catalog: TestClient) -> None:
        catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})

        response = catalog.put("/api/v1/enrollments/1/1/grade", json={"grade": 8.5})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Grade 8.5 assigned successfully"
        assert body["data"]["grade"] == 8.5
        assert body["data"]["state"] == "graded"

    def test_assign_grade_out_of_range(self, catalog: TestClient) -> None:
        catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})

        response = catalog.put("/api/v1/enrollments/1/1/grade", json={"grade": 11})

        assert response.status_code == 422
        assert response.json()["error"] == "Grade must be between 0 and 10"

    def test_assign_grade_missing_enrollment(self, catalog: TestClient) -> None:
        response = catalog.put("/api/v1/enrollments/1/1/grade", json={"grade": 5})
        assert response.status_code == 404

    def test_finalize_and_lock(self, catalog: TestClient) -> None:
        catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})
        catalog.put("/api/v1/enrollments/1/1/grade", json={"grade": 8.5})

        finalized = catalog.post("/api/v1/enrollments/1/1/finalize")
        assert finalized.status_code == 200
        assert finalized.json()["data"]["state"] == "finalized"

        locked = catalog.put("/api/v1/enrollments/1/1/grade", json={"grade": 9})
        assert locked.status_code == 409
        assert locked.json()["error"] == "Grade is finalized and cannot be modified"

    def test_finalize_without_grade(self, catalog: TestClient) -> None:
        catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})
        response = catalog.post("/api/v1/enrollments/1/1/finalize")
        assert response.status_code == 409


@pytest.mark.unit
class TestReadAndUnenroll:
    """Tests for listing, report and DELETE."""

    def test_list_with_filters(self, catalog: TestClient) -> None:
        catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})

        assert len(catalog.get("/api/v1/enrollments").json()["data"]) == 1
        assert len(catalog.get("/api/v1/enrollments?student_id=1").json()["data"]) == 1
        assert catalog.get("/api/v1/enrollments?course_id=2").json()["data"] == []
        assert catalog.get("/api/v1/enrollments?student_id=1&course_id=2").json()["data"] == []

    def test_get_enrollment_not_found(self, catalog: TestClient) -> None:
        response = catalog.get("/api/v1/enrollments/1/1")
        assert response.status_code == 404
        assert response.json()["error"] == "Enrollment not found for student 1 in course 1"

    def test_report(self, catalog: TestClient) -> None:
        catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})

        rows = catalog.get("/api/v1/enrollments/report").json()["data"]

        assert rows == [
            {
                "student_id": 1,
                "course_id": 1,
                "student_name": "Ada Lovelace",
                "course_title": "Intro",
                "enroll_date": rows[0]["enroll_date"],
                "grade": None,
                "is_grade_finalized": False,
            }
        ]

    def test_unenroll(self, catalog: TestClient) -> None:
        catalog.post("/api/v1/enrollments", json={"student_id": 1, "course_id": 1})

        assert catalog.delete("/api/v1/enrollments/1/1").status_code == 204
        assert catalog.get("/api/v1/enrollments/1/1").status_code == 404
        assert catalog.delete("/api/v1/enrollments/1/1").status_code == 404
