"""Fixtures for API route tests."""

from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coursemanager.api import create_app
from coursemanager.api.dependencies import UnitOfWorkDep, get_enrollment_service
from coursemanager.config import AppConfig
from coursemanager.services import EnrollmentService


@pytest.fixture
def app(tmp_path: Path, clock: Callable[[], datetime]) -> FastAPI:
    """Application on an in-memory database with the enrollment clock pinned."""
    config = AppConfig.from_dict({"database": {"path": ":memory:"}}, tmp_path)
    app = create_app(config)

    def override_get_enrollment_service(uow: UnitOfWorkDep) -> EnrollmentService:
        return EnrollmentService(uow, policy=config.enrollment, clock=clock)

    app.dependency_overrides[get_enrollment_service] = override_get_enrollment_service
    return app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create a test client; entering it runs the lifespan hooks."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def catalog(client: TestClient) -> TestClient:
    """Department 1 with adult student 1 and active course 1; department 2 with course 2."""
    client.post("/api/v1/departments", json={"name": "Computer Science"})
    client.post("/api/v1/departments", json={"name": "Mathematics"})
    client.post(
        "/api/v1/students",
        json={
            "student_code": "S001",
            "full_name": "Ada Lovelace",
            "email": "ada@uni.edu",
            "department_id": 1,
            "date_of_birth": "2000-01-15",
        },
    )
    client.post(
        "/api/v1/courses",
        json={"course_code": "CS101", "title": "Intro", "credits": 3, "department_id": 1},
    )
    client.post(
        "/api/v1/courses",
        json={"course_code": "MA101", "title": "Calculus", "credits": 5, "department_id": 2},
    )
    return client
