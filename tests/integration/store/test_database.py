"""Integration tests for the store on a file-backed SQLite database."""

import tempfile
from collections.abc import Iterator
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from coursemanager.store import (
    Course,
    Database,
    Department,
    Enrollment,
    Student,
    UnitOfWork,
)


@pytest.fixture
def temp_db_path() -> Iterator[str]:
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield str(Path(tmpdir) / "school.db")


@pytest.fixture
def database(temp_db_path: str) -> Iterator[Database]:
    """Create a database instance with tables."""
    db = Database(temp_db_path)
    db.create_tables()
    yield db
    db.close()


def seed(uow: UnitOfWork) -> None:
    uow.departments.add(Department(name="Computer Science", id=1))
    uow.save()
    uow.students.add(
        Student(
            student_code="S001",
            full_name="Ada Lovelace",
            department_id=1,
            date_of_birth=date(2000, 1, 15),
            id=1,
        )
    )
    uow.courses.add(Course(course_code="CS101", title="Intro", credits=3, department_id=1, id=1))
    uow.save()


@pytest.mark.integration
class TestDatabaseSetup:
    """Tests for database setup."""

    def test_database_creates_file(self, temp_db_path: str) -> None:
        """SQLite file created at specified path."""
        db = Database(temp_db_path)
        db.create_tables()
        assert Path(temp_db_path).exists()
        db.close()

    def test_database_creates_parent_directory(self, temp_db_path: str) -> None:
        nested = str(Path(temp_db_path).parent / "nested" / "school.db")
        db = Database(nested)
        db.create_tables()
        assert Path(nested).exists()
        db.close()

    def test_database_creates_tables(self, database: Database) -> None:
        """All four tables exist after init."""
        tables = inspect(database.engine).get_table_names()
        assert {"departments", "students", "courses", "enrollments"} <= set(tables)

    def test_enrollment_composite_primary_key(self, database: Database) -> None:
        pk = inspect(database.engine).get_pk_constraint("enrollments")
        assert pk["constrained_columns"] == ["student_id", "course_id"]

    def test_database_wal_mode(self, database: Database) -> None:
        """WAL mode is enabled."""
        assert database.is_wal_mode()

    def test_memory_database_journal(self) -> None:
        """In-memory databases cannot use WAL and share one connection."""
        db = Database(":memory:")
        db.create_tables()
        assert db.in_memory
        assert db.journal_mode() == "memory"
        assert not db.is_wal_mode()
        db.close()

    def test_drop_tables(self, database: Database) -> None:
        database.drop_tables()
        assert inspect(database.engine).get_table_names() == []


@pytest.mark.integration
class TestPersistence:
    """Data survives reopening the database file."""

    def test_committed_work_survives_reopen(self, temp_db_path: str) -> None:
        db = Database(temp_db_path)
        db.create_tables()
        with UnitOfWork(db) as uow:
            seed(uow)
            uow.begin_transaction()
            uow.enrollments.add(
                Enrollment(
                    student_id=1,
                    course_id=1,
                    enroll_date=datetime(2025, 3, 10, 12, 0),
                    grade=Decimal("8.5"),
                )
            )
            uow.save()
            uow.commit()
        db.close()

        reopened = Database(temp_db_path)
        with UnitOfWork(reopened) as uow:
            enrollment = uow.enrollments.get_by_id((1, 1))
            assert enrollment is not None
            assert enrollment.grade == Decimal("8.5")
            assert enrollment.enroll_date == datetime(2025, 3, 10, 12, 0)
        reopened.close()

    def test_rolled_back_work_is_discarded(self, database: Database) -> None:
        with UnitOfWork(database) as uow:
            seed(uow)
            uow.begin_transaction()
            uow.enrollments.add(
                Enrollment(student_id=1, course_id=1, enroll_date=datetime(2025, 3, 10))
            )
            uow.save()
            uow.rollback()

        with UnitOfWork(database) as uow:
            assert uow.enrollments.count() == 0

    def test_foreign_keys_enforced(self, database: Database) -> None:
        with UnitOfWork(database) as uow:
            uow.students.add(
                Student(
                    student_code="S404",
                    full_name="No Department",
                    department_id=404,
                    date_of_birth=date(2000, 1, 1),
                )
            )
            with pytest.raises(IntegrityError):
                uow.save()

    def test_unique_email(self, database: Database) -> None:
        with UnitOfWork(database) as uow:
            seed(uow)
            uow.students.get_by_id(1).email = "ada@uni.edu"
            uow.save()
            uow.students.add(
                Student(
                    student_code="S002",
                    full_name="Imposter",
                    department_id=1,
                    date_of_birth=date(2000, 1, 1),
                    email="ada@uni.edu",
                )
            )
            with pytest.raises(IntegrityError):
                uow.save()
