"""Generic per-entity repository over a SQLAlchemy session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import func, inspect, select

from coursemanager.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

T = TypeVar("T", bound=Base)


class Repository(Generic[T]):
    """CRUD access and criteria-based filtering for one model.

    Changes are staged in the session; nothing reaches the database until the
    owning unit of work saves. Queries autoflush, so staged rows are visible
    to ``find`` and ``count`` on the same unit of work.
    """

    def __init__(self, session: Session, model: type[T]) -> None:
        self._session = session
        self.model = model

    def get_all(self) -> list[T]:
        """Return every row, ordered by primary key."""
        stmt = select(self.model).order_by(*inspect(self.model).primary_key)
        return list(self._session.execute(stmt).scalars().all())

    def get_by_id(self, id: Any) -> T | None:
        """Return the row with the given primary key, or None.

        Composite keys are passed as a tuple in column order, e.g.
        ``(student_id, course_id)`` for enrollments.
        """
        return self._session.get(self.model, id)

    def find(self, *criteria: ColumnElement[bool]) -> list[T]:
        """Return rows matching all criteria.

        Args:
            criteria: SQLAlchemy boolean expressions, e.g.
                ``Enrollment.student_id == 1``.
        """
        stmt = select(self.model).where(*criteria).order_by(*inspect(self.model).primary_key)
        return list(self._session.execute(stmt).scalars().all())

    def first(self, *criteria: ColumnElement[bool]) -> T | None:
        """Return the first row matching all criteria, or None."""
        stmt = (
            select(self.model)
            .where(*criteria)
            .order_by(*inspect(self.model).primary_key)
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def count(self, *criteria: ColumnElement[bool]) -> int:
        """Count rows matching all criteria."""
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        return int(self._session.execute(stmt).scalar_one())

    def exists(self, *criteria: ColumnElement[bool]) -> bool:
        """Check whether any row matches all criteria."""
        return self.first(*criteria) is not None

    def add(self, entity: T) -> T:
        """Stage a new entity for insertion."""
        self._session.add(entity)
        return entity

    def update(self, entity: T) -> T:
        """Stage changes to an entity.

        Entities loaded through this session are already tracked; detached
        ones are merged back in and the tracked copy is returned.
        """
        if entity in self._session:
            return entity
        return self._session.merge(entity)

    def delete(self, target: T | Any) -> None:
        """Stage deletion of an entity, or of the row with the given id.

        Deleting an id that does not exist is a no-op.
        """
        if isinstance(target, self.model):
            entity: T | None = target
        else:
            entity = self.get_by_id(target)
        if entity is None:
            return
        if entity in self._session.new:
            # Never flushed, so there is no row to delete
            self._session.expunge(entity)
        else:
            self._session.delete(entity)
