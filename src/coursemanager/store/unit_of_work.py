"""Unit of Work - one session and transaction boundary shared by all repositories."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from coursemanager.store.exceptions import TransactionError, UnknownEntityError
from coursemanager.store.models import Course, Department, Enrollment, Student
from coursemanager.store.repository import Repository

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.orm import Session

    from coursemanager.store.database import Database

logger = logging.getLogger(__name__)


class Transaction:
    """Handle for an open transaction on a unit of work's session.

    Leaving a ``with`` block while the transaction is still open rolls it back.
    """

    supported = True

    def __init__(self, session: Session) -> None:
        self._session = session
        self.active = True

    def commit(self) -> None:
        """Commit everything saved since the transaction began."""
        if not self.active:
            raise TransactionError("Transaction is no longer active")
        self._session.commit()
        self.active = False

    def rollback(self) -> None:
        """Discard everything saved since the transaction began."""
        if not self.active:
            return
        self._session.rollback()
        self.active = False

    def __enter__(self) -> Transaction:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()


class NullTransaction:
    """Inert handle returned when the store cannot run transactions.

    ``commit`` and ``rollback`` do nothing; writes are already durable once
    saved.
    """

    supported = False
    active = False

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass

    def __enter__(self) -> NullTransaction:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pass


class UnitOfWork:
    """Groups the department, student, course and enrollment repositories.

    Usage::

        with UnitOfWork(database) as uow:
            with uow.begin_transaction():
                uow.enrollments.add(enrollment)
                uow.save()
                uow.commit()

    Outside a transaction ``save()`` commits straight away. Inside one it only
    flushes, so ``rollback()`` can still undo it. If the database does not
    support transactions, ``begin_transaction()`` returns a ``NullTransaction``
    and ``commit()``/``rollback()`` become no-ops.
    """

    def __init__(self, database: Database) -> None:
        """Open a session on the given database.

        Args:
            database: Database providing the session and transaction capability.
        """
        self._session = database.get_session()
        self.supports_transactions = database.supports_transactions
        self._transaction: Transaction | None = None

        self.departments: Repository[Department] = Repository(self._session, Department)
        self.students: Repository[Student] = Repository(self._session, Student)
        self.courses: Repository[Course] = Repository(self._session, Course)
        self.enrollments: Repository[Enrollment] = Repository(self._session, Enrollment)

    def repository(self, model: type[Any]) -> Repository[Any]:
        """Get the repository for a model class.

        Raises:
            UnknownEntityError: If the model is not managed by this unit of work.
        """
        for repo in (self.departments, self.students, self.courses, self.enrollments):
            if repo.model is model:
                return repo
        raise UnknownEntityError(f"No repository for model '{model.__name__}'")

    @property
    def in_transaction(self) -> bool:
        """Whether an explicit transaction is currently open."""
        return self._transaction is not None and self._transaction.active

    def save(self) -> int:
        """Persist staged changes.

        Returns:
            Number of staged inserts, updates and deletes.
        """
        session = self._session
        changes = len(session.new) + len(session.dirty) + len(session.deleted)
        if self.in_transaction:
            session.flush()
            return changes
        try:
            session.commit()
        except SQLAlchemyError:
            # Nothing was written; reset the session so it stays usable
            session.rollback()
            raise
        return changes

    def begin_transaction(self) -> Transaction | NullTransaction:
        """Open a transaction spanning subsequent ``save()`` calls.

        Never raises for stores without transaction support.

        Raises:
            TransactionError: If a transaction is already open.
        """
        if not self.supports_transactions:
            logger.debug("Store does not support transactions; using inert handle")
            return NullTransaction()
        if self.in_transaction:
            raise TransactionError("A transaction is already in progress")
        self._transaction = Transaction(self._session)
        return self._transaction

    def commit(self) -> None:
        """Commit the open transaction. No-op when none is open."""
        if self._transaction is None:
            return
        if self._transaction.active:
            self._transaction.commit()
        self._transaction = None

    def rollback(self) -> None:
        """Roll back the open transaction. No-op when none is open."""
        if self._transaction is None:
            return
        self._transaction.rollback()
        self._transaction = None

    def close(self) -> None:
        """Roll back any open transaction and close the session."""
        self.rollback()
        self._session.close()

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
