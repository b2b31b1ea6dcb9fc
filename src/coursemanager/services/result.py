"""Result envelope returned by every service operation."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, ParamSpec, TypeVar

T = TypeVar("T")
P = ParamSpec("P")

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGE = "Operation completed successfully"


class ErrorKind(StrEnum):
    """Category of a failed operation."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    STATE_CONFLICT = "state_conflict"
    INFRASTRUCTURE = "infrastructure"


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of a service operation.

    Business-rule failures are reported here rather than raised, so callers
    branch on ``success``.

    Attributes:
        success: Whether the operation succeeded.
        message: Human-readable outcome.
        data: Payload for successful queries and mutations.
        error: Failure category, None on success.
    """

    success: bool
    message: str
    data: T | None = None
    error: ErrorKind | None = None

    @classmethod
    def ok(cls, data: T | None = None, message: str = DEFAULT_SUCCESS_MESSAGE) -> ServiceResult[T]:
        """Build a successful result."""
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: ErrorKind = ErrorKind.VALIDATION) -> ServiceResult[T]:
        """Build a failed result."""
        return cls(success=False, message=message, error=error)


def catch_faults(
    action: str,
) -> Callable[[Callable[P, ServiceResult[Any]]], Callable[P, ServiceResult[Any]]]:
    """Convert unexpected exceptions of a service method into a failed result.

    Args:
        action: Phrase used in the message, e.g. "adding department" gives
            "Error adding department: <fault>".
    """

    def decorator(func: Callable[P, ServiceResult[Any]]) -> Callable[P, ServiceResult[Any]]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult[Any]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.exception("Error %s", action)
                return ServiceResult.fail(f"Error {action}: {e}", ErrorKind.INFRASTRUCTURE)

        return wrapper

    return decorator
