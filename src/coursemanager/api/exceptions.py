"""Exceptions for the API layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from coursemanager.services import ServiceResult

T = TypeVar("T")


class ServiceResultError(Exception):
    """A service returned a failed result; carries it to the exception handler."""

    def __init__(self, result: ServiceResult[Any]) -> None:
        super().__init__(result.message)
        self.result = result


def unwrap(result: ServiceResult[T]) -> T | None:
    """Return a successful result's data, or raise ServiceResultError.

    Raises:
        ServiceResultError: If the result is a failure.
    """
    if not result.success:
        raise ServiceResultError(result)
    return result.data
