"""Custom exceptions for the store package."""


class StoreError(Exception):
    """Base exception for store errors."""


class UnknownEntityError(StoreError):
    """Repository requested for a model the unit of work does not manage."""


class TransactionError(StoreError):
    """Transaction primitive called in an invalid order."""
