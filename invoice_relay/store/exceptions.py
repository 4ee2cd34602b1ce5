"""Custom exceptions for the invoice record store."""


class StoreError(Exception):
    """Base exception for record store failures."""


class StoreWriteError(StoreError):
    """Raised when the record collection cannot be written back to disk."""
