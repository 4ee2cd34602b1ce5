"""Custom exceptions for the tax registry lookup."""


class CompanyLookupError(Exception):
    """Raised when the tax registry cannot be reached or answers garbage."""
