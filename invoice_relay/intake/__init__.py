"""Submission validation and attachment intake."""

from .exceptions import (
    FileTooLargeError,
    IntakeError,
    InvalidFieldError,
    InvalidFileTypeError,
    MissingFieldError,
    MissingImageError,
)
from .validation import (
    DEFAULT_CUSTOMER_NAME,
    SubmissionForm,
    UploadedImage,
    is_valid_mst,
    save_attachment,
    validate_submission,
)

__all__ = [
    "DEFAULT_CUSTOMER_NAME",
    "FileTooLargeError",
    "IntakeError",
    "InvalidFieldError",
    "InvalidFileTypeError",
    "MissingFieldError",
    "MissingImageError",
    "SubmissionForm",
    "UploadedImage",
    "is_valid_mst",
    "save_attachment",
    "validate_submission",
]
