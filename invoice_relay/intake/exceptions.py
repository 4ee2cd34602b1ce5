"""Custom exceptions for submission intake."""


class IntakeError(Exception):
    """Base exception for rejected submissions.

    ``message`` is safe to show to the person who filled in the form.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingFieldError(IntakeError):
    """Raised when a required text field is absent or blank."""


class InvalidFieldError(IntakeError):
    """Raised when a text field is present but malformed."""


class MissingImageError(IntakeError):
    """Raised when no invoice photo was attached."""


class InvalidFileTypeError(IntakeError):
    """Raised when the attachment is not declared as an image."""


class FileTooLargeError(IntakeError):
    """Raised when the attachment exceeds the upload size limit."""
