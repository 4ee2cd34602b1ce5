"""Submission validation and attachment intake."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final, Mapping
import logging
import re
import time
import uuid

from .exceptions import (
    FileTooLargeError,
    InvalidFieldError,
    InvalidFileTypeError,
    MissingFieldError,
    MissingImageError,
)


LOGGER = logging.getLogger("invoice_relay.intake")

DEFAULT_CUSTOMER_NAME: Final[str] = "Khách hàng"
MSG_MISSING_FIELD: Final[str] = "Vui lòng điền đầy đủ thông tin bắt buộc"
MSG_INVALID_MST: Final[str] = "Mã số thuế không hợp lệ"
MSG_MISSING_IMAGE: Final[str] = "Vui lòng tải lên ảnh hóa đơn"
MSG_INVALID_FILE_TYPE: Final[str] = "Chỉ chấp nhận tệp hình ảnh"
MSG_FILE_TOO_LARGE: Final[str] = "Ảnh quá lớn. Vui lòng chọn ảnh nhỏ hơn 10MB"

REQUIRED_FIELDS: Final[tuple[str, ...]] = ("phone", "email", "mst")
# Digits with at most one inner hyphen separating the branch suffix.
MST_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+(?:-\d+)?$")
MST_MIN_DIGITS: Final[int] = 10
MST_MAX_LENGTH: Final[int] = 14
EXTENSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


@dataclass(frozen=True, slots=True)
class SubmissionForm:
    """Validated text fields of one invoice request."""

    name: str
    phone: str
    email: str
    mst: str
    company_name: str = ""
    company_address: str = ""
    representative: str = ""


@dataclass(frozen=True, slots=True)
class UploadedImage:
    """Attachment as received from the client.

    ``content`` may be cut short one byte past the upload limit; its length is
    only used to decide whether the limit was exceeded.
    """

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def _clean(value: str | None) -> str:
    return (value or "").strip()


def is_valid_mst(value: str) -> bool:
    """Return True for 10 to 14 digits, optionally split once by an inner hyphen."""
    if len(value) > MST_MAX_LENGTH or MST_PATTERN.match(value) is None:
        return False
    return len(value.replace("-", "")) >= MST_MIN_DIGITS


def validate_submission(
    fields: Mapping[str, str | None],
    image: UploadedImage | None,
    max_upload_bytes: int,
) -> SubmissionForm:
    """Check a raw submission and return its cleaned text fields.

    Rules are applied in order and the first failure is raised as an
    ``IntakeError`` subclass.
    """
    cleaned = {key: _clean(fields.get(key)) for key in (
        "name",
        "phone",
        "email",
        "mst",
        "companyName",
        "companyAddress",
        "representative",
    )}

    for field_name in REQUIRED_FIELDS:
        if not cleaned[field_name]:
            raise MissingFieldError(MSG_MISSING_FIELD)
    if not is_valid_mst(cleaned["mst"]):
        raise InvalidFieldError(MSG_INVALID_MST)

    if image is None or (not image.filename and image.size == 0):
        raise MissingImageError(MSG_MISSING_IMAGE)
    if not (image.content_type or "").lower().startswith("image/"):
        raise InvalidFileTypeError(MSG_INVALID_FILE_TYPE)
    if image.size > max_upload_bytes:
        raise FileTooLargeError(MSG_FILE_TOO_LARGE)

    return SubmissionForm(
        name=cleaned["name"] or DEFAULT_CUSTOMER_NAME,
        phone=cleaned["phone"],
        email=cleaned["email"],
        mst=cleaned["mst"],
        company_name=cleaned["companyName"],
        company_address=cleaned["companyAddress"],
        representative=cleaned["representative"],
    )


def attachment_name(original_filename: str) -> str:
    """Build a collision-resistant file name keeping a sane original extension."""
    suffix = Path(original_filename or "").suffix
    if not EXTENSION_PATTERN.match(suffix):
        suffix = ""
    return f"invoice-{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}{suffix.lower()}"


def save_attachment(image: UploadedImage, upload_dir: Path) -> Path:
    """Write the attachment under ``upload_dir`` and return its path."""
    upload_dir.mkdir(parents=True, exist_ok=True)
    target = upload_dir / attachment_name(image.filename)
    target.write_bytes(image.content)
    LOGGER.info("Stored attachment %s (%s bytes)", target, image.size)
    return target
