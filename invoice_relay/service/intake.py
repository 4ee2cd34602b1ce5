"""Invoice submission flow: validate, persist, relay."""

from __future__ import annotations

from datetime import tzinfo
from pathlib import Path
from typing import Mapping
import logging

from invoice_relay.config import AppSettings
from invoice_relay.intake import UploadedImage, save_attachment, validate_submission
from invoice_relay.notify import (
    DeliveryResult,
    TelegramNotifier,
    format_invoice_message,
    format_photo_caption,
)
from invoice_relay.store import InvoiceRequest, InvoiceStore, StoreWriteError


LOGGER = logging.getLogger("invoice_relay.service.intake")


def submit_invoice(
    fields: Mapping[str, str | None],
    image: UploadedImage | None,
    settings: AppSettings,
    store: InvoiceStore,
    notifier: TelegramNotifier,
) -> InvoiceRequest:
    """Accept one submission and return the stored record.

    Raises ``IntakeError`` for rejected input and ``StoreWriteError`` when the
    record cannot be persisted; in the latter case the saved attachment is
    removed and nothing is sent. Notification failures never raise.
    """
    submission = validate_submission(fields, image, settings.max_upload_bytes)
    attachment = save_attachment(image, settings.upload_dir)

    try:
        record = store.append(submission, image_path=attachment.name)
    except StoreWriteError:
        LOGGER.exception("Dropping submission for mst=%s: store write failed", submission.mst)
        attachment.unlink(missing_ok=True)
        raise

    notify_invoice(record, attachment, notifier, settings.store_name, store.tz)
    return record


def notify_invoice(
    record: InvoiceRequest,
    attachment: Path,
    notifier: TelegramNotifier,
    store_name: str,
    tz: tzinfo,
) -> tuple[DeliveryResult, DeliveryResult]:
    """Send the photo, then the detail message; both are always attempted."""
    photo_result = notifier.send_photo(attachment, format_photo_caption(record))
    if not photo_result.ok:
        LOGGER.warning("Photo for invoice %s not delivered: %s", record.id, photo_result.error)

    text_result = notifier.send_text(format_invoice_message(record, store_name, tz))
    if not text_result.ok:
        LOGGER.warning("Details for invoice %s not delivered: %s", record.id, text_result.error)
    return photo_result, text_result
