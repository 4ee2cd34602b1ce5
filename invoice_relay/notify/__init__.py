"""Outbound chat notifications."""

from .messages import (
    format_digest_message,
    format_empty_digest,
    format_invoice_message,
    format_photo_caption,
)
from .telegram import DeliveryResult, TelegramNotifier

__all__ = [
    "DeliveryResult",
    "TelegramNotifier",
    "format_digest_message",
    "format_empty_digest",
    "format_invoice_message",
    "format_photo_caption",
]
