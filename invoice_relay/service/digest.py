"""Daily digest of accepted invoice requests."""

from __future__ import annotations

from datetime import datetime
import logging

from invoice_relay.notify import (
    DeliveryResult,
    TelegramNotifier,
    format_digest_message,
    format_empty_digest,
)
from invoice_relay.store import InvoiceStore


LOGGER = logging.getLogger("invoice_relay.service.digest")


def send_daily_digest(
    store: InvoiceStore,
    notifier: TelegramNotifier,
    store_name: str,
    now: datetime | None = None,
) -> DeliveryResult:
    """Summarize today's requests in one chat message."""
    current = (now or datetime.now(store.tz)).astimezone(store.tz)
    records = store.query_today(now=current)
    if records:
        message = format_digest_message(records, current.date(), store_name)
    else:
        message = format_empty_digest(current.date(), store_name)

    result = notifier.send_text(message)
    if result.ok:
        LOGGER.info("Daily digest for %s sent (%s requests)", current.date(), len(records))
    else:
        LOGGER.error("Daily digest for %s not delivered: %s", current.date(), result.error)
    return result
