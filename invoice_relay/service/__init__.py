"""Service-layer business logic."""

from .digest import send_daily_digest
from .intake import notify_invoice, submit_invoice
from .retention import prune_old_attachments

__all__ = ["notify_invoice", "prune_old_attachments", "send_daily_digest", "submit_invoice"]
