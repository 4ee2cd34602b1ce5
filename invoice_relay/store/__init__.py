"""Invoice record store package."""

from .exceptions import StoreError, StoreWriteError
from .json_store import InvoiceStore, to_base36
from .models import InvoiceRequest

__all__ = ["InvoiceRequest", "InvoiceStore", "StoreError", "StoreWriteError", "to_base36"]
