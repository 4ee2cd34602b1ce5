"""Whole-file JSON persistence for invoice requests."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Callable
from zoneinfo import ZoneInfo
import logging
import os
import threading

import orjson

from invoice_relay.config import DEFAULT_TIMEZONE
from invoice_relay.intake.validation import SubmissionForm

from .exceptions import StoreWriteError
from .models import InvoiceRequest


LOGGER = logging.getLogger("invoice_relay.store")
ID_PREFIX = "INV-"
_BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_base36(value: int) -> str:
    """Encode a non-negative integer in upper-case base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


class InvoiceStore:
    """Ordered collection of invoice requests kept in one JSON file.

    Every append rewrites the whole file through a temp file and
    ``os.replace``, so a crash leaves either the old or the new snapshot.
    A single lock serializes appends within the process. Records are kept
    in arrival order (oldest first).
    """

    def __init__(
        self,
        path: Path | str,
        tz: ZoneInfo | str = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._path = Path(path)
        self._tz = ZoneInfo(tz) if isinstance(tz, str) else tz
        self._clock = clock
        self._lock = threading.Lock()
        self._last_id_ms = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def append(self, submission: SubmissionForm, image_path: str) -> InvoiceRequest:
        """Assign id and timestamp to a submission and persist it."""
        with self._lock:
            now = self._clock()
            record = InvoiceRequest(
                id=self._next_id(now),
                timestamp=now.isoformat(),
                name=submission.name,
                phone=submission.phone,
                email=submission.email,
                mst=submission.mst,
                company_name=submission.company_name,
                company_address=submission.company_address,
                representative=submission.representative,
                image_path=image_path,
            )
            records = self._read_for_update()
            records.append(record)
            self._write(records)
        LOGGER.info("Saved invoice request id=%s mst=%s (total=%s)", record.id, record.mst, len(records))
        return record

    def query_all(self) -> list[InvoiceRequest]:
        """Return every stored record; an absent or corrupt file reads as empty."""
        try:
            return self._load()
        except FileNotFoundError:
            return []
        except (OSError, ValueError, KeyError, TypeError) as exc:
            LOGGER.error("Cannot read invoice store %s: %s", self._path, exc)
            return []

    def query_today(self, now: datetime | None = None) -> list[InvoiceRequest]:
        """Return records created on the current calendar day in the store timezone."""
        current = now or self._clock()
        today = self._local(current).date()
        result: list[InvoiceRequest] = []
        for record in self.query_all():
            try:
                created = self._local(record.created_at)
            except ValueError:
                LOGGER.warning("Skipping record id=%s with bad timestamp %r", record.id, record.timestamp)
                continue
            if created.date() == today:
                result.append(record)
        return result

    def _local(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=self._tz)
        return value.astimezone(self._tz)

    def _next_id(self, now: datetime) -> str:
        millis = max(int(now.timestamp() * 1000), self._last_id_ms + 1)
        self._last_id_ms = millis
        return ID_PREFIX + to_base36(millis)

    def _load(self) -> list[InvoiceRequest]:
        payload = orjson.loads(self._path.read_bytes())
        if not isinstance(payload, list):
            raise ValueError(f"expected a JSON list, got {type(payload).__name__}")
        return [InvoiceRequest.from_dict(item) for item in payload]

    def _read_for_update(self) -> list[InvoiceRequest]:
        try:
            return self._load()
        except FileNotFoundError:
            return []
        except (OSError, ValueError, KeyError, TypeError) as exc:
            LOGGER.error("Invoice store %s is unreadable: %s", self._path, exc)
            self._quarantine()
            return []

    def _quarantine(self) -> None:
        stamp = self._clock().strftime("%Y%m%d%H%M%S")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            os.replace(self._path, target)
        except OSError as exc:
            raise StoreWriteError(f"Cannot move aside unreadable store {self._path}: {exc}") from exc
        LOGGER.warning("Moved unreadable invoice store to %s", target)

    def _write(self, records: list[InvoiceRequest]) -> None:
        temp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "wb",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_path = Path(handle.name)
                handle.write(orjson.dumps([record.to_dict() for record in records], option=orjson.OPT_INDENT_2))
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, self._path)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise StoreWriteError(f"Cannot write invoice store {self._path}: {exc}") from exc
