"""Attachment retention rules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
import logging


LOGGER = logging.getLogger("invoice_relay.service.retention")


def prune_old_attachments(upload_dir: Path, image_ttl_days: int, now: datetime | None = None) -> int:
    """Delete uploaded files older than the TTL while keeping invoice records."""
    if not upload_dir.is_dir():
        LOGGER.info("Upload directory %s does not exist; nothing to prune", upload_dir)
        return 0

    current = now or datetime.now(timezone.utc)
    max_age = timedelta(days=image_ttl_days)
    pruned = 0
    for path in upload_dir.iterdir():
        try:
            if not path.is_file():
                continue
            modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
            if current - modified <= max_age:
                continue
            path.unlink()
        except OSError as exc:
            LOGGER.error("Cannot prune attachment %s: %s", path, exc)
            continue
        pruned += 1
        LOGGER.info("Deleted attachment %s (modified %s)", path.name, modified.isoformat())
    return pruned
