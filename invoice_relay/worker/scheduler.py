"""Recurring background jobs: attachment retention and the daily digest."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger

from invoice_relay.config import AppSettings
from invoice_relay.notify import TelegramNotifier
from invoice_relay.service import prune_old_attachments, send_daily_digest
from invoice_relay.store import InvoiceStore


LOGGER = logging.getLogger("invoice_relay.worker")
RETENTION_JOB_ID = "attachment-retention"
DIGEST_JOB_ID = "daily-digest"
MISFIRE_GRACE_SECONDS = 3600


def run_retention(settings: AppSettings) -> None:
    try:
        pruned = prune_old_attachments(settings.upload_dir, settings.image_ttl_days)
        LOGGER.info("Retention cleanup done; deleted files=%s", pruned)
    except Exception as exc:
        LOGGER.exception("Retention cleanup failed: %s", exc)


def run_digest(settings: AppSettings, store: InvoiceStore, notifier: TelegramNotifier) -> None:
    try:
        send_daily_digest(store, notifier, settings.store_name)
    except Exception as exc:
        LOGGER.exception("Daily digest failed: %s", exc)


def build_scheduler(
    settings: AppSettings,
    store: InvoiceStore,
    notifier: TelegramNotifier,
    scheduler_cls: type[BaseScheduler] = BackgroundScheduler,
) -> BaseScheduler:
    """Create a scheduler with both daily jobs registered but not started.

    Late runs are coalesced into one and skipped runs are never replayed.
    """
    scheduler = scheduler_cls(timezone=settings.timezone)
    scheduler.add_job(
        run_retention,
        trigger=CronTrigger(
            hour=settings.retention_hour,
            minute=settings.retention_minute,
            timezone=settings.timezone,
        ),
        id=RETENTION_JOB_ID,
        args=[settings],
        coalesce=True,
        max_instances=1,
        misfire_grace_time=MISFIRE_GRACE_SECONDS,
    )
    scheduler.add_job(
        run_digest,
        trigger=CronTrigger(
            hour=settings.digest_hour,
            minute=settings.digest_minute,
            timezone=settings.timezone,
        ),
        id=DIGEST_JOB_ID,
        args=[settings, store, notifier],
        coalesce=True,
        max_instances=1,
        misfire_grace_time=MISFIRE_GRACE_SECONDS,
    )
    LOGGER.info(
        "Scheduled retention at %02d:%02d and digest at %02d:%02d (%s)",
        settings.retention_hour,
        settings.retention_minute,
        settings.digest_hour,
        settings.digest_minute,
        settings.timezone,
    )
    return scheduler
