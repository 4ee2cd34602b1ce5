"""Standalone worker running the retention and digest jobs."""

from __future__ import annotations

import argparse
import logging

from apscheduler.schedulers.blocking import BlockingScheduler

from invoice_relay.config import load_settings
from invoice_relay.notify import TelegramNotifier
from invoice_relay.store import InvoiceStore
from invoice_relay.worker.scheduler import build_scheduler, run_digest, run_retention


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
LOGGER = logging.getLogger("invoice_relay.worker")


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(description="Run invoice relay background jobs.")
    parser.add_argument(
        "--once",
        choices=("retention", "digest"),
        default=None,
        help="Run one job immediately and exit instead of scheduling.",
    )
    return parser


def run(argv: list[str] | None = None) -> int:
    """Run scheduled jobs forever, or one job with --once."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    store = InvoiceStore(settings.store_path, tz=settings.timezone)
    notifier = TelegramNotifier(
        bot_token=settings.telegram_bot_token,
        chat_id=settings.telegram_chat_id,
        api_url=settings.telegram_api_url,
        timeout_sec=settings.notify_timeout_seconds,
    )

    if args.once == "retention":
        run_retention(settings)
        return 0
    if args.once == "digest":
        run_digest(settings, store, notifier)
        return 0

    scheduler = build_scheduler(settings, store, notifier, scheduler_cls=BlockingScheduler)
    LOGGER.info("Starting worker")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        LOGGER.info("Worker stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
