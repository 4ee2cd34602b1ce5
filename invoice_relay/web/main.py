"""Serve the web app with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from invoice_relay.config import load_settings


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
LOGGER = logging.getLogger("invoice_relay.web")


def run() -> None:
    """Run the HTTP server on all interfaces."""
    settings = load_settings()
    LOGGER.info("Starting Invoice API on port %s", settings.port)
    uvicorn.run("invoice_relay.web.app:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
