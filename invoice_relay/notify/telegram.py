"""Telegram Bot API delivery for invoice notifications."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final
import logging
import re

import requests

from .messages import CAPTION_LIMIT, TEXT_LIMIT, truncate_html


LOGGER = logging.getLogger("invoice_relay.notify")
DEFAULT_API_URL: Final[str] = "https://api.telegram.org"
BOT_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"/bot[^/\s]+")


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome of one outbound message."""

    ok: bool
    error: str | None = None


class TelegramNotifier:
    """Sends text and photo messages to one configured chat.

    Neither send method raises: every failure is logged and returned as a
    failed ``DeliveryResult``.
    """

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        api_url: str = DEFAULT_API_URL,
        timeout_sec: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._api_url = api_url.rstrip("/")
        self._timeout_sec = timeout_sec
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self._bot_token and self._chat_id)

    def send_text(self, message: str) -> DeliveryResult:
        if not self.configured:
            return self._not_configured("sendMessage")
        payload = {
            "chat_id": self._chat_id,
            "text": truncate_html(message, TEXT_LIMIT),
            "parse_mode": "HTML",
        }
        try:
            response = self._session.post(
                self._method_url("sendMessage"),
                json=payload,
                timeout=self._timeout_sec,
            )
            return self._check_response("sendMessage", response)
        except requests.RequestException as exc:
            return self._failed("sendMessage", str(exc))

    def send_photo(self, image_path: Path | str, caption: str | None = None) -> DeliveryResult:
        if not self.configured:
            return self._not_configured("sendPhoto")
        data: dict[str, Any] = {"chat_id": self._chat_id}
        if caption:
            data["caption"] = truncate_html(caption, CAPTION_LIMIT)
            data["parse_mode"] = "HTML"
        try:
            with Path(image_path).open("rb") as photo:
                response = self._session.post(
                    self._method_url("sendPhoto"),
                    data=data,
                    files={"photo": (Path(image_path).name, photo)},
                    timeout=self._timeout_sec,
                )
            return self._check_response("sendPhoto", response)
        except (OSError, requests.RequestException) as exc:
            return self._failed("sendPhoto", str(exc))

    def _method_url(self, method: str) -> str:
        return f"{self._api_url}/bot{self._bot_token}/{method}"

    def _check_response(self, method: str, response: requests.Response) -> DeliveryResult:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("ok") is True:
            LOGGER.info("Telegram %s delivered to chat %s", method, self._chat_id)
            return DeliveryResult(ok=True)
        description = body.get("description") if isinstance(body, dict) else None
        return self._failed(method, f"HTTP {response.status_code}: {description or response.text[:200]}")

    def _failed(self, method: str, error: str) -> DeliveryResult:
        error = BOT_TOKEN_PATTERN.sub("/bot<redacted>", error)
        LOGGER.error("Telegram %s failed: %s", method, error)
        return DeliveryResult(ok=False, error=error)

    def _not_configured(self, method: str) -> DeliveryResult:
        LOGGER.warning("Telegram %s skipped: bot token or chat id is not configured", method)
        return DeliveryResult(ok=False, error="notifier not configured")
