"""Runtime configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os


@dataclass(frozen=True)
class AppSettings:
    """Environment-backed settings for the web app and worker."""

    port: int
    telegram_bot_token: str
    telegram_chat_id: str
    telegram_api_url: str
    notify_timeout_seconds: float
    store_name: str
    store_path: Path
    upload_dir: Path
    max_upload_bytes: int
    image_ttl_days: int
    timezone: str
    retention_hour: int
    retention_minute: int
    digest_hour: int
    digest_minute: int
    scheduler_enabled: bool
    mst_lookup_url: str
    cors_origins: tuple[str, ...]


DEFAULT_STORE_NAME = "Cửa hàng Cát Hải"
DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"
DEFAULT_TELEGRAM_API_URL = "https://api.telegram.org"
DEFAULT_MST_LOOKUP_URL = "https://esgoo.net/api-mst/"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for {name}: {value}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid float for {name}: {value}") from exc


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean for {name}: {value}")


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def load_settings() -> AppSettings:
    """Load all app settings from the environment."""
    data_dir = Path(os.getenv("DATA_DIR", "data")).expanduser()
    return AppSettings(
        port=_env_int("PORT", 3000),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        telegram_chat_id=os.getenv("TELEGRAM_CHAT_ID", ""),
        telegram_api_url=os.getenv("TELEGRAM_API_URL", DEFAULT_TELEGRAM_API_URL),
        notify_timeout_seconds=_env_float("NOTIFY_TIMEOUT_SECONDS", 10.0),
        store_name=os.getenv("STORE_NAME", DEFAULT_STORE_NAME),
        store_path=Path(os.getenv("INVOICE_STORE_PATH", str(data_dir / "invoices.json"))),
        upload_dir=Path(os.getenv("UPLOAD_DIR", str(data_dir / "uploads"))),
        max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES),
        image_ttl_days=_env_int("IMAGE_TTL_DAYS", 7),
        timezone=os.getenv("TIMEZONE", DEFAULT_TIMEZONE),
        retention_hour=_env_int("RETENTION_HOUR", 3),
        retention_minute=_env_int("RETENTION_MINUTE", 0),
        digest_hour=_env_int("DIGEST_HOUR", 20),
        digest_minute=_env_int("DIGEST_MINUTE", 0),
        scheduler_enabled=_env_bool("SCHEDULER_ENABLED", True),
        mst_lookup_url=os.getenv("MST_LOOKUP_URL", DEFAULT_MST_LOOKUP_URL),
        cors_origins=_env_list("CORS_ORIGINS", "*"),
    )
