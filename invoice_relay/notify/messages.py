"""Chat message templates for invoice requests and the daily digest."""

from __future__ import annotations

from datetime import date, tzinfo
from html import escape
from typing import Final, Sequence

from invoice_relay.store.models import InvoiceRequest


PLACEHOLDER: Final[str] = "N/A"
SEPARATOR: Final[str] = "━━━━━━━━━━━━━━━━━━━━"
CAPTION_LIMIT: Final[int] = 1024
TEXT_LIMIT: Final[int] = 4096
ELLIPSIS: Final[str] = "…"


def _e(value: str) -> str:
    return escape(value, quote=False)


def _or_placeholder(value: str) -> str:
    return _e(value) if value else PLACEHOLDER


def truncate_html(text: str, limit: int) -> str:
    """Shorten ``text`` to ``limit`` characters without splitting a tag or entity."""
    if len(text) <= limit:
        return text
    cut = text[: limit - len(ELLIPSIS)]
    amp = cut.rfind("&")
    if amp != -1 and ";" not in cut[amp:]:
        cut = cut[:amp]
    lt = cut.rfind("<")
    if lt != -1 and ">" not in cut[lt:]:
        cut = cut[:lt]
    return cut + ELLIPSIS


def format_invoice_message(record: InvoiceRequest, store_name: str, tz: tzinfo) -> str:
    """Detailed notification for one accepted request."""
    created = record.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=tz)
    timestamp = created.astimezone(tz).strftime("%H:%M %d/%m/%Y")

    return f"""🧾 <b>YÊU CẦU XUẤT HÓA ĐƠN MỚI</b>
{SEPARATOR}

📅 <b>Thời gian:</b> {timestamp}

👤 <b>THÔNG TIN KHÁCH HÀNG</b>
• Họ tên: {_e(record.name)}
• Điện thoại: {_e(record.phone)}
• Email: {_e(record.email)}

🏢 <b>THÔNG TIN DOANH NGHIỆP</b>
• MST: <code>{_e(record.mst)}</code>
• Công ty: {_or_placeholder(record.company_name)}
• Địa chỉ: {_or_placeholder(record.company_address)}
• Đại diện: {_or_placeholder(record.representative)}

{SEPARATOR}
📌 <i>{_e(store_name)}</i>"""


def format_photo_caption(record: InvoiceRequest) -> str:
    caption = f"""📷 Ảnh hóa đơn
👤 {_e(record.name)}
📱 {_e(record.phone)}
🏢 MST: {_e(record.mst)}"""
    return truncate_html(caption, CAPTION_LIMIT)


def format_empty_digest(day: date, store_name: str) -> str:
    return (
        f"📭 <b>Không có yêu cầu xuất hóa đơn nào hôm nay</b> ({day:%d/%m/%Y})\n"
        f"📌 <i>{_e(store_name)}</i>"
    )


def format_digest_message(records: Sequence[InvoiceRequest], day: date, store_name: str) -> str:
    """Daily summary: header with date and count, then two lines per request.

    Entries that would push the message past the provider limit are replaced
    by one "and N more" line so the markup stays balanced.
    """
    header = "\n".join(
        [
            "📊 <b>BÁO CÁO YÊU CẦU XUẤT HÓA ĐƠN</b>",
            f"📅 Ngày: {day:%d/%m/%Y}",
            f"🔢 Tổng số yêu cầu: {len(records)}",
            SEPARATOR,
            "",
        ]
    )
    footer = f"\n\n{SEPARATOR}\n📌 <i>{_e(store_name)}</i>"

    entries = [
        f"{index}. <b>{_or_placeholder(record.company_name)}</b> - MST: <code>{_e(record.mst)}</code>\n"
        f"   👤 {_e(record.name)} - 📱 {_e(record.phone)}"
        for index, record in enumerate(records, start=1)
    ]
    body = "\n".join(entries)
    kept = len(entries)
    while kept and len(header) + len(body) + len(footer) + 1 > TEXT_LIMIT:
        kept -= 1
        body = "\n".join(entries[:kept] + [f"… và {len(entries) - kept} yêu cầu khác"])
    return header + "\n" + body + footer
