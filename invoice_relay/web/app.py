"""FastAPI app receiving invoice requests."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invoice_relay.config import AppSettings, load_settings
from invoice_relay.intake import IntakeError, UploadedImage, is_valid_mst
from invoice_relay.intake.validation import MSG_INVALID_MST, MSG_MISSING_FIELD
from invoice_relay.lookup import CompanyLookupError, lookup_company
from invoice_relay.notify import TelegramNotifier
from invoice_relay.service import submit_invoice
from invoice_relay.store import InvoiceStore, StoreError
from invoice_relay.worker.scheduler import build_scheduler


LOGGER = logging.getLogger("invoice_relay.web")
SERVICE_NAME = "Invoice API"
MSG_SUCCESS = "Yêu cầu xuất hóa đơn đã được gửi thành công"
MSG_INTERNAL_ERROR = "Có lỗi xảy ra. Vui lòng thử lại sau."
MSG_COMPANY_NOT_FOUND = "Không tìm thấy thông tin doanh nghiệp. Vui lòng kiểm tra lại MST."
MSG_LOOKUP_UNAVAILABLE = "Không thể tra cứu mã số thuế lúc này. Vui lòng thử lại sau."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _read_upload(upload: UploadFile | None, max_bytes: int) -> UploadedImage | None:
    """Read at most one byte past the limit so oversized files are detected cheaply."""
    if upload is None:
        return None
    content = upload.file.read(max_bytes + 1)
    return UploadedImage(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        content=content,
    )


def create_app(
    settings: AppSettings | None = None,
    store: InvoiceStore | None = None,
    notifier: TelegramNotifier | None = None,
) -> FastAPI:
    """Build the app; collaborators default to ones derived from ``settings``."""
    settings = settings or load_settings()
    store = store or InvoiceStore(settings.store_path, tz=settings.timezone)
    notifier = notifier or TelegramNotifier(
        bot_token=settings.telegram_bot_token,
        chat_id=settings.telegram_chat_id,
        api_url=settings.telegram_api_url,
        timeout_sec=settings.notify_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        scheduler = None
        if settings.scheduler_enabled:
            scheduler = build_scheduler(settings, store, notifier)
            scheduler.start()
        if not notifier.configured:
            LOGGER.warning("Telegram credentials missing; notifications are disabled")
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)

    app = FastAPI(title="Invoice Relay Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.notifier = notifier
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.info("Rejected malformed request: %s", exc.errors())
        return _error(400, MSG_MISSING_FIELD)

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
        }

    @app.post("/api/invoice")
    def create_invoice(
        name: str | None = Form(default=None),
        phone: str | None = Form(default=None),
        email: str | None = Form(default=None),
        mst: str | None = Form(default=None),
        companyName: str | None = Form(default=None),  # noqa: N803
        companyAddress: str | None = Form(default=None),  # noqa: N803
        representative: str | None = Form(default=None),
        image: UploadFile | None = File(default=None),
    ) -> JSONResponse:
        fields = {
            "name": name,
            "phone": phone,
            "email": email,
            "mst": mst,
            "companyName": companyName,
            "companyAddress": companyAddress,
            "representative": representative,
        }
        try:
            upload = _read_upload(image, settings.max_upload_bytes)
            record = submit_invoice(fields, upload, settings, store, notifier)
        except IntakeError as exc:
            LOGGER.info("Rejected invoice request: %s", exc.message)
            return _error(400, exc.message)
        except StoreError as exc:
            LOGGER.error("Invoice request lost: %s", exc)
            return _error(500, MSG_INTERNAL_ERROR)
        except Exception as exc:
            LOGGER.exception("Unexpected error while processing invoice: %s", exc)
            return _error(500, MSG_INTERNAL_ERROR)

        return JSONResponse({"success": True, "message": MSG_SUCCESS, "invoiceId": record.id})

    @app.get("/api/mst/{mst}")
    def company_lookup(mst: str) -> JSONResponse:
        mst = mst.strip()
        if not is_valid_mst(mst):
            return _error(400, MSG_INVALID_MST)
        try:
            company = lookup_company(
                mst,
                base_url=settings.mst_lookup_url,
                timeout_sec=settings.notify_timeout_seconds,
            )
        except CompanyLookupError as exc:
            LOGGER.warning("Tax id lookup failed: %s", exc)
            return _error(502, MSG_LOOKUP_UNAVAILABLE)
        if company is None:
            return _error(404, MSG_COMPANY_NOT_FOUND)
        return JSONResponse({"success": True, "data": company.to_dict()})

    return app


app = create_app()
