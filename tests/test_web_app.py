from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from invoice_relay.config import AppSettings
from invoice_relay.intake.validation import (
    MSG_FILE_TOO_LARGE,
    MSG_INVALID_FILE_TYPE,
    MSG_MISSING_FIELD,
    MSG_MISSING_IMAGE,
)
from invoice_relay.lookup import CompanyInfo, CompanyLookupError
from invoice_relay.notify import DeliveryResult
from invoice_relay.store import InvoiceStore, StoreWriteError
from invoice_relay.web.app import MSG_INTERNAL_ERROR, create_app


JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 2048
FORM = {
    "name": "",
    "phone": "0912345678",
    "email": "a@b.com",
    "mst": "0101234567",
    "companyName": "",
    "companyAddress": "",
    "representative": "",
}


def _settings(root: Path) -> AppSettings:
    return AppSettings(
        port=3000,
        telegram_bot_token="token",
        telegram_chat_id="chat",
        telegram_api_url="https://api.telegram.test",
        notify_timeout_seconds=1.0,
        store_name="Shop",
        store_path=root / "invoices.json",
        upload_dir=root / "uploads",
        max_upload_bytes=10 * 1024 * 1024,
        image_ttl_days=7,
        timezone="Asia/Ho_Chi_Minh",
        retention_hour=3,
        retention_minute=0,
        digest_hour=20,
        digest_minute=0,
        scheduler_enabled=False,
        mst_lookup_url="https://registry.test/",
        cors_origins=("*",),
    )


class InvoiceApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.settings = _settings(Path(self._tmp.name))
        self.store = InvoiceStore(self.settings.store_path, tz=self.settings.timezone)
        self.notifier = MagicMock()
        self.notifier.configured = True
        self.notifier.send_photo.return_value = DeliveryResult(ok=True)
        self.notifier.send_text.return_value = DeliveryResult(ok=True)
        self.client = TestClient(create_app(self.settings, self.store, self.notifier))

    def _post(self, data: dict[str, str] | None = None, files: dict | None = None):
        if files is None:
            files = {"image": ("hoadon.jpg", JPEG_BYTES, "image/jpeg")}
        return self.client.post("/api/invoice", data=FORM if data is None else data, files=files)

    def test_health(self) -> None:
        response = self.client.get("/api/health")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertIn("timestamp", body)

    def test_accepted_submission(self) -> None:
        response = self._post()

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["invoiceId"].startswith("INV-"))
        self.assertTrue(body["message"])
        records = self.store.query_all()
        self.assertEqual([r.id for r in records], [body["invoiceId"]])
        self.assertEqual(records[0].name, "Khách hàng")
        self.assertEqual(records[0].company_name, "")

    def test_invoice_ids_unique_across_submissions(self) -> None:
        ids = [self._post().json()["invoiceId"] for _ in range(5)]

        self.assertEqual(len(set(ids)), 5)
        self.assertEqual(sorted(r.id for r in self.store.query_all()), sorted(ids))

    def test_missing_required_fields_rejected_without_storing(self) -> None:
        for field_name in ("phone", "email", "mst"):
            with self.subTest(field=field_name):
                data = {k: v for k, v in FORM.items() if k != field_name}

                response = self._post(data=data)

                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"success": False, "message": MSG_MISSING_FIELD})
        self.assertEqual(self.store.query_all(), [])
        self.notifier.send_text.assert_not_called()

    def test_missing_image_rejected(self) -> None:
        response = self.client.post("/api/invoice", data=FORM)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], MSG_MISSING_IMAGE)
        self.assertEqual(self.store.query_all(), [])

    def test_non_image_rejected(self) -> None:
        response = self._post(files={"image": ("hd.pdf", b"%PDF-1.4", "application/pdf")})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], MSG_INVALID_FILE_TYPE)

    def test_too_large_image_rejected(self) -> None:
        big = b"\xff\xd8" + b"0" * (15 * 1024 * 1024)

        response = self._post(files={"image": ("big.jpg", big, "image/jpeg")})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "message": MSG_FILE_TOO_LARGE})
        self.assertEqual(self.store.query_all(), [])
        self.assertFalse(self.settings.upload_dir.exists())

    def test_notification_failures_do_not_change_response(self) -> None:
        self.notifier.send_photo.return_value = DeliveryResult(ok=False, error="boom")
        self.notifier.send_text.return_value = DeliveryResult(ok=False, error="boom")

        response = self._post()

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])
        self.notifier.send_text.assert_called_once()

    def test_store_failure_returns_generic_500(self) -> None:
        with patch.object(self.store, "append", side_effect=StoreWriteError("/secret/path: disk full")):
            response = self._post()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "message": MSG_INTERNAL_ERROR})
        self.notifier.send_photo.assert_not_called()

    def test_cors_preflight_allowed(self) -> None:
        response = self.client.options(
            "/api/invoice",
            headers={"Origin": "https://form.example", "Access-Control-Request-Method": "POST"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("access-control-allow-origin", response.headers)


class CompanyLookupApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        settings = replace(_settings(Path(self._tmp.name)), cors_origins=("https://form.example",))
        self.client = TestClient(create_app(settings, notifier=MagicMock()))

    @patch("invoice_relay.web.app.lookup_company")
    def test_found(self, mock_lookup) -> None:
        mock_lookup.return_value = CompanyInfo(
            mst="0101234567",
            company_name="Công ty ABC",
            company_address="Hà Nội",
            representative="Trần B",
        )

        response = self.client.get("/api/mst/0101234567")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["companyName"], "Công ty ABC")
        self.assertEqual(mock_lookup.call_args.kwargs["base_url"], "https://registry.test/")

    @patch("invoice_relay.web.app.lookup_company")
    def test_not_found(self, mock_lookup) -> None:
        mock_lookup.return_value = None

        response = self.client.get("/api/mst/0101234567")

        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.json()["success"])

    @patch("invoice_relay.web.app.lookup_company")
    def test_registry_unreachable(self, mock_lookup) -> None:
        mock_lookup.side_effect = CompanyLookupError("timed out")

        response = self.client.get("/api/mst/0101234567")

        self.assertEqual(response.status_code, 502)

    @patch("invoice_relay.web.app.lookup_company")
    def test_malformed_mst_not_forwarded(self, mock_lookup) -> None:
        response = self.client.get("/api/mst/abc")

        self.assertEqual(response.status_code, 400)
        mock_lookup.assert_not_called()


if __name__ == "__main__":
    unittest.main()
