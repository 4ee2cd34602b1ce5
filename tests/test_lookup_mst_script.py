from __future__ import annotations

from contextlib import redirect_stderr, redirect_stdout
import io
import json
import unittest
from unittest.mock import patch

from invoice_relay.lookup import CompanyInfo, CompanyLookupError
from scripts import lookup_mst


class LookupMstScriptTests(unittest.TestCase):
    @patch("scripts.lookup_mst.lookup_company")
    def test_main_success(self, mock_lookup) -> None:
        mock_lookup.return_value = CompanyInfo(
            mst="0101234567",
            company_name="Công ty ABC",
            company_address="Hà Nội",
            representative="Trần B",
        )

        stdout = io.StringIO()
        with redirect_stdout(stdout):
            exit_code = lookup_mst.main(["0101234567", "--timeout", "5"])

        self.assertEqual(exit_code, 0)
        self.assertEqual(json.loads(stdout.getvalue())["companyName"], "Công ty ABC")
        self.assertEqual(mock_lookup.call_args.kwargs["timeout_sec"], 5.0)

    @patch("scripts.lookup_mst.lookup_company")
    def test_main_not_found(self, mock_lookup) -> None:
        mock_lookup.return_value = None

        stderr = io.StringIO()
        with redirect_stderr(stderr):
            exit_code = lookup_mst.main(["0101234567"])

        self.assertEqual(exit_code, 1)
        self.assertIn("No company found for 0101234567", stderr.getvalue())

    @patch("scripts.lookup_mst.lookup_company")
    def test_main_lookup_error(self, mock_lookup) -> None:
        mock_lookup.side_effect = CompanyLookupError("timed out")

        stderr = io.StringIO()
        with redirect_stderr(stderr):
            exit_code = lookup_mst.main(["0101234567"])

        self.assertEqual(exit_code, 2)
        self.assertIn("Lookup error: timed out", stderr.getvalue())

    @patch("scripts.lookup_mst.lookup_company")
    def test_main_rejects_malformed_mst(self, mock_lookup) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            exit_code = lookup_mst.main(["12ab"])

        self.assertEqual(exit_code, 2)
        mock_lookup.assert_not_called()

    def test_main_requires_mst(self) -> None:
        stderr = io.StringIO()
        with self.assertRaises(SystemExit) as ctx:
            with redirect_stderr(stderr):
                lookup_mst.main([])

        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("mst", stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
