"""Look up a company in the tax registry by its tax id (MST)."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from invoice_relay.intake import is_valid_mst
from invoice_relay.lookup import DEFAULT_LOOKUP_URL, CompanyLookupError, lookup_company


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Fetch company name, address and representative for a tax id."
    )
    parser.add_argument("mst", help="Tax id, 10 digits with an optional branch suffix.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Request timeout in seconds (default: 10).",
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_LOOKUP_URL,
        help=f"Registry base URL (default: {DEFAULT_LOOKUP_URL}).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the lookup and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    mst = args.mst.strip()
    if not is_valid_mst(mst):
        print(f"Invalid tax id: {mst}", file=sys.stderr)
        return 2
    try:
        company = lookup_company(mst, base_url=args.base_url, timeout_sec=args.timeout)
    except CompanyLookupError as exc:
        print(f"Lookup error: {exc}", file=sys.stderr)
        return 2

    if company is None:
        print(f"No company found for {mst}", file=sys.stderr)
        return 1
    print(json.dumps(company.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
