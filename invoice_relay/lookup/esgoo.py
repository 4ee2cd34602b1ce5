"""Read-only company lookup by tax id against the esgoo.net registry mirror."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final
from urllib.parse import quote
from urllib.request import Request, urlopen
import json

from .exceptions import CompanyLookupError


DEFAULT_LOOKUP_URL: Final[str] = "https://esgoo.net/api-mst/"
DEFAULT_USER_AGENT: Final[str] = "invoice-relay/1.0"


@dataclass(frozen=True, slots=True)
class CompanyInfo:
    """Company details the registry returns for a tax id."""

    mst: str
    company_name: str
    company_address: str
    representative: str

    def to_dict(self) -> dict[str, str]:
        return {
            "mst": self.mst,
            "companyName": self.company_name,
            "companyAddress": self.company_address,
            "representative": self.representative,
        }


def lookup_company(
    mst: str,
    base_url: str = DEFAULT_LOOKUP_URL,
    timeout_sec: float = 10.0,
) -> CompanyInfo | None:
    """Return company details for ``mst``, or None when the registry has no match."""
    payload = _request_lookup_payload(mst=mst, base_url=base_url, timeout_sec=timeout_sec)
    return _parse_lookup_payload(mst, payload)


def _request_lookup_payload(mst: str, base_url: str, timeout_sec: float) -> str:
    url = f"{base_url.rstrip('/')}/{quote(mst, safe='')}.htm"
    request = Request(url, headers={"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"})
    try:
        with urlopen(request, timeout=timeout_sec) as response:
            return response.read().decode("utf-8", errors="replace")
    except Exception as exc:
        raise CompanyLookupError(f"Registry request failed for {mst}: {exc}") from exc


def _parse_lookup_payload(mst: str, response_text: str) -> CompanyInfo | None:
    try:
        envelope = json.loads(response_text)
    except ValueError as exc:
        raise CompanyLookupError(f"Registry returned invalid JSON for {mst}") from exc
    if not isinstance(envelope, dict):
        raise CompanyLookupError(f"Registry returned unexpected payload for {mst}")

    data = envelope.get("data")
    if envelope.get("error") != 0 or not isinstance(data, dict):
        return None
    return CompanyInfo(
        mst=mst,
        company_name=str(data.get("ten") or ""),
        company_address=str(data.get("dc") or ""),
        representative=str(data.get("daidien") or ""),
    )
