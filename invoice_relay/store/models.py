"""Persisted invoice request records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class InvoiceRequest:
    """One accepted invoice request, immutable once appended."""

    id: str
    timestamp: str
    name: str
    phone: str
    email: str
    mst: str
    company_name: str
    company_address: str
    representative: str
    image_path: str

    @property
    def created_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "mst": self.mst,
            "companyName": self.company_name,
            "companyAddress": self.company_address,
            "representative": self.representative,
            "imagePath": self.image_path,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> InvoiceRequest:
        """Build a record from its JSON form; raises KeyError/TypeError on bad input."""
        if not isinstance(payload, dict):
            raise TypeError(f"Invoice record must be an object, got {type(payload).__name__}")
        return cls(
            id=str(payload["id"]),
            timestamp=str(payload["timestamp"]),
            name=str(payload.get("name", "")),
            phone=str(payload["phone"]),
            email=str(payload["email"]),
            mst=str(payload["mst"]),
            company_name=str(payload.get("companyName", "")),
            company_address=str(payload.get("companyAddress", "")),
            representative=str(payload.get("representative", "")),
            image_path=str(payload.get("imagePath", "")),
        )
