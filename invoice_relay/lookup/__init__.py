"""Tax registry lookup client."""

from .esgoo import DEFAULT_LOOKUP_URL, CompanyInfo, lookup_company
from .exceptions import CompanyLookupError

__all__ = ["CompanyInfo", "CompanyLookupError", "DEFAULT_LOOKUP_URL", "lookup_company"]
