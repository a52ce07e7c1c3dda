# hrn_offers/resolve/__init__.py
"""
Resolve package

  - `name` parses human-readable names (₿user@domain).
  - `outcome` holds the two resolution outcomes (SignedResult / AlternateService).
  - `base` defines the HrnResolver protocol the handler depends on.
  - `http` resolves over DNS-over-HTTPS with an LNURL-pay probe (default).
  - `dnssec` resolves through a DNSSEC-validating recursive resolver (dnspython).
"""

from __future__ import annotations

from .base import HrnResolver, select_payment_uri
from .dnssec import DnssecHrnResolver
from .http import HttpHrnResolver
from .name import HumanReadableName, parse
from .outcome import AlternateService, ResolutionOutcome, SignedResult

__all__ = [
    "HumanReadableName",
    "parse",
    "SignedResult",
    "AlternateService",
    "ResolutionOutcome",
    "HrnResolver",
    "select_payment_uri",
    "HttpHrnResolver",
    "DnssecHrnResolver",
]
