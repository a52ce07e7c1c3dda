# hrn_offers/__init__.py
"""
Resolve BIP 353 human-readable names (₿user@domain) to BOLT12 offers.

Public entry points:
  - OfferResolutionHandler (resolve_name_to_offer, resolve_uri, extract_offer_from_uri)
  - resolve_offer(name) one-shot helper
  - HrnResolver protocol and its production implementations
  - error taxonomy: OfferError, ParseHrnFailure, HrnResolutionFailure, ResolveUriError
"""

from __future__ import annotations

from .exceptions import (
    HrnParseError,
    HrnResolutionFailure,
    OfferError,
    ParseHrnFailure,
    ResolutionError,
    ResolveUriError,
)
from .handler import OfferResolutionHandler, resolve_offer
from .resolve import (
    AlternateService,
    DnssecHrnResolver,
    HrnResolver,
    HttpHrnResolver,
    HumanReadableName,
    ResolutionOutcome,
    SignedResult,
    parse,
)

__all__ = [
    "OfferResolutionHandler",
    "resolve_offer",
    "HumanReadableName",
    "parse",
    "SignedResult",
    "AlternateService",
    "ResolutionOutcome",
    "HrnResolver",
    "HttpHrnResolver",
    "DnssecHrnResolver",
    "HrnParseError",
    "ResolutionError",
    "OfferError",
    "ParseHrnFailure",
    "HrnResolutionFailure",
    "ResolveUriError",
]

__version__ = "0.1.0"
