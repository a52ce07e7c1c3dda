"""
Shared exception classes used across the codebase.

Two layers:
  - HrnParseError / ResolutionError are raised by the name parser and by
    resolver implementations respectively.
  - OfferError and its subclasses are what OfferResolutionHandler raises to
    its callers. Callers map these kinds to their own retry/messaging policy.
"""

from __future__ import annotations


class HrnParseError(ValueError):
    """Raised when a string is not a well-formed human-readable name."""

    def __init__(self, encoded: str, reason: str = "malformed human-readable name") -> None:
        super().__init__(f"{reason}: {encoded!r}")
        self.encoded = encoded
        self.reason = reason


class ResolutionError(Exception):
    """
    Raised by a resolver when a lookup cannot be completed.

    Examples:
        - Transport failures and timeouts
        - Missing DNSSEC validation on the answer
        - Ambiguous or unusable records
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OfferError(Exception):
    """Base class for every failure of name -> offer resolution."""


class ParseHrnFailure(OfferError):
    """The input string is not a well-formed human-readable name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid human-readable name: {name}")
        self.name = name


class HrnResolutionFailure(OfferError):
    """The resolver could not complete the lookup (network, protocol or timeout)."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"HRN resolution failed for {name}: {reason}")
        self.name = name
        self.reason = reason


class ResolveUriError(OfferError):
    """The lookup succeeded but its result cannot yield an offer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


__all__ = [
    "HrnParseError",
    "ResolutionError",
    "OfferError",
    "ParseHrnFailure",
    "HrnResolutionFailure",
    "ResolveUriError",
]
