from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class SignedResult:
    """A `bitcoin:` URI taken from a DNSSEC-validated TXT record."""

    uri: str
    proof: bytes | None = None  # RFC 9102 proof, when the resolver collected one


@dataclass(frozen=True, slots=True)
class AlternateService:
    """The name should be paid through an LNURL-pay service instead."""

    callback: str
    min_value_msat: int
    max_value_msat: int


ResolutionOutcome: TypeAlias = SignedResult | AlternateService

__all__ = ["SignedResult", "AlternateService", "ResolutionOutcome"]
