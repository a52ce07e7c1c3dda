from __future__ import annotations

import re
from dataclasses import dataclass

import idna

from hrn_offers.exceptions import HrnParseError

BITCOIN_SYMBOL = "₿"
# Infix between user and domain in the DNS name holding the payment record
DNS_INFIX = ".user._bitcoin-payment."

# user + domain must leave room for the infix and the root dot in a 255-byte name
MAX_COMBINED_LEN = 255 - len(DNS_INFIX) - 1
MAX_LABEL_LEN = 63

_ALLOWED_RE = re.compile(r"[A-Za-z0-9._-]+")


@dataclass(frozen=True, slots=True)
class HumanReadableName:
    user: str  # lowercased, ascii
    domain: str  # lowercased, punycode ascii, no trailing dot

    def __post_init__(self) -> None:
        for part in (self.user, self.domain):
            if not _ALLOWED_RE.fullmatch(part) or part != part.lower() or not _labels_ok(part):
                raise HrnParseError(f"{self.user}@{self.domain}", "use parse() to build names")

    @property
    def dns_name(self) -> str:
        """Fully-qualified name of the TXT record, e.g. alice.user._bitcoin-payment.example.com."""
        return f"{self.user}{DNS_INFIX}{self.domain}."

    @property
    def address(self) -> str:
        return f"{self.user}@{self.domain}"

    def __str__(self) -> str:
        return f"{BITCOIN_SYMBOL}{self.user}@{self.domain}"


def _to_punycode(domain_like: str) -> str:
    # Accept unicode or ascii; return ascii/punycode (lowercase)
    if domain_like.isascii():
        return domain_like.lower()
    return idna.encode(domain_like, uts46=True).decode("ascii").lower()


def _labels_ok(s: str) -> bool:
    return all(0 < len(label) <= MAX_LABEL_LEN for label in s.split("."))


def parse(encoded: str) -> HumanReadableName:
    """
    Parse an encoded human-readable name ("₿alice@example.com" or
    "alice@example.com") into its canonical components.

    Raises HrnParseError carrying the original input when the grammar is
    violated. No network access.
    """
    if not isinstance(encoded, str):
        raise HrnParseError(repr(encoded), "expected a string")

    s = encoded[len(BITCOIN_SYMBOL) :] if encoded.startswith(BITCOIN_SYMBOL) else encoded
    if s.count("@") != 1:
        raise HrnParseError(encoded, "expected exactly one '@'")

    user, domain = s.split("@", 1)
    # Rooted FQDN form is accepted
    if domain.endswith("."):
        domain = domain[:-1]
    if not user or not domain:
        raise HrnParseError(encoded, "user and domain must be non-empty")

    try:
        domain = _to_punycode(domain)
    except idna.IDNAError as err:
        raise HrnParseError(encoded, f"invalid domain ({err})") from err

    if not _ALLOWED_RE.fullmatch(user) or not _ALLOWED_RE.fullmatch(domain):
        raise HrnParseError(encoded, "disallowed character")
    if len(user) + len(domain) > MAX_COMBINED_LEN:
        raise HrnParseError(encoded, "name too long")
    if not _labels_ok(user) or not _labels_ok(domain):
        raise HrnParseError(encoded, "empty or oversized label")

    return HumanReadableName(user=user.lower(), domain=domain)


__all__ = [
    "BITCOIN_SYMBOL",
    "DNS_INFIX",
    "MAX_COMBINED_LEN",
    "HumanReadableName",
    "parse",
]
