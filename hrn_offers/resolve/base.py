from __future__ import annotations

from typing import Protocol

from .name import HumanReadableName
from .outcome import ResolutionOutcome

# Payment records are TXT strings carrying a BIP 21 URI
URI_PREFIX = "bitcoin:"


class HrnResolver(Protocol):
    """
    Anything that can turn a HumanReadableName into a ResolutionOutcome.

    OfferResolutionHandler depends on this protocol instead of a concrete
    network client, so production resolvers (HttpHrnResolver,
    DnssecHrnResolver) and test doubles (testing.StaticHrnResolver) are
    interchangeable.

    Implementations are shared between concurrent tasks and must not mutate
    their state after construction.
    """

    async def resolve_hrn(self, name: HumanReadableName) -> ResolutionOutcome:
        """
        Look up `name` and return a SignedResult or an AlternateService.

        Raises ResolutionError on any transport or protocol failure, timeouts
        included.
        """
        ...


def select_payment_uri(records: list[str]) -> str | None:
    """
    Pick the single `bitcoin:` record out of a TXT RRset.

    Returns None when there is none; raises ValueError when there are several,
    since the owner of the name must publish exactly one.
    """
    found = [r for r in records if r[: len(URI_PREFIX)].lower() == URI_PREFIX]
    if len(found) > 1:
        raise ValueError(f"{len(found)} bitcoin: records found, expected one")
    return found[0] if found else None


__all__ = ["URI_PREFIX", "HrnResolver", "select_payment_uri"]
