# hrn_offers/resolve/dnssec.py
from __future__ import annotations

import logging
from collections.abc import Sequence

import dns.asyncresolver
import dns.exception
import dns.flags
import dns.resolver

from hrn_offers.config import DEFAULT_TIMEOUT_S
from hrn_offers.exceptions import ResolutionError

from .base import select_payment_uri
from .name import HumanReadableName
from .outcome import SignedResult

log = logging.getLogger(__name__)

# EDNS payload size recommended by DNS flag day 2020
_EDNS_PAYLOAD = 1232


class DnssecHrnResolver:
    """
    Resolve names with a plain DNS stub resolver (dnspython).

    Signature checking is left to the recursive resolver: we set the DO bit,
    ask for AD, and only accept answers that come back with AD set. Point
    `nameservers` at a validating resolver you trust (ideally on localhost).

    Never returns AlternateService; a name without a bitcoin: record is a
    ResolutionError here.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        nameservers: Sequence[str] | None = None,
    ) -> None:
        r = dns.asyncresolver.Resolver(configure=not nameservers)
        if nameservers:
            r.nameservers = list(nameservers)
        r.timeout = timeout
        r.lifetime = timeout
        r.use_edns(0, dns.flags.DO, _EDNS_PAYLOAD)
        r.flags = dns.flags.RD | dns.flags.AD
        self._resolver = r

    async def resolve_hrn(self, name: HumanReadableName) -> SignedResult:
        qname = name.dns_name
        try:
            answer = await self._resolver.resolve(qname, "TXT", raise_on_no_answer=False)
        except dns.resolver.NXDOMAIN as err:
            raise ResolutionError(f"{qname} does not exist") from err
        except dns.exception.DNSException as err:
            log.debug("TXT lookup for %s failed: %s", qname, err)
            raise ResolutionError(f"TXT lookup for {qname} failed: {err}") from err

        if not answer.response.flags & dns.flags.AD:
            raise ResolutionError(f"DNS answer for {qname} was not DNSSEC-validated")

        records = [
            b"".join(rdata.strings).decode("utf-8", errors="replace")
            for rdata in (answer.rrset or [])
        ]
        try:
            uri = select_payment_uri(records)
        except ValueError as err:
            raise ResolutionError(str(err)) from err
        if uri is None:
            raise ResolutionError(f"no bitcoin: record at {qname}")

        log.debug("Resolved %s via DNSSEC TXT record", name)
        return SignedResult(uri=uri)


__all__ = ["DnssecHrnResolver"]
