# hrn_offers/resolve/http.py
from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from hrn_offers.config import DEFAULT_DOH_URL, DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT
from hrn_offers.exceptions import ResolutionError

from .base import select_payment_uri
from .name import HumanReadableName
from .outcome import AlternateService, ResolutionOutcome, SignedResult

log = logging.getLogger(__name__)

# DNS JSON API (application/dns-json) constants
_TYPE_CNAME = 5
_TYPE_TXT = 16
_STATUS_NOERROR = 0
_STATUS_NXDOMAIN = 3

# One quoted TXT character-string, with \" and \\ escapes
_QUOTED_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')
_UNESCAPE_RE = re.compile(r"\\(.)")


def _norm_name(name: str) -> str:
    return name.rstrip(".").lower()


def _txt_text(data: str) -> str:
    """
    Join the character-strings of one TXT record.

    Some DoH providers return `"part one" "part two"`, others the bare text.
    """
    s = data.strip()
    if not s.startswith('"'):
        return s
    return "".join(_UNESCAPE_RE.sub(r"\1", part) for part in _QUOTED_RE.findall(s))


def txt_records_for(payload: dict[str, Any], qname: str) -> list[str]:
    """
    Extract TXT record texts owned by `qname` (following CNAMEs in the
    answer section) from a DNS JSON response. Raises ResolutionError when the
    answer section is not a list of objects.
    """
    answers = payload.get("Answer") or []
    if not isinstance(answers, list) or not all(isinstance(rr, dict) for rr in answers):
        raise ResolutionError(f"malformed DNS JSON answer for {qname}")
    owners = {_norm_name(qname)}
    # CNAME chains are listed in order; a single pass picks them all up
    for rr in answers:
        if rr.get("type") == _TYPE_CNAME and _norm_name(str(rr.get("name", ""))) in owners:
            owners.add(_norm_name(str(rr.get("data", ""))))
    return [
        _txt_text(str(rr.get("data", "")))
        for rr in answers
        if rr.get("type") == _TYPE_TXT and _norm_name(str(rr.get("name", ""))) in owners
    ]


class HttpHrnResolver:
    """
    Resolve names over HTTPS: DNS-over-HTTPS (JSON API) for the BIP 353 TXT
    record, then an LNURL-pay probe when the domain publishes none.

    Flow:
      1) GET <doh_url>?name=<user>.user._bitcoin-payment.<domain>&type=TXT&do=1
      2) NOERROR + AD flag + one bitcoin: record → SignedResult
      3) NXDOMAIN / no bitcoin: record → GET https://<domain>/.well-known/lnurlp/<user>
         payRequest → AlternateService
      Anything else → ResolutionError

    The underlying httpx.AsyncClient is shared by concurrent lookups; the
    resolver itself holds no per-request state.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        doh_url: str = DEFAULT_DOH_URL,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.doh_url = doh_url
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            timeout=httpx.Timeout(timeout),
            follow_redirects=False,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    # ---- lifecycle -------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpHrnResolver:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- HrnResolver -----------------------------------------------------------------

    async def resolve_hrn(self, name: HumanReadableName) -> ResolutionOutcome:
        payload = await self._get_json(
            self.doh_url,
            params={"name": name.dns_name, "type": "TXT", "do": "1"},
            headers={"Accept": "application/dns-json"},
        )

        status = payload.get("Status")
        if status not in (_STATUS_NOERROR, _STATUS_NXDOMAIN):
            raise ResolutionError(f"DNS query for {name.dns_name} failed with status {status}")

        records = txt_records_for(payload, name.dns_name) if status == _STATUS_NOERROR else []
        try:
            uri = select_payment_uri(records)
        except ValueError as err:
            raise ResolutionError(str(err)) from err

        if uri is not None:
            if payload.get("AD") is not True:
                raise ResolutionError(f"DNS answer for {name.dns_name} was not DNSSEC-validated")
            log.debug("Resolved %s via DNSSEC TXT record", name)
            return SignedResult(uri=uri)

        log.debug("No bitcoin: record for %s; trying LNURL-pay", name)
        return await self._resolve_lnurl(name)

    # ---- internals -------------------------------------------------------------------

    async def _resolve_lnurl(self, name: HumanReadableName) -> AlternateService:
        url = f"https://{name.domain}/.well-known/lnurlp/{name.user}"
        payload = await self._get_json(url)
        if payload.get("tag") != "payRequest":
            raise ResolutionError(f"no bitcoin: record and no LNURL-pay service for {name}")
        try:
            outcome = AlternateService(
                callback=str(payload["callback"]),
                min_value_msat=int(payload["minSendable"]),
                max_value_msat=int(payload["maxSendable"]),
            )
        except (KeyError, TypeError, ValueError) as err:
            raise ResolutionError(f"malformed LNURL-pay response from {name.domain}") from err
        log.debug("Resolved %s via LNURL-pay at %s", name, outcome.callback)
        return outcome

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        try:
            resp = await self._client.get(url, params=params, headers=headers)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as err:
            log.debug("GET %s failed: %s", url, err)
            raise ResolutionError(f"request to {url} failed: {err}") from err
        except ValueError as err:
            raise ResolutionError(f"invalid JSON from {url}") from err
        if not isinstance(payload, dict):
            raise ResolutionError(f"unexpected JSON from {url}")
        return payload


__all__ = ["HttpHrnResolver", "txt_records_for"]
