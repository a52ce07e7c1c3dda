# hrn_offers/handler.py
from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

from hrn_offers.config import ResolverConfig, load_resolver_config
from hrn_offers.exceptions import (
    HrnParseError,
    HrnResolutionFailure,
    ParseHrnFailure,
    ResolutionError,
    ResolveUriError,
)
from hrn_offers.resolve.base import HrnResolver
from hrn_offers.resolve.http import HttpHrnResolver
from hrn_offers.resolve.name import parse
from hrn_offers.resolve.outcome import AlternateService, SignedResult

OFFER_PARAM = "lno"

ALTERNATE_SERVICE_UNSUPPORTED = "alternate-service resolution not supported in this flow"
INVALID_URI_FORMAT = "invalid URI format"
MISSING_OFFER_PARAM = "URI does not contain 'lno' parameter with BOLT12 offer"

# RFC 3986 scheme followed by ':'
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
# Raw whitespace and control characters (urlsplit drops tab/CR/LF without a word)
_UNSAFE_RE = re.compile(r"[\x00-\x20\x7f]")


class OfferResolutionHandler:
    """
    Turn a human-readable name into a BOLT12 offer.

    Flow (single await, no retries):
      1) parse the name                 → ParseHrnFailure
      2) resolver.resolve_hrn(name)     → HrnResolutionFailure
      3) SignedResult → URI; AlternateService → ResolveUriError
      4) extract `lno` from the URI     → ResolveUriError

    The resolver is fixed at construction and shared by every concurrent
    call; the handler keeps no per-request state.
    """

    def __init__(self, resolver: HrnResolver) -> None:
        self._resolver = resolver

    @classmethod
    def default(
        cls,
        *,
        timeout: float | None = None,
        config: ResolverConfig | None = None,
    ) -> OfferResolutionHandler:
        """
        Build the production handler (DNS-over-HTTPS resolver).

        `timeout` overrides the configured outbound request timeout.
        """
        cfg = config or load_resolver_config()
        if cfg.test_overrides_enabled:
            from hrn_offers import testing

            override = testing.installed_resolver()
            if override is not None:
                return cls(override)
        return cls(
            HttpHrnResolver(
                timeout=timeout if timeout is not None else cfg.timeout_s,
                doh_url=cfg.doh_url,
                user_agent=cfg.user_agent,
            )
        )

    @property
    def resolver(self) -> HrnResolver:
        return self._resolver

    # ---- lifecycle -------------------------------------------------------------------

    async def aclose(self) -> None:
        close = getattr(self._resolver, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> OfferResolutionHandler:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- public API ------------------------------------------------------------------

    async def resolve_uri(self, name_str: str) -> str:
        """Resolve `name_str` to the `bitcoin:` URI its owner published."""
        try:
            name = parse(name_str)
        except HrnParseError as err:
            raise ParseHrnFailure(name_str) from err

        try:
            outcome = await self._resolver.resolve_hrn(name)
        except ResolutionError as err:
            raise HrnResolutionFailure(name_str, err.message) from err

        if isinstance(outcome, SignedResult):
            return outcome.uri
        if isinstance(outcome, AlternateService):
            raise ResolveUriError(ALTERNATE_SERVICE_UNSUPPORTED)
        raise TypeError(f"unexpected resolution outcome: {outcome!r}")

    async def resolve_name_to_offer(self, name_str: str) -> str:
        uri = await self.resolve_uri(name_str)
        return self.extract_offer_from_uri(uri)

    @staticmethod
    def extract_offer_from_uri(uri: str) -> str:
        """
        Return the percent-decoded value of the first `lno` query parameter.

        The key is matched case-insensitively. A URI without a query (e.g.
        "bitcoin:") is valid and simply has no offer.
        """
        if not isinstance(uri, str) or not _SCHEME_RE.match(uri) or _UNSAFE_RE.search(uri):
            raise ResolveUriError(INVALID_URI_FORMAT)
        try:
            parts = urlsplit(uri)
        except ValueError as err:
            raise ResolveUriError(INVALID_URI_FORMAT) from err

        for pair in parts.query.split("&"):
            key, sep, value = pair.partition("=")
            key = unquote(key)
            if sep and key.isascii() and key.lower() == OFFER_PARAM:
                try:
                    offer = unquote(value, errors="strict")
                except UnicodeDecodeError as err:
                    raise ResolveUriError(INVALID_URI_FORMAT) from err
                if not offer:
                    break
                return offer
        raise ResolveUriError(MISSING_OFFER_PARAM)


async def resolve_offer(name_str: str, *, timeout: float | None = None) -> str:
    """One-shot helper: build the default handler, resolve, close it."""
    async with OfferResolutionHandler.default(timeout=timeout) as handler:
        return await handler.resolve_name_to_offer(name_str)


__all__ = [
    "OFFER_PARAM",
    "ALTERNATE_SERVICE_UNSUPPORTED",
    "INVALID_URI_FORMAT",
    "MISSING_OFFER_PARAM",
    "OfferResolutionHandler",
    "resolve_offer",
]
