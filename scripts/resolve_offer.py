# scripts/resolve_offer.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from hrn_offers.config import load_resolver_config
from hrn_offers.exceptions import OfferError
from hrn_offers.handler import OfferResolutionHandler
from hrn_offers.resolve.dnssec import DnssecHrnResolver


def _build_handler(*, timeout: float | None, use_dns: bool) -> OfferResolutionHandler:
    if not use_dns:
        return OfferResolutionHandler.default(timeout=timeout)
    cfg = load_resolver_config()
    return OfferResolutionHandler(
        DnssecHrnResolver(
            timeout=timeout if timeout is not None else cfg.timeout_s,
            nameservers=cfg.nameservers or None,
        )
    )


async def _run(name: str, *, timeout: float | None, use_dns: bool, uri_only: bool) -> str:
    async with _build_handler(timeout=timeout, use_dns=use_dns) as handler:
        if uri_only:
            return await handler.resolve_uri(name)
        return await handler.resolve_name_to_offer(name)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Resolve a ₿user@domain name to a BOLT12 offer")
    ap.add_argument("name", help="Human-readable name, e.g. alice@example.com")
    ap.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Outbound request timeout in seconds (default: HRN_RESOLVER_TIMEOUT_S or 20)",
    )
    ap.add_argument(
        "--dns",
        action="store_true",
        help="Query a validating DNS resolver (HRN_DNS_NAMESERVERS) instead of DNS-over-HTTPS",
    )
    ap.add_argument("--uri-only", action="store_true", help="Print the resolved bitcoin: URI")
    ap.add_argument("--json", action="store_true", help="Output JSON instead of plain text")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s %(message)s",
        )

    try:
        value = asyncio.run(
            _run(args.name, timeout=args.timeout, use_dns=args.dns, uri_only=args.uri_only)
        )
    except OfferError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    if args.json:
        key = "uri" if args.uri_only else "offer"
        print(json.dumps({"name": args.name, key: value}, ensure_ascii=False))
    else:
        print(value)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
