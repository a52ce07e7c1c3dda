# tests/test_dnssec_resolver.py
from __future__ import annotations

import asyncio
import types

import dns.exception
import dns.flags
import dns.rdata
import dns.resolver
import pytest

from hrn_offers.exceptions import ResolutionError
from hrn_offers.resolve.dnssec import DnssecHrnResolver
from hrn_offers.resolve.name import parse
from hrn_offers.resolve.outcome import SignedResult


def _rdata(text: str):
    return dns.rdata.from_text("IN", "TXT", text)


def _answer(*texts: str, ad: bool = True):
    flags = dns.flags.QR | dns.flags.RD | dns.flags.RA | (dns.flags.AD if ad else 0)
    return types.SimpleNamespace(
        response=types.SimpleNamespace(flags=flags),
        rrset=[_rdata(t) for t in texts] or None,
    )


def _resolver_with(monkeypatch, result) -> tuple[DnssecHrnResolver, list]:
    res = DnssecHrnResolver(nameservers=["127.0.0.1"], timeout=2.0)
    seen: list = []

    async def fake_resolve(qname, rdtype, **kwargs):
        seen.append((qname, rdtype, kwargs))
        if isinstance(result, BaseException):
            raise result
        return result

    monkeypatch.setattr(res._resolver, "resolve", fake_resolve)
    return res, seen


def _run(res: DnssecHrnResolver, name: str = "alice@example.com"):
    return asyncio.run(res.resolve_hrn(parse(name)))


def test_resolver_requests_dnssec():
    res = DnssecHrnResolver(nameservers=["127.0.0.1"], timeout=3.0)
    inner = res._resolver
    assert inner.flags & dns.flags.AD
    assert inner.ednsflags & dns.flags.DO
    assert inner.lifetime == 3.0


def test_validated_record_becomes_signed_result(monkeypatch):
    res, seen = _resolver_with(monkeypatch, _answer('"bitcoin:?lno=lno1abc"', '"v=spf1 -all"'))
    assert _run(res) == SignedResult(uri="bitcoin:?lno=lno1abc")
    qname, rdtype, _ = seen[0]
    assert qname == "alice.user._bitcoin-payment.example.com."
    assert rdtype == "TXT"


def test_multi_string_record_is_joined(monkeypatch):
    res, _ = _resolver_with(monkeypatch, _answer('"bitcoin:?lno=lno1aa" "bb"'))
    assert _run(res).uri == "bitcoin:?lno=lno1aabb"


def test_missing_ad_flag_is_rejected(monkeypatch):
    res, _ = _resolver_with(monkeypatch, _answer('"bitcoin:?lno=lno1abc"', ad=False))
    with pytest.raises(ResolutionError, match="not DNSSEC-validated"):
        _run(res)


def test_no_payment_record(monkeypatch):
    res, _ = _resolver_with(monkeypatch, _answer())
    with pytest.raises(ResolutionError, match="no bitcoin: record"):
        _run(res)


def test_several_payment_records(monkeypatch):
    res, _ = _resolver_with(monkeypatch, _answer('"bitcoin:?lno=a"', '"bitcoin:?lno=b"'))
    with pytest.raises(ResolutionError):
        _run(res)


def test_nxdomain(monkeypatch):
    res, _ = _resolver_with(monkeypatch, dns.resolver.NXDOMAIN())
    with pytest.raises(ResolutionError, match="does not exist"):
        _run(res)


def test_timeout(monkeypatch):
    res, _ = _resolver_with(monkeypatch, dns.exception.Timeout())
    with pytest.raises(ResolutionError, match="failed"):
        _run(res)
