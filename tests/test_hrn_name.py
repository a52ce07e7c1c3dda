# tests/test_hrn_name.py
from __future__ import annotations

import pytest

from hrn_offers.exceptions import HrnParseError
from hrn_offers.resolve.name import MAX_COMBINED_LEN, HumanReadableName, parse


@pytest.mark.parametrize(
    "encoded, user, domain",
    [
        ("alice@example.com", "alice", "example.com"),
        ("₿alice@example.com", "alice", "example.com"),
        ("Alice@Example.COM", "alice", "example.com"),
        ("alice@example.com.", "alice", "example.com"),
        ("first.last@pay.example.org", "first.last", "pay.example.org"),
        ("tips_2-x@sub-domain.example", "tips_2-x", "sub-domain.example"),
    ],
)
def test_parse_valid_names(encoded, user, domain):
    hrn = parse(encoded)
    assert hrn.user == user
    assert hrn.domain == domain


def test_parse_idn_domain_to_punycode():
    hrn = parse("bob@bücher.de")
    assert hrn.domain == "xn--bcher-kva.de"


def test_dns_name_and_display_forms():
    hrn = parse("₿matt@mattcorallo.com")
    assert hrn.dns_name == "matt.user._bitcoin-payment.mattcorallo.com."
    assert hrn.address == "matt@mattcorallo.com"
    assert str(hrn) == "₿matt@mattcorallo.com"


@pytest.mark.parametrize(
    "encoded",
    ["alice@example.com", "₿Alice@EXAMPLE.com", "a.b_c-d@x.y.z."],
)
def test_round_trip_keeps_identity(encoded):
    hrn = parse(encoded)
    assert parse(str(hrn)) == hrn
    assert parse(hrn.address) == hrn


@pytest.mark.parametrize(
    "encoded",
    [
        "",
        "₿",
        "alice",
        "alice@",
        "@example.com",
        "alice@bob@example.com",
        "al ice@example.com",
        "alice@exa mple.com",
        "alice+tag@example.com",
        "alice@example..com",
        "alice@.example.com",
        ".alice@example.com",
        "alice@" + "a" * 64 + ".com",
        "₿₿alice@example.com",
    ],
)
def test_parse_rejects_malformed(encoded):
    with pytest.raises(HrnParseError) as excinfo:
        parse(encoded)
    assert excinfo.value.encoded == encoded


def test_parse_rejects_overlong_name():
    user = "u" * 60
    labels = ".".join(["d" * 60] * 3)  # 182 chars
    assert len(user) + len(labels) > MAX_COMBINED_LEN
    with pytest.raises(HrnParseError):
        parse(f"{user}@{labels}")


def test_parse_accepts_name_at_length_limit():
    user = "u" * 47
    labels = ".".join(["d" * 60] * 3)
    assert len(user) + len(labels) == MAX_COMBINED_LEN - 2
    assert parse(f"{user}@{labels}").user == user


def test_names_are_immutable_and_validated():
    hrn = parse("alice@example.com")
    with pytest.raises(AttributeError):
        hrn.user = "mallory"  # type: ignore[misc]
    with pytest.raises(HrnParseError):
        HumanReadableName(user="Not Valid", domain="example.com")
