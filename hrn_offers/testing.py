# hrn_offers/testing.py
"""
Test support: a pre-programmed resolver and a process-wide override.

The override registry is opt-in. It only works when HRN_ENABLE_TEST_OVERRIDES
is set, and OfferResolutionHandler.default() only looks at it in that case,
so a production configuration never reaches it.

Typical use (tests/conftest.py):

    monkeypatch.setenv("HRN_ENABLE_TEST_OVERRIDES", "1")
    with override_resolver(StaticHrnResolver({"alice@example.com": SignedResult(uri)})):
        handler = OfferResolutionHandler.default()
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from hrn_offers.config import load_resolver_config
from hrn_offers.exceptions import ResolutionError
from hrn_offers.resolve.base import HrnResolver
from hrn_offers.resolve.name import HumanReadableName
from hrn_offers.resolve.outcome import ResolutionOutcome


class StaticHrnResolver:
    """
    Return pre-programmed outcomes keyed by canonical "user@domain".

    A value may also be an exception instance, which is raised instead.
    Unknown names raise ResolutionError. Every lookup is recorded in `calls`.
    """

    def __init__(self, outcomes: Mapping[str, ResolutionOutcome | Exception]) -> None:
        self._outcomes = dict(outcomes)
        self.calls: list[HumanReadableName] = []

    async def resolve_hrn(self, name: HumanReadableName) -> ResolutionOutcome:
        self.calls.append(name)
        try:
            outcome = self._outcomes[name.address]
        except KeyError:
            raise ResolutionError(f"no programmed outcome for {name}") from None
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


_lock = threading.Lock()
_installed: HrnResolver | None = None


def _require_enabled() -> None:
    if not load_resolver_config().test_overrides_enabled:
        raise RuntimeError(
            "resolver overrides are disabled; set HRN_ENABLE_TEST_OVERRIDES=1 in test runs"
        )


def install_resolver(resolver: HrnResolver) -> None:
    global _installed
    _require_enabled()
    with _lock:
        _installed = resolver


def uninstall_resolver() -> None:
    global _installed
    with _lock:
        _installed = None


def installed_resolver() -> HrnResolver | None:
    with _lock:
        return _installed


@contextmanager
def override_resolver(resolver: HrnResolver) -> Iterator[HrnResolver]:
    """Install `resolver` for the duration of the block, restoring the previous one."""
    global _installed
    _require_enabled()
    with _lock:
        previous, _installed = _installed, resolver
    try:
        yield resolver
    finally:
        with _lock:
            _installed = previous


__all__ = [
    "StaticHrnResolver",
    "install_resolver",
    "uninstall_resolver",
    "installed_resolver",
    "override_resolver",
]
