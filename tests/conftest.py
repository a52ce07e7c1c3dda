# ruff: noqa: E402
# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hrn_offers import testing

_HRN_ENV = (
    "HRN_RESOLVER_TIMEOUT_S",
    "HRN_DOH_URL",
    "HRN_USER_AGENT",
    "HRN_DNS_NAMESERVERS",
    "HRN_ENABLE_TEST_OVERRIDES",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch):
    """
    Autouse: every test starts from default resolver settings and an empty
    override registry, whatever the developer's shell or .env says.
    """
    for name in _HRN_ENV:
        monkeypatch.delenv(name, raising=False)
    testing.uninstall_resolver()
    yield
    testing.uninstall_resolver()


@pytest.fixture
def overrides_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HRN_ENABLE_TEST_OVERRIDES", "1")
