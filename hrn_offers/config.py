from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


def _getenv_float(name: str, default: float) -> float:
    v = os.getenv(name, str(default)).strip()
    try:
        return float(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be a number; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def _getenv_list_str(name: str, default_csv: str) -> list[str]:
    """Comma-separated values, blanks dropped."""
    return [tok for tok in (t.strip() for t in os.getenv(name, default_csv).split(",")) if tok]


_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


def _getenv_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    raise ValueError(f"Environment variable {name} must be a boolean flag; got {raw!r}")


# A .env next to the package never overrides the real environment
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env", override=False)

# Outbound request timeout for production resolvers (seconds)
DEFAULT_TIMEOUT_S = 20.0
DEFAULT_DOH_URL = "https://dns.google/resolve"
DEFAULT_USER_AGENT = "hrn-offers/0.1"


@dataclass(frozen=True)
class ResolverConfig:
    """
    Settings for the production resolvers.

    Read fresh from the environment by load_resolver_config() so that tests
    (and long-running hosts) can change them without re-importing the module.
    """

    timeout_s: float = DEFAULT_TIMEOUT_S
    doh_url: str = DEFAULT_DOH_URL
    user_agent: str = DEFAULT_USER_AGENT
    nameservers: list[str] = field(default_factory=list)
    # Process-wide test override registry (hrn_offers.testing); off in production
    test_overrides_enabled: bool = False


def load_resolver_config() -> ResolverConfig:
    timeout_s = _getenv_float("HRN_RESOLVER_TIMEOUT_S", DEFAULT_TIMEOUT_S)
    if timeout_s <= 0:
        raise ValueError(f"HRN_RESOLVER_TIMEOUT_S must be positive; got {timeout_s!r}")
    return ResolverConfig(
        timeout_s=timeout_s,
        doh_url=_getenv_str("HRN_DOH_URL", DEFAULT_DOH_URL),
        user_agent=_getenv_str("HRN_USER_AGENT", DEFAULT_USER_AGENT),
        nameservers=_getenv_list_str("HRN_DNS_NAMESERVERS", ""),
        test_overrides_enabled=_getenv_bool("HRN_ENABLE_TEST_OVERRIDES", False),
    )


__all__ = [
    "ROOT",
    "DEFAULT_TIMEOUT_S",
    "DEFAULT_DOH_URL",
    "DEFAULT_USER_AGENT",
    "ResolverConfig",
    "load_resolver_config",
]
