"""
conftest.py - Shared pytest fixtures for token ledger tests

Provides common fixtures used across unit, conformance and functional tests:
- Init configurations (default and with replay retention)
- Ledgers (fresh, funded with several holders)
- Programs driven by a ManualClock
"""

import pytest

from token_ledger import (
    Config, ExternalLinks, InitConfig, Invocation,
    TokenLedger, LedgerProgram, ManualClock,
)


ADMIN = "admin"
TX_STORAGE_PERIOD = 1_000


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture
def init_config():
    """total_supply=1000, initial_supply=100 held by admin, 1s tx retention."""
    return InitConfig(
        name="Test Token",
        symbol="TT",
        decimals=12,
        description="Token used by the test-suite",
        admin=ADMIN,
        initial_supply=100,
        total_supply=1_000,
        external_links=ExternalLinks(website="https://example.org"),
        config=Config(tx_storage_period=TX_STORAGE_PERIOD),
    )


# =============================================================================
# LEDGER FIXTURES
# =============================================================================

@pytest.fixture
def ledger(init_config):
    """Fresh ledger, quiet."""
    return TokenLedger.init(init_config, verbose=False)


@pytest.fixture
def funded_ledger(ledger):
    """Ledger where admin has 40 and alice/bob hold 30 each."""
    t0 = Invocation(ADMIN, 0)
    ledger.transfer(t0, ADMIN, "alice", 30)
    ledger.transfer(t0, ADMIN, "bob", 30)
    return ledger


# =============================================================================
# PROGRAM FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    return ManualClock(0)


@pytest.fixture
def program(init_config, clock):
    """Program over a fresh ledger, driven by a ManualClock at t=0."""
    return LedgerProgram.init(init_config, clock, verbose=False)
