#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the Token Ledger Step by Step

Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Foundation  - Initialization, balances, transfers
  4-5:  Delegation  - Approvals and spending on someone's behalf
  6-7:  Supply      - Minting under the cap, burning
  8:    Replay      - Tx ids and the retention window
  9:    Governance  - Admins and the self-removal guard

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
import sys

from token_ledger import (
    # Program and time
    LedgerProgram, ManualClock,
    # Configuration
    InitConfig, Config, ExternalLinks, SupplyError,
    # Actions
    Mint, Burn, Transfer, Approve, TransferToUsers, AddAdmin, DeleteAdmin, BalanceOf,
    # Queries
    CurrentSupply, TotalSupply, Admins, AllowanceOfAccount, GetTxIdsForAccount,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    initial_supply: int = 1_000
    total_supply: int = 10_000
    tx_storage_period: int = 60_000   # one minute of logical time


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    print(f"\n--- {text} ---\n")


# ============================================================================
# STEPS
# ============================================================================

def step_01_initialize():
    step_header(1, "Initializing the Token",
        "A token starts with one admin holding the whole initial supply.")

    print(">>> InitConfig(initial_supply=20_000, total_supply=10_000)")
    try:
        InitConfig(name="Broken", symbol="BRK", decimals=0, description="",
                   admin="alice", initial_supply=20_000, total_supply=10_000)
    except SupplyError as e:
        print(f"Refused: {e}")

    clock = ManualClock(0)
    program = LedgerProgram.init(InitConfig(
        name="Demo Token", symbol="DMO", decimals=12,
        description="Token used by the interactive tutorial",
        admin="alice",
        initial_supply=CONFIG.initial_supply,
        total_supply=CONFIG.total_supply,
        external_links=ExternalLinks(website="https://demo.example"),
        config=Config(tx_storage_period=CONFIG.tx_storage_period),
    ), clock)

    section_header("Initial State")
    print(f"Current supply: {program.read_state(CurrentSupply()).value}")
    print(f"Total supply:   {program.read_state(TotalSupply()).value}")
    print(f"Admins:         {program.read_state(Admins()).value}")
    return program, clock


def step_02_balances(program):
    step_header(2, "Balances", "Unknown accounts simply hold zero.")
    print(program.send("anyone", BalanceOf("alice")))
    print(program.send("anyone", BalanceOf("bob")))


def step_03_transfer(program):
    step_header(3, "Transfers", "Tokens move only when the sender can cover them.")
    program.send("alice", Transfer("alice", "bob", 250))
    program.send("bob", Transfer("bob", "carol", 1_000))


def step_04_approve(program):
    step_header(4, "Approvals", "An allowance is set, never added to.")
    program.send("bob", Approve("carol", 100))
    program.send("bob", Approve("carol", 40))
    print(f"Allowance bob->carol: {program.read_state(AllowanceOfAccount('bob', 'carol')).value}")


def step_05_delegated_transfer(program):
    step_header(5, "Spending an Allowance", "Each delegated transfer consumes the allowance.")
    program.send("carol", Transfer("bob", "dave", 40))
    program.send("carol", Transfer("bob", "dave", 40))


def step_06_mint(program):
    step_header(6, "Minting", "Admins mint, but never past the cap.")
    program.send("alice", Mint(5_000, "erin"))
    program.send("alice", Mint(5_000, "erin"))
    program.send("erin", Mint(1, "erin"))


def step_07_burn(program):
    step_header(7, "Burning", "Burning lowers the current supply and the cap alike.")
    program.send("erin", Burn(1_000))
    print(f"Current supply: {program.read_state(CurrentSupply()).value}")
    print(f"Total supply:   {program.read_state(TotalSupply()).value}")


def step_08_replay(program, clock):
    step_header(8, "Replay Protection",
        "A tx id blocks resubmission until its retention window has passed.")
    retry = Transfer("alice", "frank", 10, tx_id=1)
    program.send("alice", retry)
    program.send("alice", retry)
    print(f"Tracked ids for alice: {program.read_state(GetTxIdsForAccount('alice')).value}")

    section_header("Advance past the window")
    clock.advance(CONFIG.tx_storage_period + 1)
    program.send("alice", retry)


def step_09_governance(program):
    step_header(9, "Governance", "Admins manage admins; nobody can remove themselves.")
    program.send("alice", AddAdmin("bob"))
    program.send("alice", DeleteAdmin("alice"))
    program.send("bob", TransferToUsers(5, ["x", "y", "z"]))
    print(f"Admins: {program.read_state(Admins()).value}")


# ============================================================================
# MAIN
# ============================================================================

def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       TOKEN LEDGER - INTERACTIVE TUTORIAL")
    print("=" * 70)
    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    wait_for_enter()

    program, clock = step_01_initialize()
    wait_for_enter()
    step_02_balances(program)
    wait_for_enter()
    step_03_transfer(program)
    wait_for_enter()
    step_04_approve(program)
    wait_for_enter()
    step_05_delegated_transfer(program)
    wait_for_enter()
    step_06_mint(program)
    wait_for_enter()
    step_07_burn(program)
    wait_for_enter()
    step_08_replay(program, clock)
    wait_for_enter()
    step_09_governance(program)

    result = program.ledger.verify_conservation()
    print("\n" + "=" * 70)
    print(f"       TUTORIAL COMPLETE - conservation holds: {result['valid']}")
    print("=" * 70)


if __name__ == "__main__":
    main()
