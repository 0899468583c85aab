"""
Functional tests: concurrent senders through one LedgerProgram.

Messages from many threads must behave as if delivered one at a time:
no lost updates, no double-applied tx ids.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from token_ledger import (
    LedgerProgram, InitConfig, Config, StaticClock,
    Mint, Transfer, TransferToUsers, BalanceOf, CurrentSupply, Rejected, Balance,
)


USERS = [f"user_{i}" for i in range(8)]


def _program():
    return LedgerProgram.init(InitConfig(
        name="Concurrent", symbol="CCR", decimals=0, description="",
        admin="admin", initial_supply=8_000, total_supply=100_000,
        config=Config(tx_storage_period=10),
    ), StaticClock(0), verbose=False)


class TestConcurrentSenders:

    def test_no_lost_updates(self):
        program = _program()
        program.send("admin", TransferToUsers(1_000, USERS))

        def ring(i):
            me, nxt = USERS[i], USERS[(i + 1) % len(USERS)]
            for _ in range(200):
                program.send(me, Transfer(me, nxt, 1))

        threads = [threading.Thread(target=ring, args=(i,)) for i in range(len(USERS))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(program.send(u, BalanceOf(u)) == Balance(1_000) for u in USERS)
        assert program.ledger.verify_conservation()['valid']
        assert len(program.ledger.event_log) == 1 + 200 * len(USERS)

    def test_racing_replays_apply_once(self):
        program = _program()
        msg = Transfer("admin", "bob", 5, tx_id=42)
        with ThreadPoolExecutor(max_workers=8) as pool:
            replies = list(pool.map(lambda _: program.send("admin", msg), range(32)))

        applied = [r for r in replies if not isinstance(r, Rejected)]
        assert len(applied) == 1
        assert program.send("bob", BalanceOf("bob")) == Balance(5)

    def test_concurrent_mints_respect_cap(self):
        program = _program()
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: program.send("admin", Mint(1_000, "minter")), range(200)))

        assert program.read_state(CurrentSupply()).value == 100_000
        assert program.send("minter", BalanceOf("minter")) == Balance(92_000)


class TestSendMany:

    def test_replies_in_order(self):
        program = _program()
        replies = program.send_many([
            ("admin", Transfer("admin", "a", 10, tx_id=1)),
            ("admin", Transfer("admin", "a", 10, tx_id=1)),
            ("a", BalanceOf("a")),
        ])
        assert not isinstance(replies[0], Rejected)
        assert isinstance(replies[1], Rejected)
        assert replies[2] == Balance(10)

    def test_each_message_independent(self):
        program = _program()
        replies = program.send_many([
            ("a", Transfer("a", "b", 1)),
            ("admin", Transfer("admin", "b", 1)),
        ])
        assert isinstance(replies[0], Rejected)
        assert program.send("b", BalanceOf("b")) == Balance(1)
