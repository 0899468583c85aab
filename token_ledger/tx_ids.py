"""
tx_ids.py - Transaction-id replay protection

Tracks, per (account, tx_id), the logical time until which the id blocks reuse.
A second index from account to its tracked ids keeps eviction proportional to
one account's outstanding ids rather than the whole ledger.

Per (account, tx_id) the lifecycle is:

    Unseen -> Tracked(valid_until) -> Evicted (== Unseen)

Eviction is lazy: it only runs for the account about to perform a protected
operation, immediately before the duplicate check.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Set, Tuple

from .core import AccountId, TxId, ValidUntil, TxAlreadyExists, LedgerInvariantViolation


class TxIdIndex:
    """
    Replay-protection index.

    Not thread-safe; owned by a single TokenLedger.
    """

    def __init__(self):
        self._valid_until: Dict[Tuple[AccountId, TxId], ValidUntil] = {}
        self._by_account: Dict[AccountId, Set[TxId]] = {}

    def __len__(self) -> int:
        return len(self._valid_until)

    def __contains__(self, key: Tuple[AccountId, TxId]) -> bool:
        return key in self._valid_until

    def clear_outdated(self, account: AccountId, now: int) -> List[TxId]:
        """
        Evict every tx id of `account` whose validity ended before `now`.

        An id with valid_until == now is still tracked.

        Returns:
            The evicted ids, sorted
        """
        tracked = self._by_account.get(account)
        if tracked is None:
            return []

        evicted = []
        for tx_id in list(tracked):
            valid_until = self._valid_until.get((account, tx_id))
            if valid_until is None:
                raise LedgerInvariantViolation(
                    f"tx id {tx_id} indexed for {account} but has no validity entry"
                )
            if now > valid_until:
                del self._valid_until[(account, tx_id)]
                tracked.discard(tx_id)
                evicted.append(tx_id)

        if not tracked:
            del self._by_account[account]
        return sorted(evicted)

    def check(self, account: AccountId, tx_id: TxId) -> None:
        """Raise TxAlreadyExists if `tx_id` is tracked for `account`."""
        if (account, tx_id) in self._valid_until:
            raise TxAlreadyExists(
                f"tx id {tx_id} already used by {account} "
                f"(valid until {self._valid_until[(account, tx_id)]})"
            )

    def guard(self, account: AccountId, tx_id: Optional[TxId], now: int) -> None:
        """Evict expired ids for `account`, then reject `tx_id` if still tracked."""
        if tx_id is None:
            return
        self.clear_outdated(account, now)
        self.check(account, tx_id)

    def record(self, account: AccountId, tx_id: Optional[TxId], valid_until: ValidUntil) -> None:
        """Start tracking `tx_id` for `account`. No-op when tx_id is None."""
        if tx_id is None:
            return
        self._valid_until[(account, tx_id)] = valid_until
        self._by_account.setdefault(account, set()).add(tx_id)

    def validity_time(self, account: AccountId, tx_id: TxId) -> ValidUntil:
        return self._valid_until.get((account, tx_id), 0)

    def tx_ids_for_account(self, account: AccountId) -> List[TxId]:
        return sorted(self._by_account.get(account, ()))

    def accounts(self) -> List[AccountId]:
        return sorted(self._by_account)

    def copy(self) -> TxIdIndex:
        cloned = TxIdIndex()
        cloned._valid_until = dict(self._valid_until)
        cloned._by_account = {a: set(ids) for a, ids in self._by_account.items()}
        return cloned
