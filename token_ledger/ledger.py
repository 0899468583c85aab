"""
ledger.py - Stateful Single-Asset Token Ledger

The TokenLedger class is the central state manager of the token.
It is the only module that mutates state, ensuring controlled and auditable changes.

Key responsibilities:
    - Implements LedgerView protocol for safe read-only access
    - Applies each operation atomically (validate everything, then mutate)
    - Maintains balances, allowances, supplies and the admin set
    - Guards protected operations with the tx-id replay index
    - Always validates and always logs - no exceptions
"""

from __future__ import annotations
import copy
from typing import Dict, List, Optional, Any, Sequence

from .core import (
    # Types
    AccountId, TxId, ValidUntil,
    Config, InitConfig, Invocation, TokenMetadata, LedgerEvent,
    # Replies
    Reply, Transferred, Approved, TransferredToUsers, AdminAdded, AdminRemoved,
    # Constants
    ZERO_ADDRESS,
    # Exceptions
    NotAdmin, InsufficientBalance, AllowanceExceeded, ZeroAddressTarget,
    MaxSupplyReached, AdminAlreadyExists, SelfRemovalForbidden,
    LedgerInvariantViolation,
)
from .tx_ids import TxIdIndex


class TokenLedger:
    """
    Single-asset token ledger with admin-gated supply management and replay protection.

    Implements the LedgerView protocol, allowing the ledger to be passed to code
    that only reads state.

    Design Principles:
        - Always validates: every precondition is checked before the first mutation,
          so a rejected operation leaves balances, allowances and supplies untouched.
          The only state a rejected protected operation may change is the eviction
          of the sender's expired tx ids.
        - Always logs: every applied operation is recorded in event_log.

    Thread Safety:
        Not thread-safe. Wrap in a LedgerProgram to serialize concurrent senders.

    Example:
        ledger = TokenLedger.init(InitConfig(
            name="Gear Token", symbol="GT", decimals=12, description="",
            admin="alice", initial_supply=1_000, total_supply=10_000,
        ))
        ledger.transfer(Invocation("alice", 0), "alice", "bob", 100)
    """

    def __init__(
        self,
        metadata: TokenMetadata,
        admin: AccountId,
        initial_supply: int,
        total_supply: int,
        config: Optional[Config] = None,
        verbose: bool = True,
    ):
        """
        Create a ledger.

        Prefer TokenLedger.init(), which validates an InitConfig first.

        Args:
            metadata: Descriptive token metadata
            admin: Initial (and only) admin; receives the initial supply
            initial_supply: Tokens in circulation at creation
            total_supply: Supply cap
            config: Runtime parameters (default: Config())
            verbose: Print one line per applied or rejected message (default: True)
        """
        if initial_supply > total_supply:
            raise LedgerInvariantViolation(
                f"initial supply {initial_supply} exceeds total supply {total_supply}"
            )
        self._metadata = metadata
        self.config = config or Config()
        self.verbose = verbose
        self._current_supply: int = initial_supply
        self._total_supply: int = total_supply
        self._balances: Dict[AccountId, int] = {admin: initial_supply}
        self._allowances: Dict[AccountId, Dict[AccountId, int]] = {}
        self._admins: List[AccountId] = [admin]
        self.tx_ids = TxIdIndex()
        self.event_log: List[LedgerEvent] = []

    @classmethod
    def init(cls, init_config: InitConfig, verbose: bool = True) -> TokenLedger:
        """
        Create a ledger from a validated InitConfig.

        InitConfig validates on construction, so an invalid configuration never
        reaches this point: SupplyError, DescriptionError or DecimalsError is
        raised when the InitConfig is built and no ledger exists.
        """
        metadata = TokenMetadata(
            name=init_config.name,
            symbol=init_config.symbol,
            decimals=init_config.decimals,
            description=init_config.description,
            external_links=init_config.external_links,
        )
        ledger = cls(
            metadata=metadata,
            admin=init_config.admin,
            initial_supply=init_config.initial_supply,
            total_supply=init_config.total_supply,
            config=init_config.config,
            verbose=verbose,
        )
        if verbose:
            print(f"📝 Initialized: {metadata.symbol} ({metadata.name}) "
                  f"supply={init_config.initial_supply}/{init_config.total_supply} "
                  f"admin={init_config.admin}")
        return ledger

    # ========================================================================
    # LedgerView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    @property
    def metadata(self) -> TokenMetadata:
        return self._metadata

    @property
    def current_supply(self) -> int:
        return self._current_supply

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: AccountId) -> int:
        """
        Get the balance of an account.

        Returns 0 for an account that never held tokens.
        """
        return self._balances.get(account, 0)

    def allowance_of(self, owner: AccountId, spender: AccountId) -> int:
        """Get the amount `spender` may still transfer out of `owner` (0 if none)."""
        return self._allowances.get(owner, {}).get(spender, 0)

    def admins(self) -> List[AccountId]:
        """List admins in the order they were added."""
        return list(self._admins)

    def is_admin(self, account: AccountId) -> bool:
        return account in self._admins

    def tx_validity_time(self, account: AccountId, tx_id: TxId) -> ValidUntil:
        return self.tx_ids.validity_time(account, tx_id)

    def tx_ids_for_account(self, account: AccountId) -> List[TxId]:
        return self.tx_ids.tx_ids_for_account(account)

    def balances(self) -> Dict[AccountId, int]:
        """Get a copy of every balance entry (zero entries included)."""
        return dict(self._balances)

    def allowances(self) -> Dict[AccountId, Dict[AccountId, int]]:
        """Get a copy of the full allowance table."""
        return {owner: dict(spenders) for owner, spenders in self._allowances.items()}

    def verify_conservation(self) -> Dict[str, Any]:
        """
        Verify the supply invariants.

        Checks:
        1. current_supply == sum of all balances
        2. current_supply <= total_supply
        3. no balance or allowance is negative

        Returns:
            Dict with keys:
            - 'valid': bool - True if all invariants hold
            - 'current_supply': int
            - 'sum_of_balances': int
            - 'total_supply': int
            - 'discrepancies': List[str] - One entry per violated invariant

        Example:
            result = ledger.verify_conservation()
            assert result['valid'], result['discrepancies']
        """
        discrepancies = []
        # Sorted for deterministic accumulation and reporting order
        total = sum(self._balances[a] for a in sorted(self._balances))

        if total != self._current_supply:
            discrepancies.append(
                f"sum of balances {total} != current supply {self._current_supply}"
            )
        if self._current_supply > self._total_supply:
            discrepancies.append(
                f"current supply {self._current_supply} > total supply {self._total_supply}"
            )
        for account in sorted(self._balances):
            if self._balances[account] < 0:
                discrepancies.append(f"negative balance for {account}: {self._balances[account]}")
        for owner in sorted(self._allowances):
            for spender, amount in sorted(self._allowances[owner].items()):
                if amount < 0:
                    discrepancies.append(f"negative allowance {owner}->{spender}: {amount}")

        return {
            'valid': len(discrepancies) == 0,
            'current_supply': self._current_supply,
            'sum_of_balances': total,
            'total_supply': self._total_supply,
            'discrepancies': discrepancies,
        }

    # ========================================================================
    # ACCOUNTING OPERATIONS (Mutating)
    # ========================================================================

    def transfer(
        self,
        inv: Invocation,
        from_: AccountId,
        to: AccountId,
        amount: int,
        tx_id: Optional[TxId] = None,
    ) -> Transferred:
        """
        Transfer tokens from `from_` to `to`.

        If the sender is not `from_`, the sender must hold an allowance from
        `from_` covering `amount`; it is consumed on success. A sender that
        `from_` never approved is refused even for a zero amount.

        Order of checks: replay guard (keyed on the sender), zero address,
        balance, allowance.

        Raises:
            TxAlreadyExists: tx_id is still tracked for the sender
            ZeroAddressTarget: from_ or to is the zero address
            InsufficientBalance: from_ cannot cover amount
            AllowanceExceeded: delegated transfer without enough allowance
        """
        self.tx_ids.guard(inv.caller, tx_id, inv.timestamp)

        if from_ == ZERO_ADDRESS or to == ZERO_ADDRESS:
            raise ZeroAddressTarget(f"transfer {from_} -> {to} touches the zero address")

        self._check_balance(from_, amount)

        delegated = inv.caller != from_
        if delegated:
            allowed = self._allowances.get(from_, {}).get(inv.caller)
            if allowed is None:
                raise AllowanceExceeded(f"{from_} has not approved {inv.caller}")
            if allowed < amount:
                raise AllowanceExceeded(
                    f"{inv.caller} may transfer {allowed} from {from_}, requested {amount}"
                )

        # Validation passed - apply
        if delegated:
            self._allowances[from_][inv.caller] -= amount
        self._debit(from_, amount)
        self._credit(to, amount)
        self.tx_ids.record(inv.caller, tx_id, inv.timestamp + self.config.tx_storage_period)

        return self._applied(inv, Transferred(from_=from_, to=to, amount=amount))

    def approve(
        self,
        inv: Invocation,
        to: AccountId,
        amount: int,
        tx_id: Optional[TxId] = None,
    ) -> Approved:
        """
        Set the sender's allowance for spender `to` to exactly `amount`.

        Overwrites any previous allowance; it does not add to it.

        Raises:
            ZeroAddressTarget: spender is the zero address
            TxAlreadyExists: tx_id is still tracked for the sender
        """
        if to == ZERO_ADDRESS:
            raise ZeroAddressTarget("cannot approve the zero address")
        self.tx_ids.guard(inv.caller, tx_id, inv.timestamp)

        self._allowances.setdefault(inv.caller, {})[to] = amount
        self.tx_ids.record(inv.caller, tx_id, inv.timestamp + self.config.tx_storage_period)

        return self._applied(inv, Approved(from_=inv.caller, to=to, amount=amount))

    def mint(self, inv: Invocation, to: AccountId, amount: int) -> Transferred:
        """
        Create `amount` new tokens for `to`.

        No partial mint: either the whole amount fits under the cap or nothing happens.

        Raises:
            NotAdmin: sender is not an admin
            MaxSupplyReached: current_supply + amount > total_supply
        """
        self._require_admin(inv.caller)
        if self._current_supply + amount > self._total_supply:
            raise MaxSupplyReached(
                f"mint {amount}: {self._current_supply} + {amount} > cap {self._total_supply}"
            )

        self._credit(to, amount)
        self._current_supply += amount

        return self._applied(inv, Transferred(from_=ZERO_ADDRESS, to=to, amount=amount))

    def burn(self, inv: Invocation, amount: int) -> Transferred:
        """
        Destroy `amount` of the sender's tokens.

        Burning lowers the total supply cap by the same amount as the current
        supply: burned headroom can never be minted again.

        Raises:
            InsufficientBalance: sender cannot cover amount
        """
        self._check_balance(inv.caller, amount)

        self._debit(inv.caller, amount)
        self._current_supply -= amount
        self._total_supply -= amount

        return self._applied(inv, Transferred(from_=inv.caller, to=ZERO_ADDRESS, amount=amount))

    def transfer_to_users(
        self,
        inv: Invocation,
        amount: int,
        to_users: Sequence[AccountId],
    ) -> TransferredToUsers:
        """
        Send `amount` from the sender to every entry of `to_users`.

        The aggregate (amount * len(to_users)) is validated up front; a recipient
        listed twice is credited twice.

        Raises:
            NotAdmin: sender is not an admin
            InsufficientBalance: sender cannot cover the aggregate
            LedgerInvariantViolation: a step failed after validation (defect)
        """
        self._require_admin(inv.caller)
        recipients = tuple(to_users)
        self._check_balance(inv.caller, amount * len(recipients))

        for to in recipients:
            self._debit(inv.caller, amount)
            self._credit(to, amount)

        return self._applied(
            inv, TransferredToUsers(from_=inv.caller, to_users=recipients, amount=amount)
        )

    # ========================================================================
    # ADMIN GOVERNANCE (Mutating)
    # ========================================================================

    def add_admin(self, inv: Invocation, admin_id: AccountId) -> AdminAdded:
        """
        Raises:
            NotAdmin: sender is not an admin
            AdminAlreadyExists: admin_id is already an admin
        """
        self._require_admin(inv.caller)
        if admin_id in self._admins:
            raise AdminAlreadyExists(f"{admin_id} is already an admin")
        self._admins.append(admin_id)
        return self._applied(inv, AdminAdded(admin_id=admin_id))

    def delete_admin(self, inv: Invocation, admin_id: AccountId) -> AdminRemoved:
        """
        Remove `admin_id` from the admin set.

        Self-removal is always refused, whatever the size of the admin set;
        this is what keeps the set non-empty. Removing an id that is not an
        admin succeeds without changing the set.

        Raises:
            NotAdmin: sender is not an admin
            SelfRemovalForbidden: admin_id is the sender
        """
        self._require_admin(inv.caller)
        if admin_id == inv.caller:
            raise SelfRemovalForbidden(f"{inv.caller} cannot remove themselves")
        self._admins = [a for a in self._admins if a != admin_id]
        return self._applied(inv, AdminRemoved(admin_id=admin_id))

    # ========================================================================
    # INTERNAL HELPERS
    # ========================================================================

    def _require_admin(self, account: AccountId) -> None:
        if account not in self._admins:
            raise NotAdmin(f"{account} is not an admin")

    def _check_balance(self, account: AccountId, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalance(f"{account} has {balance}, needs {amount}")

    def _debit(self, account: AccountId, amount: int) -> None:
        """Subtract from a balance that has already been validated."""
        balance = self.balance_of(account)
        if balance < amount:
            raise LedgerInvariantViolation(
                f"debit of {amount} from {account} (balance {balance}) after validation"
            )
        self._balances[account] = balance - amount

    def _credit(self, account: AccountId, amount: int) -> None:
        self._balances[account] = self._balances.get(account, 0) + amount

    def _applied(self, inv: Invocation, reply: Reply) -> Reply:
        """Log an applied operation and return its reply."""
        event = LedgerEvent(
            sequence=len(self.event_log),
            timestamp=inv.timestamp,
            caller=inv.caller,
            reply=reply,
        )
        self.event_log.append(event)
        if self.verbose:
            print(f"✓ APPLIED #{event.sequence} t={inv.timestamp} {inv.caller}: {reply}")
        return reply

    def report_rejected(self, inv: Invocation, action: Any, reason: str) -> None:
        """Print a rejected message when verbose."""
        if self.verbose:
            print(f"✗ REJECTED t={inv.timestamp} {inv.caller}: {action} ({reason})")

    # ========================================================================
    # LEDGER OPERATIONS
    # ========================================================================

    def clone(self) -> TokenLedger:
        """
        Create a deep copy of this ledger.

        All state is fully independent: modifications to the clone will not
        affect the original ledger, and vice versa.

        Returns:
            A new TokenLedger instance with identical state
        """
        cloned = TokenLedger.__new__(TokenLedger)
        cloned._metadata = self._metadata
        cloned.config = self.config
        cloned.verbose = self.verbose
        cloned._current_supply = self._current_supply
        cloned._total_supply = self._total_supply
        cloned._balances = dict(self._balances)
        cloned._allowances = copy.deepcopy(self._allowances)
        cloned._admins = list(self._admins)
        cloned.tx_ids = self.tx_ids.copy()
        cloned.event_log = list(self.event_log)
        return cloned

    def state_snapshot(self) -> Dict[str, Any]:
        """
        Capture every piece of mutable state as plain data.

        Two ledgers with equal snapshots are observably identical.
        """
        return {
            'current_supply': self._current_supply,
            'total_supply': self._total_supply,
            'balances': self.balances(),
            'allowances': self.allowances(),
            'admins': self.admins(),
            'tx_ids': {
                account: {
                    tx_id: self.tx_ids.validity_time(account, tx_id)
                    for tx_id in self.tx_ids.tx_ids_for_account(account)
                }
                for account in self.tx_ids.accounts()
            },
        }
