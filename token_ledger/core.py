"""
Core types for the token ledger.

This module provides the foundational data structures and protocols:
1. Protocols: LedgerView for read-only ledger access
2. Immutable value objects: Config, ExternalLinks, InitConfig, TokenMetadata, Invocation
3. Messages: actions (state-changing requests), queries and replies
4. Exceptions: LedgerError and the typed failures every caller can receive

Value objects validate themselves in __post_init__. Nothing in this module
mutates ledger state.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any, Dict, List, Optional, Protocol, Tuple, Union, runtime_checkable
)


# ============================================================================
# CONSTANTS
# ============================================================================

# Reserved account representing "no real account".
# Implicit source of every mint and destination of every burn.
ZERO_ADDRESS = "0x" + "00" * 32

MAX_DECIMALS = 100
MAX_DESCRIPTION_LENGTH = 500


# ============================================================================
# TYPE ALIASES
# ============================================================================

AccountId = str
TxId = int
# Logical timestamp (milliseconds) after which a tracked tx id may be evicted.
ValidUntil = int


def _require_amount(value: Any, name: str = "amount") -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def _require_account(value: Any, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} cannot be empty")


def _require_tx_id(value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"tx_id must be a non-negative int, got {value!r}")


# ============================================================================
# ENUMS
# ============================================================================

class ErrorCode(Enum):
    """
    Enumerated failure outcomes returned to callers.

    Values match the reply names of the message contract.
    """
    NOT_ADMIN = "NotAdmin"
    NOT_ENOUGH_BALANCE = "NotEnoughBalance"
    NOT_ALLOWED_TO_TRANSFER = "NotAllowedToTransfer"
    ZERO_ADDRESS = "ZeroAddress"
    TX_ALREADY_EXISTS = "TxAlreadyExists"
    MAX_SUPPLY_REACHED = "MaxSupplyReached"
    ADMIN_ALREADY_EXISTS = "AdminAlreadyExists"
    CANT_DELETE_YOURSELF = "CantDeleteYourself"
    SUPPLY_ERROR = "SupplyError"
    DESCRIPTION_ERROR = "DescriptionError"
    DECIMALS_ERROR = "DecimalsError"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all caller-induced ledger failures."""
    code: ErrorCode


class NotAdmin(LedgerError):
    """Raised when a privileged operation is invoked by an account outside the admin set."""
    code = ErrorCode.NOT_ADMIN


class InsufficientBalance(LedgerError):
    """Raised when an account's balance does not cover the requested debit."""
    code = ErrorCode.NOT_ENOUGH_BALANCE


class AllowanceExceeded(LedgerError):
    """Raised when a delegated transfer exceeds (or has no) approved allowance."""
    code = ErrorCode.NOT_ALLOWED_TO_TRANSFER


class ZeroAddressTarget(LedgerError):
    """Raised when the zero address is used as a transfer endpoint or spender."""
    code = ErrorCode.ZERO_ADDRESS


class TxAlreadyExists(LedgerError):
    """Raised when a transaction id is still tracked for the sending account."""
    code = ErrorCode.TX_ALREADY_EXISTS


class MaxSupplyReached(LedgerError):
    """Raised when a mint would push current supply above total supply."""
    code = ErrorCode.MAX_SUPPLY_REACHED


class AdminAlreadyExists(LedgerError):
    """Raised when adding an account that is already an admin."""
    code = ErrorCode.ADMIN_ALREADY_EXISTS


class SelfRemovalForbidden(LedgerError):
    """Raised when an admin tries to remove themselves from the admin set."""
    code = ErrorCode.CANT_DELETE_YOURSELF


class InitConfigError(LedgerError, ValueError):
    """Base exception for rejected initialization parameters."""
    pass


class SupplyError(InitConfigError):
    """Raised when the initial supply exceeds the total supply cap."""
    code = ErrorCode.SUPPLY_ERROR


class DescriptionError(InitConfigError):
    """Raised when the description is longer than MAX_DESCRIPTION_LENGTH characters."""
    code = ErrorCode.DESCRIPTION_ERROR


class DecimalsError(InitConfigError):
    """Raised when decimals exceeds MAX_DECIMALS."""
    code = ErrorCode.DECIMALS_ERROR


class LedgerInvariantViolation(Exception):
    """
    Raised when the ledger's own bookkeeping is inconsistent.

    Not a LedgerError: this signals a programming defect and is never
    turned into a reply.
    """
    pass


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass(frozen=True, slots=True)
class Config:
    """
    Runtime parameters of the ledger.

    Attributes:
        tx_storage_period: How long (logical ms) a tracked tx id blocks reuse.
    """
    tx_storage_period: int = 0

    def __post_init__(self):
        _require_amount(self.tx_storage_period, "tx_storage_period")


@dataclass(frozen=True, slots=True)
class ExternalLinks:
    """Optional links published alongside the token metadata."""
    image: Optional[str] = None
    website: Optional[str] = None
    telegram: Optional[str] = None
    twitter: Optional[str] = None
    discord: Optional[str] = None
    tokenomics: Optional[str] = None


@dataclass(frozen=True, slots=True)
class InitConfig:
    """
    Parameters for creating a TokenLedger.

    Validated on construction. Any violation raises an InitConfigError
    subclass and no ledger is created.
    """
    name: str
    symbol: str
    decimals: int
    description: str
    admin: AccountId
    initial_supply: int
    total_supply: int
    external_links: ExternalLinks = ExternalLinks()
    config: Config = Config()

    def __post_init__(self):
        _require_account(self.admin, "admin")
        _require_amount(self.initial_supply, "initial_supply")
        _require_amount(self.total_supply, "total_supply")
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int):
            raise ValueError(f"decimals must be int, got {type(self.decimals).__name__}")
        if self.initial_supply > self.total_supply:
            raise SupplyError(
                f"initial supply {self.initial_supply} exceeds total supply {self.total_supply}"
            )
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise DescriptionError(
                f"description has {len(self.description)} characters, "
                f"max {MAX_DESCRIPTION_LENGTH}"
            )
        if not 0 <= self.decimals <= MAX_DECIMALS:
            raise DecimalsError(f"decimals {self.decimals} outside 0..{MAX_DECIMALS}")


@dataclass(frozen=True, slots=True)
class TokenMetadata:
    """Descriptive token metadata, fixed at initialization."""
    name: str
    symbol: str
    decimals: int
    description: str
    external_links: ExternalLinks


@dataclass(frozen=True, slots=True)
class Invocation:
    """
    Identity and time of a single inbound message.

    Captured once per message and used for every check inside that message.
    """
    caller: AccountId
    timestamp: int

    def __post_init__(self):
        _require_account(self.caller, "caller")
        _require_amount(self.timestamp, "timestamp")


# ============================================================================
# ACTIONS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Mint:
    amount: int
    to: AccountId

    def __post_init__(self):
        _require_amount(self.amount)
        _require_account(self.to, "to")


@dataclass(frozen=True, slots=True)
class Burn:
    amount: int

    def __post_init__(self):
        _require_amount(self.amount)


@dataclass(frozen=True, slots=True)
class Transfer:
    """
    Move `amount` from `from_` to `to`.

    When the sender is not `from_`, the sender spends its allowance.
    A `tx_id` enables replay protection keyed on the sender.
    """
    from_: AccountId
    to: AccountId
    amount: int
    tx_id: Optional[TxId] = None

    def __post_init__(self):
        _require_account(self.from_, "from_")
        _require_account(self.to, "to")
        _require_amount(self.amount)
        _require_tx_id(self.tx_id)


@dataclass(frozen=True, slots=True)
class Approve:
    """Set (overwrite) the sender's allowance for spender `to`."""
    to: AccountId
    amount: int
    tx_id: Optional[TxId] = None

    def __post_init__(self):
        _require_account(self.to, "to")
        _require_amount(self.amount)
        _require_tx_id(self.tx_id)


@dataclass(frozen=True, slots=True)
class TransferToUsers:
    amount: int
    to_users: Tuple[AccountId, ...]

    def __post_init__(self):
        _require_amount(self.amount)
        # Accept any sequence but store it immutably
        object.__setattr__(self, 'to_users', tuple(self.to_users))
        for user in self.to_users:
            _require_account(user, "to_users entry")


@dataclass(frozen=True, slots=True)
class AddAdmin:
    admin_id: AccountId

    def __post_init__(self):
        _require_account(self.admin_id, "admin_id")


@dataclass(frozen=True, slots=True)
class DeleteAdmin:
    admin_id: AccountId

    def __post_init__(self):
        _require_account(self.admin_id, "admin_id")


@dataclass(frozen=True, slots=True)
class BalanceOf:
    """Read-only; accepted both as an action and as a state query."""
    account: AccountId

    def __post_init__(self):
        _require_account(self.account, "account")


Action = Union[Mint, Burn, Transfer, Approve, TransferToUsers, AddAdmin, DeleteAdmin, BalanceOf]


# ============================================================================
# QUERIES
# ============================================================================

@dataclass(frozen=True, slots=True)
class Name:
    pass


@dataclass(frozen=True, slots=True)
class Symbol:
    pass


@dataclass(frozen=True, slots=True)
class Decimals:
    pass


@dataclass(frozen=True, slots=True)
class Description:
    pass


@dataclass(frozen=True, slots=True)
class ExternalLinksQuery:
    pass


@dataclass(frozen=True, slots=True)
class CurrentSupply:
    pass


@dataclass(frozen=True, slots=True)
class TotalSupply:
    pass


@dataclass(frozen=True, slots=True)
class Admins:
    pass


@dataclass(frozen=True, slots=True)
class AllowanceOfAccount:
    account: AccountId
    approved_account: AccountId


@dataclass(frozen=True, slots=True)
class GetTxValidityTime:
    account: AccountId
    tx_id: TxId


@dataclass(frozen=True, slots=True)
class GetTxIdsForAccount:
    account: AccountId


Query = Union[
    Name, Symbol, Decimals, Description, ExternalLinksQuery, CurrentSupply,
    TotalSupply, Admins, BalanceOf, AllowanceOfAccount, GetTxValidityTime,
    GetTxIdsForAccount,
]


# ============================================================================
# REPLIES
# ============================================================================

@dataclass(frozen=True, slots=True)
class Transferred:
    from_: AccountId
    to: AccountId
    amount: int


@dataclass(frozen=True, slots=True)
class Approved:
    from_: AccountId
    to: AccountId
    amount: int


@dataclass(frozen=True, slots=True)
class TransferredToUsers:
    from_: AccountId
    to_users: Tuple[AccountId, ...]
    amount: int


@dataclass(frozen=True, slots=True)
class AdminAdded:
    admin_id: AccountId


@dataclass(frozen=True, slots=True)
class AdminRemoved:
    admin_id: AccountId


@dataclass(frozen=True, slots=True)
class Balance:
    amount: int


@dataclass(frozen=True, slots=True)
class Rejected:
    """
    Failure reply.

    Attributes:
        error: The enumerated failure
        reason: Human-readable detail (not part of the contract)
    """
    error: ErrorCode
    reason: str = ""


@dataclass(frozen=True, slots=True)
class QueryReply:
    """Answer to a state query. `kind` is the query class name."""
    kind: str
    value: Any


Reply = Union[
    Transferred, Approved, TransferredToUsers, AdminAdded, AdminRemoved,
    Balance, Rejected,
]


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class LedgerView(Protocol):
    """
    Read-only interface to ledger state.

    Handlers and tests that only inspect state accept a LedgerView. TokenLedger
    implements this protocol but also provides the mutating operations.
    """

    @property
    def metadata(self) -> TokenMetadata:
        ...

    @property
    def current_supply(self) -> int:
        ...

    @property
    def total_supply(self) -> int:
        ...

    def balance_of(self, account: AccountId) -> int:
        """Return the balance of `account` (0 if it never held tokens)."""
        ...

    def allowance_of(self, owner: AccountId, spender: AccountId) -> int:
        """Return what `spender` may still transfer out of `owner` (default 0)."""
        ...

    def admins(self) -> List[AccountId]:
        """Return the admin set in insertion order."""
        ...

    def tx_validity_time(self, account: AccountId, tx_id: TxId) -> ValidUntil:
        """Return the expiry of a tracked tx id, or 0 if it is not tracked."""
        ...

    def tx_ids_for_account(self, account: AccountId) -> List[TxId]:
        """Return the tx ids currently tracked for `account`."""
        ...

    def balances(self) -> Dict[AccountId, int]:
        """Return a copy of all balances."""
        ...


# ============================================================================
# AUDIT RECORD
# ============================================================================

@dataclass(frozen=True, slots=True)
class LedgerEvent:
    """
    Immutable record of an applied state-changing message.

    Attributes:
        sequence: Monotonic position within the ledger's event log
        timestamp: Logical time of the invocation
        caller: Account that sent the message
        reply: Success reply returned to the caller
    """
    sequence: int
    timestamp: int
    caller: AccountId
    reply: Reply

    def __repr__(self) -> str:
        return f"LedgerEvent(#{self.sequence} t={self.timestamp} {self.caller}: {self.reply})"
