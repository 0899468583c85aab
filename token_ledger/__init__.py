"""
token_ledger - Single-Asset Token Ledger

An actor-style fungible token: balances, allowances, admin-gated mint/burn under
a supply cap, and transaction-id replay protection, mutated only by messages
processed one at a time.

Usage:
    from token_ledger import (
        InitConfig, Config, LedgerProgram, ManualClock, Transfer, Approve, Mint,
    )

    clock = ManualClock(0)
    program = LedgerProgram.init(InitConfig(
        name="Gear Token", symbol="GT", decimals=12, description="demo",
        admin="alice", initial_supply=1_000, total_supply=10_000,
        config=Config(tx_storage_period=60_000),
    ), clock)

    program.send("alice", Transfer("alice", "bob", 100, tx_id=1))
    program.send("bob", Approve("carol", 40))
    program.send("carol", Transfer("bob", "dave", 40))
"""

# Core types
from .core import (
    LedgerView,
    AccountId,
    TxId,
    ValidUntil,
    Config,
    ExternalLinks,
    InitConfig,
    TokenMetadata,
    Invocation,
    LedgerEvent,
    ZERO_ADDRESS,
    MAX_DECIMALS,
    MAX_DESCRIPTION_LENGTH,
    # Errors
    ErrorCode,
    LedgerError,
    NotAdmin,
    InsufficientBalance,
    AllowanceExceeded,
    ZeroAddressTarget,
    TxAlreadyExists,
    MaxSupplyReached,
    AdminAlreadyExists,
    SelfRemovalForbidden,
    InitConfigError,
    SupplyError,
    DescriptionError,
    DecimalsError,
    LedgerInvariantViolation,
    # Actions
    Action,
    Mint,
    Burn,
    Transfer,
    Approve,
    TransferToUsers,
    AddAdmin,
    DeleteAdmin,
    BalanceOf,
    # Queries
    Query,
    Name,
    Symbol,
    Decimals,
    Description,
    ExternalLinksQuery,
    CurrentSupply,
    TotalSupply,
    Admins,
    AllowanceOfAccount,
    GetTxValidityTime,
    GetTxIdsForAccount,
    # Replies
    Reply,
    Transferred,
    Approved,
    TransferredToUsers,
    AdminAdded,
    AdminRemoved,
    Balance,
    Rejected,
    QueryReply,
)

# Replay protection
from .tx_ids import TxIdIndex

# Ledger
from .ledger import TokenLedger

# Routing
from .handlers import (
    handle,
    read_state,
    handle_mint,
    handle_burn,
    handle_transfer,
    handle_approve,
    handle_transfer_to_users,
    handle_add_admin,
    handle_delete_admin,
    handle_balance_of,
    DEFAULT_HANDLERS,
    QUERY_RESOLVERS,
)

# Time
from .clock import Clock, StaticClock, ManualClock

# Serialized processing
from .program import LedgerProgram

__all__ = [
    # Core
    'LedgerView', 'AccountId', 'TxId', 'ValidUntil',
    'Config', 'ExternalLinks', 'InitConfig', 'TokenMetadata', 'Invocation', 'LedgerEvent',
    'ZERO_ADDRESS', 'MAX_DECIMALS', 'MAX_DESCRIPTION_LENGTH',
    # Errors
    'ErrorCode', 'LedgerError', 'NotAdmin', 'InsufficientBalance', 'AllowanceExceeded',
    'ZeroAddressTarget', 'TxAlreadyExists', 'MaxSupplyReached', 'AdminAlreadyExists',
    'SelfRemovalForbidden', 'InitConfigError', 'SupplyError', 'DescriptionError',
    'DecimalsError', 'LedgerInvariantViolation',
    # Actions
    'Action', 'Mint', 'Burn', 'Transfer', 'Approve', 'TransferToUsers',
    'AddAdmin', 'DeleteAdmin', 'BalanceOf',
    # Queries
    'Query', 'Name', 'Symbol', 'Decimals', 'Description', 'ExternalLinksQuery',
    'CurrentSupply', 'TotalSupply', 'Admins', 'AllowanceOfAccount',
    'GetTxValidityTime', 'GetTxIdsForAccount',
    # Replies
    'Reply', 'Transferred', 'Approved', 'TransferredToUsers', 'AdminAdded',
    'AdminRemoved', 'Balance', 'Rejected', 'QueryReply',
    # Replay protection
    'TxIdIndex',
    # Ledger
    'TokenLedger',
    # Routing
    'handle', 'read_state',
    'handle_mint', 'handle_burn', 'handle_transfer', 'handle_approve',
    'handle_transfer_to_users', 'handle_add_admin', 'handle_delete_admin',
    'handle_balance_of', 'DEFAULT_HANDLERS', 'QUERY_RESOLVERS',
    # Time
    'Clock', 'StaticClock', 'ManualClock',
    # Program
    'LedgerProgram',
]

__version__ = '1.0.0'
