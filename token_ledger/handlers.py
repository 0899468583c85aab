"""
handlers.py - Message Handler Functions

Simple functions that apply one decoded action to a TokenLedger.
Each handler delegates to the matching TokenLedger operation.

- No handler classes, just functions
- Dict of functions keyed by action type instead of a class hierarchy
- handle() turns every LedgerError into a Rejected reply, so the caller
  always gets an explicit answer
"""

from __future__ import annotations
from typing import Callable, Dict

from .core import (
    Action, Query, Reply, QueryReply, Rejected, Balance, Invocation,
    Mint, Burn, Transfer, Approve, TransferToUsers, AddAdmin, DeleteAdmin, BalanceOf,
    Name, Symbol, Decimals, Description, ExternalLinksQuery, CurrentSupply,
    TotalSupply, Admins, AllowanceOfAccount, GetTxValidityTime, GetTxIdsForAccount,
    LedgerError, LedgerView,
)
from .ledger import TokenLedger


Handler = Callable[[TokenLedger, Action, Invocation], Reply]


# ============================================================================
# HANDLER FUNCTIONS
# ============================================================================

def handle_mint(ledger: TokenLedger, action: Mint, inv: Invocation) -> Reply:
    return ledger.mint(inv, action.to, action.amount)


def handle_burn(ledger: TokenLedger, action: Burn, inv: Invocation) -> Reply:
    return ledger.burn(inv, action.amount)


def handle_transfer(ledger: TokenLedger, action: Transfer, inv: Invocation) -> Reply:
    return ledger.transfer(inv, action.from_, action.to, action.amount, action.tx_id)


def handle_approve(ledger: TokenLedger, action: Approve, inv: Invocation) -> Reply:
    return ledger.approve(inv, action.to, action.amount, action.tx_id)


def handle_transfer_to_users(
    ledger: TokenLedger,
    action: TransferToUsers,
    inv: Invocation,
) -> Reply:
    return ledger.transfer_to_users(inv, action.amount, action.to_users)


def handle_add_admin(ledger: TokenLedger, action: AddAdmin, inv: Invocation) -> Reply:
    return ledger.add_admin(inv, action.admin_id)


def handle_delete_admin(ledger: TokenLedger, action: DeleteAdmin, inv: Invocation) -> Reply:
    return ledger.delete_admin(inv, action.admin_id)


def handle_balance_of(ledger: TokenLedger, action: BalanceOf, inv: Invocation) -> Reply:
    """Read-only; never logged."""
    return Balance(ledger.balance_of(action.account))


DEFAULT_HANDLERS: Dict[type, Handler] = {
    Mint: handle_mint,
    Burn: handle_burn,
    Transfer: handle_transfer,
    Approve: handle_approve,
    TransferToUsers: handle_transfer_to_users,
    AddAdmin: handle_add_admin,
    DeleteAdmin: handle_delete_admin,
    BalanceOf: handle_balance_of,
}


def handle(
    ledger: TokenLedger,
    action: Action,
    inv: Invocation,
    handlers: Dict[type, Handler] = DEFAULT_HANDLERS,
) -> Reply:
    """
    Apply one action and return its reply.

    Args:
        ledger: The ledger to operate on
        action: Decoded action value
        inv: Sender identity and timestamp, captured once for this message
        handlers: Dispatch table (default: DEFAULT_HANDLERS)

    Returns:
        The success reply, or Rejected(error, reason) for any caller-induced failure

    Raises:
        TypeError: No handler is registered for the action's type
        LedgerInvariantViolation: Internal bookkeeping defect (never a reply)
    """
    handler = handlers.get(type(action))
    if handler is None:
        raise TypeError(f"No handler for action {type(action).__name__}")

    try:
        return handler(ledger, action, inv)
    except LedgerError as e:
        ledger.report_rejected(inv, action, f"{e.code.value}: {e}")
        return Rejected(error=e.code, reason=str(e))


# ============================================================================
# STATE QUERIES
# ============================================================================

QUERY_RESOLVERS: Dict[type, Callable[[LedgerView, Query], object]] = {
    Name: lambda view, q: view.metadata.name,
    Symbol: lambda view, q: view.metadata.symbol,
    Decimals: lambda view, q: view.metadata.decimals,
    Description: lambda view, q: view.metadata.description,
    ExternalLinksQuery: lambda view, q: view.metadata.external_links,
    CurrentSupply: lambda view, q: view.current_supply,
    TotalSupply: lambda view, q: view.total_supply,
    Admins: lambda view, q: view.admins(),
    BalanceOf: lambda view, q: view.balance_of(q.account),
    AllowanceOfAccount: lambda view, q: view.allowance_of(q.account, q.approved_account),
    GetTxValidityTime: lambda view, q: view.tx_validity_time(q.account, q.tx_id),
    GetTxIdsForAccount: lambda view, q: view.tx_ids_for_account(q.account),
}


def read_state(view: LedgerView, query: Query) -> QueryReply:
    """
    Answer a read-only state query.

    Queries never evict tx ids: an expired id keeps reporting its validity
    time until its account's next protected operation.

    Raises:
        TypeError: Unknown query type
    """
    resolver = QUERY_RESOLVERS.get(type(query))
    if resolver is None:
        raise TypeError(f"Unknown query {type(query).__name__}")
    return QueryReply(kind=type(query).__name__, value=resolver(view, query))
