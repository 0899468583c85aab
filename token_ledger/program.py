"""
program.py - Serialized message processing

Wraps a TokenLedger so that messages are handled strictly one at a time,
the way the hosting platform delivers them.

Processing of each send():
1. Acquire the program lock
2. Read the clock once and build the Invocation
3. Dispatch the action through handle()
4. Release the lock and return the reply

The ledger's event_log is the audit trail - no separate message history.
"""

from __future__ import annotations
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from .clock import Clock, StaticClock
from .core import AccountId, Action, InitConfig, Invocation, Query, QueryReply, Reply
from .handlers import DEFAULT_HANDLERS, Handler, handle, read_state
from .ledger import TokenLedger


class LedgerProgram:
    """
    Single-writer front end for a TokenLedger.

    Features:
    - One process-wide lock around every send() and read_state()
    - Caller identity supplied per message, time read once per message
    - Pluggable dispatch table
    """

    def __init__(
        self,
        ledger: TokenLedger,
        clock: Optional[Clock] = None,
        handlers: Optional[Dict[type, Handler]] = None,
    ):
        """
        Args:
            ledger: The ledger this program owns exclusively
            clock: Time source (default: StaticClock(0))
            handlers: Action dispatch table (default: DEFAULT_HANDLERS)
        """
        self.ledger = ledger
        self.clock = clock or StaticClock(0)
        self.handlers = handlers if handlers is not None else DEFAULT_HANDLERS
        self._lock = threading.Lock()

    @classmethod
    def init(
        cls,
        init_config: InitConfig,
        clock: Optional[Clock] = None,
        verbose: bool = True,
    ) -> LedgerProgram:
        """Create the ledger from `init_config` and wrap it."""
        return cls(TokenLedger.init(init_config, verbose=verbose), clock)

    def send(self, caller: AccountId, action: Action) -> Reply:
        """
        Process one message from `caller`.

        Returns:
            The reply for the action (Rejected on caller-induced failure)
        """
        with self._lock:
            inv = Invocation(caller=caller, timestamp=self.clock.now())
            return handle(self.ledger, action, inv, self.handlers)

    def send_many(self, messages: Iterable[Tuple[AccountId, Action]]) -> List[Reply]:
        """Process messages in order; each one is its own atomic step."""
        return [self.send(caller, action) for caller, action in messages]

    def read_state(self, query: Query) -> QueryReply:
        with self._lock:
            return read_state(self.ledger, query)
