"""Per-connection transaction state machine.

::

        begin()                 commit() / rollback()
    IDLE ───────► ACTIVE        ACTIVE ───────────────► IDLE

Any other transition raises :class:`~easydb.errors.TransactionStateError`.
The machine only tracks state; the connection checks a transition with
``require_*`` before touching the driver and records it with
``mark_*`` afterwards, so a failed driver call never leaves the state
out of step with the database.
"""

from __future__ import annotations

from enum import Enum

from easydb.errors import TransactionStateError


class TransactionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class TransactionStateMachine:
    """Guarded IDLE/ACTIVE state for one connection instance."""

    def __init__(self) -> None:
        self._state = TransactionState.IDLE

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is TransactionState.ACTIVE

    def require_idle(self, action: str) -> None:
        if self.active:
            raise TransactionStateError(
                f"Cannot {action}: a transaction is already active",
                state=self._state.value,
                action=action,
            )

    def require_active(self, action: str) -> None:
        if not self.active:
            raise TransactionStateError(
                f"Cannot {action}: no active transaction",
                state=self._state.value,
                action=action,
            )

    def mark_active(self) -> None:
        self.require_idle("begin")
        self._state = TransactionState.ACTIVE

    def mark_idle(self) -> None:
        self._state = TransactionState.IDLE

    # Convenience for callers that do not talk to a driver
    def begin(self) -> None:
        self.mark_active()

    def commit(self) -> None:
        self.require_active("commit")
        self.mark_idle()

    def rollback(self) -> None:
        self.require_active("rollback")
        self.mark_idle()

    def __repr__(self) -> str:
        return f"TransactionStateMachine(state={self._state.value})"


__all__ = [
    "TransactionState",
    "TransactionStateMachine",
]
