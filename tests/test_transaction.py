"""Tests for ``easydb.transaction`` — the IDLE/ACTIVE state machine."""

from __future__ import annotations

import pytest

from easydb.errors import TransactionStateError
from easydb.transaction import TransactionState, TransactionStateMachine


class TestTransitions:
    def test_starts_idle(self):
        tx = TransactionStateMachine()
        assert tx.state is TransactionState.IDLE
        assert tx.active is False

    def test_begin_commit(self):
        tx = TransactionStateMachine()
        tx.begin()
        assert tx.state is TransactionState.ACTIVE
        tx.commit()
        assert tx.state is TransactionState.IDLE

    def test_begin_rollback(self):
        tx = TransactionStateMachine()
        tx.begin()
        tx.rollback()
        assert tx.state is TransactionState.IDLE

    def test_reusable_after_commit(self):
        tx = TransactionStateMachine()
        tx.begin()
        tx.commit()
        tx.begin()
        assert tx.active


class TestIllegalTransitions:
    def test_double_begin(self):
        tx = TransactionStateMachine()
        tx.begin()
        with pytest.raises(TransactionStateError, match="already active") as exc_info:
            tx.begin()
        assert exc_info.value.state == "active"
        assert exc_info.value.action == "begin"
        assert tx.active

    @pytest.mark.parametrize("action", ["commit", "rollback"])
    def test_end_while_idle(self, action):
        tx = TransactionStateMachine()
        with pytest.raises(TransactionStateError, match="no active transaction") as exc_info:
            getattr(tx, action)()
        assert exc_info.value.action == action
        assert tx.state is TransactionState.IDLE


class TestGuards:
    def test_require_does_not_change_state(self):
        tx = TransactionStateMachine()
        tx.require_idle("begin")
        assert tx.state is TransactionState.IDLE

    def test_mark_idle_is_unconditional(self):
        tx = TransactionStateMachine()
        tx.mark_idle()
        assert tx.state is TransactionState.IDLE
