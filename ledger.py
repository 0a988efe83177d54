from typing import Dict, Optional

from amount import Amount
from exceptions import (
    ClientLocked,
    InvalidClient,
    InvalidDeposit,
    InvalidWithdrawal,
    NotFound,
    Unprocessable,
)
from models import (
    AccountReport,
    AccountSnapshot,
    Transaction,
    TransactionKind,
    TransactionRecord,
    TransactionState,
)


class Account:
    """
    Balances and dispute history of a single client.

    ``apply`` is the only mutator. Every check runs before any balance is
    touched, so a rejected transaction leaves the account exactly as it was.
    """

    __slots__ = ("id", "available", "held", "locked", "_history")

    def __init__(self, account_id: int):
        self.id = account_id
        self.available = Amount.zero()
        self.held = Amount.zero()
        self.locked = False
        self._history: Dict[int, TransactionRecord] = {}

    def total(self) -> Amount:
        return self.available + self.held

    def record(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Stored deposit or withdrawal with this id, if any."""
        return self._history.get(transaction_id)

    def apply(self, transaction: Transaction) -> None:
        """Apply one transaction, raising a TransactionError when it is rejected."""
        if transaction.account_id != self.id:
            raise InvalidClient(expected=self.id, actual=transaction.account_id)

        if self.locked:
            raise ClientLocked(self.id)

        kind = transaction.kind
        if kind == TransactionKind.deposit:
            self._deposit(transaction)
        elif kind == TransactionKind.withdrawal:
            self._withdraw(transaction)
        elif kind == TransactionKind.dispute:
            self._dispute(transaction.transaction_id)
        elif kind == TransactionKind.resolve:
            self._resolve(transaction.transaction_id)
        elif kind == TransactionKind.chargeback:
            self._chargeback(transaction.transaction_id)
        else:
            raise ValueError(f"Unhandled transaction kind {kind!r}")

    def _deposit(self, transaction: Transaction) -> None:
        amount = transaction.amount
        if amount.less_than_zero():
            raise InvalidDeposit(amount)

        self.available = self.available + amount
        self._store(transaction)

    def _withdraw(self, transaction: Transaction) -> None:
        amount = transaction.amount
        diff = self.available - amount
        if amount.less_than_zero() or diff.less_than_zero():
            raise InvalidWithdrawal(resulting_amount=diff)

        self.available = diff
        self._store(transaction)

    def _store(self, transaction: Transaction) -> None:
        # Ids are expected to be unique; on a repeat the first record stays the dispute target
        self._history.setdefault(
            transaction.transaction_id,
            TransactionRecord(state=TransactionState.ok, transaction=transaction),
        )

    def _lookup(self, transaction_id: int) -> TransactionRecord:
        record = self._history.get(transaction_id)
        if record is None:
            raise NotFound(transaction_id)
        return record

    def _dispute(self, transaction_id: int) -> None:
        record = self._lookup(transaction_id)
        if record.state != TransactionState.ok:
            raise Unprocessable(current_state=record.state, required_state=TransactionState.ok)

        amount = record.amount
        if record.transaction.kind == TransactionKind.deposit:
            self.available = self.available - amount
        # A disputed withdrawal already left available; held tracks the amount at risk
        self.held = self.held + amount
        self._history[transaction_id] = record.model_copy(update={"state": TransactionState.disputed})

    def _resolve(self, transaction_id: int) -> None:
        record = self._lookup(transaction_id)
        if record.state != TransactionState.disputed:
            raise Unprocessable(current_state=record.state, required_state=TransactionState.disputed)

        amount = record.amount
        self.held = self.held - amount
        if record.transaction.kind == TransactionKind.deposit:
            self.available = self.available + amount
        self._history[transaction_id] = record.model_copy(update={"state": TransactionState.ok})

    def _chargeback(self, transaction_id: int) -> None:
        record = self._lookup(transaction_id)
        if record.state != TransactionState.disputed:
            raise Unprocessable(current_state=record.state, required_state=TransactionState.disputed)

        self.held = self.held - record.amount
        self.locked = True
        self._history[transaction_id] = record.model_copy(update={"state": TransactionState.chargebacked})

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            account_id=self.id,
            available=self.available,
            held=self.held,
            locked=self.locked,
            history=tuple(self._history.values()),
        )

    def report(self) -> AccountReport:
        return AccountReport(
            client=self.id,
            available=self.available,
            held=self.held,
            total=self.total(),
            locked=self.locked,
        )

    def __repr__(self) -> str:
        return (
            f"Account(id={self.id}, available={self.available}, held={self.held}, "
            f"locked={self.locked})"
        )
