"""Ledger transaction errors.

Every error is local to a single transaction: the account it was routed to is
left untouched and processing carries on with the next one.
"""

from typing import Any, Dict

from amount import Amount
from models import TransactionState


class TransactionError(Exception):
    """Base class for transactions rejected by an account ledger."""

    error_code = "TRANSACTION_ERROR"

    def context(self) -> Dict[str, Any]:
        """Keyword context for structured log events."""
        return {}


class InvalidClient(TransactionError):
    """Raised when a transaction is routed to an account it does not belong to."""

    error_code = "INVALID_CLIENT"

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Transaction for client {actual} applied to client {expected}")

    def context(self) -> Dict[str, Any]:
        return {"expected": self.expected, "actual": self.actual}


class ClientLocked(TransactionError):
    """Raised for any transaction against an account frozen by a chargeback."""

    error_code = "CLIENT_LOCKED"

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Client {account_id} is locked")

    def context(self) -> Dict[str, Any]:
        return {"locked_account_id": self.account_id}


class InvalidDeposit(TransactionError):
    error_code = "INVALID_DEPOSIT"

    def __init__(self, amount: Amount):
        self.amount = amount
        super().__init__(f"Cannot deposit negative amount {amount}")

    def context(self) -> Dict[str, Any]:
        return {"amount": str(self.amount)}


class InvalidWithdrawal(TransactionError):
    error_code = "INVALID_WITHDRAWAL"

    def __init__(self, resulting_amount: Amount):
        self.resulting_amount = resulting_amount
        super().__init__(f"Withdrawal rejected, resulting available amount would be {resulting_amount}")

    def context(self) -> Dict[str, Any]:
        return {"resulting_amount": str(self.resulting_amount)}


class NotFound(TransactionError):
    """Raised when a dispute, resolve or chargeback names no stored deposit or withdrawal."""

    error_code = "NOT_FOUND"

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")

    def context(self) -> Dict[str, Any]:
        return {"referenced_transaction_id": self.transaction_id}


class Unprocessable(TransactionError):
    """Raised when the referenced transaction is not in the state the transition requires."""

    error_code = "UNPROCESSABLE"

    def __init__(self, current_state: TransactionState, required_state: TransactionState):
        self.current_state = current_state
        self.required_state = required_state
        super().__init__(
            f"Transaction is {current_state.value}, must be {required_state.value}"
        )

    def context(self) -> Dict[str, Any]:
        return {"current_state": self.current_state.value, "required_state": self.required_state.value}
