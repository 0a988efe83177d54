from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from enum import Enum
from typing import Any, Optional, Tuple

from amount import Amount

# Identifier widths: clients are u16, transactions are u32
MAX_ACCOUNT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


class TransactionKind(str, Enum):
    deposit = "deposit"
    withdrawal = "withdrawal"
    dispute = "dispute"
    resolve = "resolve"
    chargeback = "chargeback"

    @property
    def moves_money(self) -> bool:
        return self in (TransactionKind.deposit, TransactionKind.withdrawal)


class TransactionState(str, Enum):
    ok = "ok"
    disputed = "disputed"
    chargebacked = "chargebacked"


class Transaction(BaseModel):
    """One ledger event. Only deposits and withdrawals carry an amount."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: TransactionKind = Field(..., description="Transaction kind")
    account_id: int = Field(..., ge=0, le=MAX_ACCOUNT_ID, description="Owning client account")
    transaction_id: int = Field(..., ge=0, le=MAX_TRANSACTION_ID, description="Transaction identifier")
    amount: Optional[Amount] = Field(None, description="Amount moved, deposits and withdrawals only")

    @model_validator(mode="after")
    def validate_amount_kind_consistency(self):
        if self.kind.moves_money and self.amount is None:
            raise ValueError(f"{self.kind.value} transactions require an amount")
        if not self.kind.moves_money and self.amount is not None:
            raise ValueError(f"{self.kind.value} transactions cannot carry an amount")
        return self

    @classmethod
    def deposit(cls, account_id: int, transaction_id: int, amount: Amount) -> "Transaction":
        return cls(kind=TransactionKind.deposit, account_id=account_id, transaction_id=transaction_id, amount=amount)

    @classmethod
    def withdrawal(cls, account_id: int, transaction_id: int, amount: Amount) -> "Transaction":
        return cls(kind=TransactionKind.withdrawal, account_id=account_id, transaction_id=transaction_id, amount=amount)

    @classmethod
    def dispute(cls, account_id: int, transaction_id: int) -> "Transaction":
        return cls(kind=TransactionKind.dispute, account_id=account_id, transaction_id=transaction_id)

    @classmethod
    def resolve(cls, account_id: int, transaction_id: int) -> "Transaction":
        return cls(kind=TransactionKind.resolve, account_id=account_id, transaction_id=transaction_id)

    @classmethod
    def chargeback(cls, account_id: int, transaction_id: int) -> "Transaction":
        return cls(kind=TransactionKind.chargeback, account_id=account_id, transaction_id=transaction_id)


class TransactionRecord(BaseModel):
    """Lifecycle entry kept for every applied deposit or withdrawal."""

    model_config = ConfigDict(frozen=True)

    state: TransactionState = TransactionState.ok
    transaction: Transaction

    @property
    def amount(self) -> Amount:
        return self.transaction.amount


class TransactionRow(BaseModel):
    """
    Raw ``type, client, tx, amount`` row as read from a CSV file.

    Pass ``context={"strict_amounts": True}`` to reject amounts with more
    than four fractional digits instead of rounding them.
    """

    type: TransactionKind = Field(..., description="Transaction type")
    client: int = Field(..., ge=0, le=MAX_ACCOUNT_ID, description="Client identifier")
    tx: int = Field(..., ge=0, le=MAX_TRANSACTION_ID, description="Transaction identifier")
    amount: Optional[Amount] = Field(None, description="Decimal amount")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator('type', 'client', 'tx', mode='before')
    @classmethod
    def strip_field(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
        return v

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def parse_amount(cls, v: Any, info: ValidationInfo) -> Optional[Amount]:
        if v is None or isinstance(v, Amount):
            return v
        if isinstance(v, str) and not v.strip():
            return None
        strict = bool(info.context and info.context.get("strict_amounts"))
        return Amount.from_text(v, strict=strict)

    @model_validator(mode="after")
    def validate_amount_present(self):
        if self.type.moves_money and self.amount is None:
            raise ValueError(f"{self.type.value} rows require an amount")
        return self

    def to_transaction(self) -> Transaction:
        if self.type.moves_money:
            return Transaction(kind=self.type, account_id=self.client, transaction_id=self.tx, amount=self.amount)
        # Amounts on dispute/resolve/chargeback rows are ignored
        return Transaction(kind=self.type, account_id=self.client, transaction_id=self.tx)


class AccountReport(BaseModel):
    client: int = Field(..., description="Client identifier")
    available: Amount = Field(..., description="Funds available for withdrawal")
    held: Amount = Field(..., description="Funds held by open disputes")
    total: Amount = Field(..., description="Available plus held")
    locked: bool = Field(..., description="Frozen by a chargeback")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class AccountSnapshot(BaseModel):
    """Full copy of an account's state, compared in tests around rejected calls."""

    account_id: int
    available: Amount
    held: Amount
    locked: bool
    history: Tuple[TransactionRecord, ...]

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
