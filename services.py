from typing import Iterable, List

from pydantic import BaseModel, Field
import structlog

from exceptions import TransactionError
from models import AccountReport, Transaction
from repositories import AccountRepository

logger = structlog.get_logger()


class ProcessingSummary(BaseModel):
    applied: int = Field(0, description="Transactions applied to their account")
    rejected: int = Field(0, description="Transactions rejected by their account")

    @property
    def processed(self) -> int:
        return self.applied + self.rejected


class TransactionService:
    def __init__(self, account_repo: AccountRepository, detailed_logging: bool = True):
        self.account_repo = account_repo
        self.detailed_logging = detailed_logging

    def process_transaction(self, transaction: Transaction) -> bool:
        """Apply a transaction. A rejection is logged and skipped, never raised."""
        try:
            self.account_repo.apply_transaction(transaction)
        except TransactionError as e:
            logger.warning(
                "Transaction rejected",
                error_code=e.error_code,
                reason=str(e),
                kind=transaction.kind.value,
                account_id=transaction.account_id,
                transaction_id=transaction.transaction_id,
                **e.context()
            )
            return False

        if self.detailed_logging:
            logger.debug(
                "Transaction applied",
                kind=transaction.kind.value,
                account_id=transaction.account_id,
                transaction_id=transaction.transaction_id,
                amount=str(transaction.amount) if transaction.amount is not None else None
            )
        return True

    def process_transactions(self, transactions: Iterable[Transaction]) -> ProcessingSummary:
        """Apply transactions strictly in order, counting outcomes."""
        summary = ProcessingSummary()
        for transaction in transactions:
            if self.process_transaction(transaction):
                summary.applied += 1
            else:
                summary.rejected += 1

        logger.info(
            "Transactions processed",
            applied=summary.applied,
            rejected=summary.rejected,
            accounts=self.account_repo.get_accounts_count()
        )
        return summary

    def build_report(self) -> List[AccountReport]:
        return self.account_repo.report()


# Factory function for dependency injection
def get_transaction_service(account_repo: AccountRepository, detailed_logging: bool = True) -> TransactionService:
    return TransactionService(account_repo, detailed_logging=detailed_logging)
