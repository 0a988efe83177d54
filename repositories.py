from abc import ABC, abstractmethod
from typing import List

from ledger import Account
from models import AccountReport, MAX_ACCOUNT_ID, Transaction


class AccountRepository(ABC):
    @abstractmethod
    def get_account(self, account_id: int) -> Account:
        """Get the account for an id. Every id in range has one."""
        pass

    @abstractmethod
    def apply_transaction(self, transaction: Transaction) -> None:
        """Route a transaction to its account. Raises TransactionError on rejection."""
        pass

    @abstractmethod
    def report(self) -> List[AccountReport]:
        """Report rows for every account that received a transaction, by ascending id."""
        pass

    @abstractmethod
    def get_accounts_count(self) -> int:
        """Get number of accounts that received a transaction."""
        pass


class InMemoryAccountRepository(AccountRepository):
    """Arena of accounts indexed directly by client id, allocated once at startup."""

    def __init__(self):
        size = MAX_ACCOUNT_ID + 1
        self.accounts: List[Account] = [Account(account_id) for account_id in range(size)]
        self.touched: List[bool] = [False] * size

    def get_account(self, account_id: int) -> Account:
        return self.accounts[account_id]

    def apply_transaction(self, transaction: Transaction) -> None:
        index = transaction.account_id
        # The id is known from now on, even if the account rejects the transaction
        self.touched[index] = True
        self.accounts[index].apply(transaction)

    def report(self) -> List[AccountReport]:
        return [
            account.report()
            for account, touched in zip(self.accounts, self.touched)
            if touched
        ]

    def get_accounts_count(self) -> int:
        return sum(self.touched)


# Singleton instance (the CLI processes one file per run)
_account_repo = InMemoryAccountRepository()


def get_account_repository() -> AccountRepository:
    return _account_repo


# For tests
def reset_repositories():
    """Reset the repository to its initial state (for testing only)."""
    global _account_repo
    _account_repo = InMemoryAccountRepository()
