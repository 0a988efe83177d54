import pytest

from amount import Amount
from exceptions import ClientLocked, NotFound
from models import MAX_ACCOUNT_ID, Transaction
from repositories import (
    InMemoryAccountRepository,
    get_account_repository,
    reset_repositories,
)


@pytest.fixture
def repo():
    return InMemoryAccountRepository()


class TestRegistryInitialState:
    """Test the pre-populated account table."""

    def test_every_id_has_an_account(self, repo):
        assert len(repo.accounts) == MAX_ACCOUNT_ID + 1
        for account_id in (0, 1, 4482, MAX_ACCOUNT_ID):
            assert repo.get_account(account_id).id == account_id

    def test_nothing_touched_initially(self, repo):
        assert repo.get_accounts_count() == 0
        assert repo.report() == []


class TestApplyTransaction:
    """Test routing transactions to accounts."""

    def test_routes_to_matching_account(self, repo):
        repo.apply_transaction(Transaction.deposit(45, 23, Amount.new(342)))

        assert repo.get_account(45).available == Amount.new(342)
        assert repo.get_account(44).available == Amount.zero()
        assert repo.touched[45] is True

    def test_touches_account_even_when_rejected(self, repo):
        with pytest.raises(NotFound):
            repo.apply_transaction(Transaction.dispute(9, 1))

        assert repo.touched[9] is True
        assert repo.get_accounts_count() == 1
        assert [row.client for row in repo.report()] == [9]

    def test_propagates_account_errors(self, repo):
        repo.apply_transaction(Transaction.deposit(1, 1, Amount.new(10000)))
        repo.apply_transaction(Transaction.dispute(1, 1))
        repo.apply_transaction(Transaction.chargeback(1, 1))

        with pytest.raises(ClientLocked):
            repo.apply_transaction(Transaction.deposit(1, 2, Amount.new(1)))

    def test_works_for_boundary_ids(self, repo):
        for account_id in (0, MAX_ACCOUNT_ID):
            repo.apply_transaction(Transaction.deposit(account_id, 23, Amount.new(342)))
            assert repo.get_account(account_id).available == Amount.new(342)


class TestReport:
    """Test report aggregation."""

    def test_only_touched_accounts_in_ascending_order(self, repo):
        repo.apply_transaction(Transaction.deposit(300, 1, Amount.new(10000)))
        repo.apply_transaction(Transaction.deposit(2, 2, Amount.new(20000)))
        repo.apply_transaction(Transaction.deposit(17, 3, Amount.new(5)))

        rows = repo.report()

        assert [row.client for row in rows] == [2, 17, 300]
        assert repo.get_accounts_count() == 3

    def test_rows_reflect_current_balances(self, repo):
        repo.apply_transaction(Transaction.deposit(1, 1, Amount.new(10000)))
        repo.apply_transaction(Transaction.withdrawal(1, 2, Amount.new(4000)))
        repo.apply_transaction(Transaction.dispute(1, 2))

        row = repo.report()[0]
        assert row.available == Amount.new(6000)
        assert row.held == Amount.new(4000)
        assert row.total == Amount.new(10000)
        assert row.locked is False

        repo.apply_transaction(Transaction.chargeback(1, 2))

        row = repo.report()[0]
        assert row.held == Amount.zero()
        assert row.total == Amount.new(6000)
        assert row.locked is True


class TestSingleton:
    def test_reset_replaces_repository(self):
        repo = get_account_repository()
        repo.apply_transaction(Transaction.deposit(1, 1, Amount.new(1)))

        reset_repositories()

        assert get_account_repository() is not repo
        assert get_account_repository().get_accounts_count() == 0
