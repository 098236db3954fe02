"""
Tests for the account stores.

Both implementations run the same contract checks; the SQLAlchemy store
runs against an in-memory SQLite database.
"""
import threading
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from bankapi.database import Base, build_engine, build_session_factory
from bankapi.domain import new_account
from bankapi.errors import AccountNotFound, DuplicateAccountNumber, StoreError
from bankapi.storage import InMemoryAccountStore, SqlAlchemyAccountStore

from tests.conftest import TEST_BCRYPT_ROUNDS


def _account(number: int, first_name: str = "Ada"):
    return new_account(first_name, "Lovelace", "pw", rounds=TEST_BCRYPT_ROUNDS, number=number)


def _sql_store() -> SqlAlchemyAccountStore:
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    return SqlAlchemyAccountStore(build_session_factory(engine))


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    if request.param == "memory":
        return InMemoryAccountStore()
    return _sql_store()


class TestStoreContract:
    """Behavior shared by every AccountStore implementation."""

    def test_create_assigns_increasing_ids(self, any_store):
        first = any_store.create_account(_account(1001))
        second = any_store.create_account(_account(2002))

        assert first.id is not None
        assert second.id > first.id

    def test_lookup_by_id_and_number(self, any_store):
        created = any_store.create_account(_account(1001, first_name="Alice"))

        by_id = any_store.get_account_by_id(created.id)
        by_number = any_store.get_account_by_number(1001)

        assert by_id.number == 1001
        assert by_id.first_name == "Alice"
        assert by_number.id == created.id
        assert by_id.valid_password("pw")

    def test_missing_lookups_raise_not_found(self, any_store):
        with pytest.raises(AccountNotFound):
            any_store.get_account_by_id(1)
        with pytest.raises(AccountNotFound):
            any_store.get_account_by_number(1001)

    def test_duplicate_number_rejected(self, any_store):
        any_store.create_account(_account(1001))

        with pytest.raises(DuplicateAccountNumber):
            any_store.create_account(_account(1001, first_name="Mallory"))

        assert len(any_store.get_accounts()) == 1

    def test_list_is_ordered_by_id(self, any_store):
        for number in (30, 10, 20):
            any_store.create_account(_account(number))

        assert [a.number for a in any_store.get_accounts()] == [30, 10, 20]

    def test_delete(self, any_store):
        created = any_store.create_account(_account(1001))

        any_store.delete_account(created.id)

        with pytest.raises(AccountNotFound):
            any_store.get_account_by_id(created.id)
        with pytest.raises(AccountNotFound):
            any_store.delete_account(created.id)


class TestInMemoryConcurrency:
    def test_concurrent_creates_keep_numbers_unique(self):
        store = InMemoryAccountStore()
        accounts = [_account(n % 5) for n in range(40)]
        errors = []

        def worker(account):
            try:
                store.create_account(account)
            except DuplicateAccountNumber as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(a,)) for a in accounts]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        numbers = [a.number for a in store.get_accounts()]
        assert sorted(numbers) == [0, 1, 2, 3, 4]
        assert len(errors) == 35


class TestSqlStoreErrors:
    def test_driver_failure_becomes_store_error(self):
        session = MagicMock()
        session.__enter__.return_value = session
        session.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        store = SqlAlchemyAccountStore(lambda: session)

        with pytest.raises(StoreError) as exc_info:
            store.get_accounts()

        assert exc_info.value.status_code == 500
