"""SQLAlchemy-backed account store."""
from typing import Callable, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bankapi.domain import Account
from bankapi.errors import AccountNotFound, DuplicateAccountNumber, StoreError
from bankapi.logging import get_logger, TimedOperation
from bankapi.models import AccountRecord

logger = get_logger(__name__)


def _to_domain(record: AccountRecord) -> Account:
    return Account(
        id=record.id,
        first_name=record.first_name,
        last_name=record.last_name,
        number=record.number,
        encrypted_password=record.encrypted_password,
        balance=record.balance,
        created_at=record.created_at,
    )


class SqlAlchemyAccountStore:
    """
    Account store persisting to a relational database.

    Each operation opens its own session, so the store can be shared
    between concurrent requests. Uniqueness of account numbers is enforced
    by the unique index on ``account.number``.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        """
        Initialize the store.

        Args:
            session_factory: Callable returning a new SQLAlchemy session
        """
        self.session_factory = session_factory

    def get_accounts(self) -> List[Account]:
        with TimedOperation("store_get_accounts", logger):
            try:
                with self.session_factory() as db:
                    records = db.query(AccountRecord).order_by(AccountRecord.id).all()
                    return [_to_domain(r) for r in records]
            except SQLAlchemyError as e:
                raise StoreError(str(e)) from e

    def get_account_by_id(self, account_id: int) -> Account:
        with TimedOperation("store_get_account_by_id", logger, account_id=account_id):
            try:
                with self.session_factory() as db:
                    record = db.get(AccountRecord, account_id)
                    if record is None:
                        raise AccountNotFound(f"account {account_id} not found")
                    return _to_domain(record)
            except SQLAlchemyError as e:
                raise StoreError(str(e)) from e

    def get_account_by_number(self, number: int) -> Account:
        with TimedOperation("store_get_account_by_number", logger):
            try:
                with self.session_factory() as db:
                    record = (
                        db.query(AccountRecord)
                        .filter(AccountRecord.number == number)
                        .first()
                    )
                    if record is None:
                        raise AccountNotFound(f"account with number {number} not found")
                    return _to_domain(record)
            except SQLAlchemyError as e:
                raise StoreError(str(e)) from e

    def create_account(self, account: Account) -> Account:
        with TimedOperation("store_create_account", logger):
            try:
                with self.session_factory() as db:
                    record = AccountRecord(
                        first_name=account.first_name,
                        last_name=account.last_name,
                        number=account.number,
                        encrypted_password=account.encrypted_password,
                        balance=account.balance,
                        created_at=account.created_at,
                    )
                    db.add(record)
                    try:
                        db.commit()
                    except IntegrityError as e:
                        db.rollback()
                        raise DuplicateAccountNumber(
                            f"account number {account.number} already exists"
                        ) from e
                    db.refresh(record)
                    return _to_domain(record)
            except SQLAlchemyError as e:
                raise StoreError(str(e)) from e

    def delete_account(self, account_id: int) -> None:
        with TimedOperation("store_delete_account", logger, account_id=account_id):
            try:
                with self.session_factory() as db:
                    deleted = (
                        db.query(AccountRecord)
                        .filter(AccountRecord.id == account_id)
                        .delete()
                    )
                    db.commit()
            except SQLAlchemyError as e:
                raise StoreError(str(e)) from e
            if not deleted:
                raise AccountNotFound(f"account {account_id} not found")
