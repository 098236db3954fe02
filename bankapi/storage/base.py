"""Storage interface for accounts."""
from typing import List, Protocol

from bankapi.domain import Account


class AccountStore(Protocol):
    """
    Abstraction over account persistence.

    Implementations are responsible for:
    - Assigning the numeric ``id`` of new accounts.
    - Keeping account numbers unique (raising ``DuplicateAccountNumber``).
    - Raising ``AccountNotFound`` when a lookup or delete misses.
    - Wrapping driver failures in ``StoreError``.
    """

    def get_accounts(self) -> List[Account]:
        """Return every account, ordered by id."""

        ...

    def get_account_by_id(self, account_id: int) -> Account:
        """Return the account with the given storage identifier."""

        ...

    def get_account_by_number(self, number: int) -> Account:
        """Return the account with the given account number."""

        ...

    def create_account(self, account: Account) -> Account:
        """Persist a new account and return it with its assigned id."""

        ...

    def delete_account(self, account_id: int) -> None:
        """Remove the account with the given storage identifier."""

        ...

