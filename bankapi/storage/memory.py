"""In-process account store."""
import threading
from typing import Dict, List

from bankapi.domain import Account
from bankapi.errors import AccountNotFound, DuplicateAccountNumber


class InMemoryAccountStore:
    """Dictionary-backed store, guarded by a lock so numbers stay unique."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: Dict[int, Account] = {}
        self._next_id = 1

    def get_accounts(self) -> List[Account]:
        with self._lock:
            return [self._by_id[k] for k in sorted(self._by_id)]

    def get_account_by_id(self, account_id: int) -> Account:
        with self._lock:
            account = self._by_id.get(account_id)
        if account is None:
            raise AccountNotFound(f"account {account_id} not found")
        return account

    def get_account_by_number(self, number: int) -> Account:
        with self._lock:
            for account in self._by_id.values():
                if account.number == number:
                    return account
        raise AccountNotFound(f"account with number {number} not found")

    def create_account(self, account: Account) -> Account:
        with self._lock:
            if any(a.number == account.number for a in self._by_id.values()):
                raise DuplicateAccountNumber(f"account number {account.number} already exists")
            stored = account.with_id(self._next_id)
            self._by_id[stored.id] = stored
            self._next_id += 1
        return stored

    def delete_account(self, account_id: int) -> None:
        with self._lock:
            if self._by_id.pop(account_id, None) is None:
                raise AccountNotFound(f"account {account_id} not found")
