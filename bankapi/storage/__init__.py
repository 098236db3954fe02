"""Account persistence."""
from bankapi.storage.base import AccountStore
from bankapi.storage.memory import InMemoryAccountStore
from bankapi.storage.sql import SqlAlchemyAccountStore

__all__ = ["AccountStore", "InMemoryAccountStore", "SqlAlchemyAccountStore"]
