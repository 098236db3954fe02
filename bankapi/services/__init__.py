"""Service layer for the Bank API."""
from bankapi.services.accounts import AccountService

__all__ = ["AccountService"]
