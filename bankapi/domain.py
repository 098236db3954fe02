"""Domain model for bank accounts."""
import secrets
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

import bcrypt

# Upper bound (exclusive) for randomly drawn account numbers
ACCOUNT_NUMBER_SPACE = 1_000_000

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72

# Largest values the account table can hold (Integer id, BigInteger number)
MAX_ACCOUNT_ID = 2**31 - 1
MAX_ACCOUNT_NUMBER = 2**63 - 1

DEFAULT_BCRYPT_ROUNDS = 12


@dataclass(frozen=True)
class Account:
    """
    A bank account as seen by handlers and the authorization gate.

    ``id`` is the storage identifier; ``number`` is the external business
    handle asserted by login tokens. The two are unrelated values.
    Instances are read-only copies; the store owns the persisted record.
    """

    first_name: str
    last_name: str
    number: int
    encrypted_password: str = field(repr=False)
    balance: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[int] = None

    def valid_password(self, password: str) -> bool:
        """Check a plaintext password against the stored hash."""
        return check_password(password, self.encrypted_password)

    def with_id(self, account_id: int) -> "Account":
        return replace(self, id=account_id)


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Generate a salted bcrypt hash of a password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def check_password(password: str, encrypted: str) -> bool:
    """Compare a password with a bcrypt hash in constant time."""
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, encrypted.encode("ascii"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_account_number() -> int:
    return secrets.randbelow(ACCOUNT_NUMBER_SPACE)


def new_account(
    first_name: str,
    last_name: str,
    password: str,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
    number: Optional[int] = None,
) -> Account:
    """
    Build a new, unsaved account.

    Args:
        first_name: Holder's first name
        last_name: Holder's last name
        password: Plaintext password; only its bcrypt hash is kept
        rounds: bcrypt cost factor
        number: Account number to use; drawn at random when omitted

    Returns:
        Account without an ``id`` (assigned by the store)
    """
    return Account(
        first_name=first_name,
        last_name=last_name,
        number=generate_account_number() if number is None else number,
        encrypted_password=hash_password(password, rounds),
    )
