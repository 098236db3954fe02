"""Shared fixtures for Bank API tests."""
import pytest
from fastapi.testclient import TestClient

from bankapi.auth import AuthorizationGate, TokenIssuer
from bankapi.config import Settings
from bankapi.domain import new_account
from bankapi.logging import clear_request_context
from bankapi.main import create_app
from bankapi.storage import InMemoryAccountStore

# Long enough for HS512 without key-length warnings
TEST_SECRET = "unit-test-signing-secret-0123456789abcdef0123456789abcdef01234567"

# Lowest bcrypt cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture(autouse=True)
def _reset_logging_context():
    """Isolate request-scoped logging context between tests."""
    yield
    clear_request_context()


@pytest.fixture
def settings():
    """Settings with a fixed secret and an in-memory store."""
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url="memory://",
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        token_ttl_seconds=900,
    )


@pytest.fixture
def store():
    return InMemoryAccountStore()


@pytest.fixture
def issuer():
    return TokenIssuer(TEST_SECRET, ttl_seconds=900)


@pytest.fixture
def gate(store, issuer):
    return AuthorizationGate(store, issuer)


@pytest.fixture
def make_account(store):
    """Create and store an account with a chosen number."""
    def _make(number: int, password: str = "hunter2", first_name: str = "Ada", last_name: str = "Lovelace"):
        account = new_account(first_name, last_name, password, rounds=TEST_BCRYPT_ROUNDS, number=number)
        return store.create_account(account)
    return _make


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    """Create a test client (runs the app lifespan)."""
    with TestClient(app) as test_client:
        yield test_client
