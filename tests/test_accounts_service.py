"""Tests for the account service: creation and the login flow."""
from unittest.mock import MagicMock, patch

import pytest

from bankapi.errors import (
    AccountNotFound,
    AuthenticationError,
    DuplicateAccountNumber,
    SigningError,
)
from bankapi.schemas import CreateAccountRequest, LoginRequest
from bankapi.services import AccountService

from tests.conftest import TEST_BCRYPT_ROUNDS


@pytest.fixture
def service(store, issuer):
    return AccountService(store, issuer, password_rounds=TEST_BCRYPT_ROUNDS)


def _create_request(password: str = "s3cret") -> CreateAccountRequest:
    return CreateAccountRequest(first_name="Ada", last_name="Lovelace", password=password)


class TestCreateAccount:
    """Tests for AccountService.create_account."""

    def test_create_assigns_id_and_hashes_password(self, service):
        account = service.create_account(_create_request("s3cret"))

        assert account.id == 1
        assert account.encrypted_password != "s3cret"
        assert account.encrypted_password.startswith("$2")
        assert account.valid_password("s3cret")
        assert account.balance == 0

    def test_number_collision_is_redrawn(self, service, store, make_account):
        make_account(1001)

        with patch("bankapi.domain.generate_account_number", side_effect=[1001, 1002]):
            account = service.create_account(_create_request())

        assert account.number == 1002
        assert len(store.get_accounts()) == 2

    def test_gives_up_after_repeated_collisions(self, service, make_account):
        make_account(1001)

        with patch("bankapi.domain.generate_account_number", return_value=1001):
            with pytest.raises(DuplicateAccountNumber):
                service.create_account(_create_request())


class TestLogin:
    """Tests for AccountService.login."""

    def test_login_returns_token_for_account_number(self, service, issuer, make_account):
        make_account(1001, password="s3cret")

        response = service.login(LoginRequest(number=1001, password="s3cret"))

        assert response.number == 1001
        assert issuer.verify(response.token).account_number == 1001

    def test_wrong_password(self, service, make_account):
        make_account(1001, password="s3cret")

        with pytest.raises(AuthenticationError):
            service.login(LoginRequest(number=1001, password="nope"))

    def test_unknown_number_stops_before_password_check(self, issuer):
        """Not-found ends the flow immediately; no password check, no token."""
        store = MagicMock()
        store.get_account_by_number.side_effect = AccountNotFound("missing")
        issuer = MagicMock(wraps=issuer)
        service = AccountService(store, issuer, password_rounds=TEST_BCRYPT_ROUNDS)

        with pytest.raises(AuthenticationError):
            service.login(LoginRequest(number=5, password="anything"))

        issuer.issue.assert_not_called()

    def test_no_token_issued_on_bad_password(self, store, issuer, make_account):
        make_account(1001, password="s3cret")
        issuer = MagicMock(wraps=issuer)
        service = AccountService(store, issuer, password_rounds=TEST_BCRYPT_ROUNDS)

        with pytest.raises(AuthenticationError):
            service.login(LoginRequest(number=1001, password="wrong"))

        issuer.issue.assert_not_called()

    def test_signing_error_propagates(self, store, make_account):
        make_account(1001, password="s3cret")
        issuer = MagicMock()
        issuer.issue.side_effect = SigningError("hsm offline")
        service = AccountService(store, issuer, password_rounds=TEST_BCRYPT_ROUNDS)

        with pytest.raises(SigningError) as exc_info:
            service.login(LoginRequest(number=1001, password="s3cret"))

        assert exc_info.value.status_code == 500


class TestDeleteAccount:
    def test_delete_returns_id(self, service, make_account, store):
        alice = make_account(1001)

        assert service.delete_account(alice.id) == alice.id
        assert store.get_accounts() == []

    def test_delete_missing(self, service):
        with pytest.raises(AccountNotFound):
            service.delete_account(42)
