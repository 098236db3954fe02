"""Account service: CRUD pass-throughs and the login flow."""
from typing import List

import structlog

from bankapi import metrics
from bankapi.auth.tokens import TokenIssuer
from bankapi.domain import Account, DEFAULT_BCRYPT_ROUNDS, new_account
from bankapi.errors import AccountNotFound, AuthenticationError, DuplicateAccountNumber
from bankapi.schemas import CreateAccountRequest, LoginRequest, LoginResponse
from bankapi.storage import AccountStore

logger = structlog.get_logger()


class AccountService:
    """
    Service for account operations.

    This service orchestrates:
    1. Creating accounts with hashed passwords and unique numbers
    2. Listing, fetching and deleting accounts through the store
    3. Authenticating logins and issuing signed tokens
    """

    # Number draws attempted before giving up on a collision streak
    MAX_NUMBER_ATTEMPTS = 3

    def __init__(
        self,
        store: AccountStore,
        issuer: TokenIssuer,
        password_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        """
        Initialize the account service.

        Args:
            store: Account persistence backend
            issuer: Token issuer used by login
            password_rounds: bcrypt cost for new accounts
        """
        self.store = store
        self.issuer = issuer
        self.password_rounds = password_rounds

    def list_accounts(self) -> List[Account]:
        return self.store.get_accounts()

    def create_account(self, request: CreateAccountRequest) -> Account:
        """
        Create and persist a new account.

        Raises:
            DuplicateAccountNumber: If every drawn number was already taken
        """
        for attempt in range(1, self.MAX_NUMBER_ATTEMPTS + 1):
            account = new_account(
                request.first_name,
                request.last_name,
                request.password,
                rounds=self.password_rounds,
            )
            try:
                created = self.store.create_account(account)
            except DuplicateAccountNumber:
                metrics.ACCOUNT_NUMBER_COLLISIONS.inc()
                logger.warning("account_number_collision", attempt=attempt)
                if attempt == self.MAX_NUMBER_ATTEMPTS:
                    raise
                continue

            metrics.ACCOUNTS_CREATED.inc()
            logger.info("account_created", account_id=created.id, account_number=created.number)
            return created

    def delete_account(self, account_id: int) -> int:
        self.store.delete_account(account_id)
        metrics.ACCOUNTS_DELETED.inc()
        logger.info("account_deleted", account_id=account_id)
        return account_id

    def login(self, request: LoginRequest) -> LoginResponse:
        """
        Authenticate by account number and password.

        An unknown number and a wrong password are reported identically.

        Returns:
            LoginResponse with the signed token and the account number

        Raises:
            AuthenticationError: If the number is unknown or the password is wrong
            SigningError: If the token could not be signed
        """
        try:
            account = self.store.get_account_by_number(request.number)
        except AccountNotFound as e:
            metrics.record_login(success=False)
            logger.info("login_failed", outcome="unknown_account")
            raise AuthenticationError() from e

        if not account.valid_password(request.password):
            metrics.record_login(success=False)
            logger.info("login_failed", outcome="bad_password", account_number=account.number)
            raise AuthenticationError()

        token = self.issuer.issue(account)

        metrics.record_login(success=True)
        metrics.TOKENS_ISSUED.inc()
        logger.info("login_succeeded", account_number=account.number)

        return LoginResponse(token=token, number=account.number)
