"""Authorization gate for account-scoped routes."""
from typing import Optional

from bankapi import metrics
from bankapi.auth.tokens import TokenIssuer
from bankapi.domain import Account, MAX_ACCOUNT_ID
from bankapi.errors import AuthorizationError, ClientInputError, InvalidToken
from bankapi.logging import get_logger, log_authorization, set_account_context
from bankapi.storage import AccountStore

logger = get_logger(__name__)


def parse_account_id(raw_id: str) -> int:
    """
    Parse an account identifier taken from the request path.

    Raises:
        ClientInputError: Unless ``raw_id`` is a non-negative decimal integer
            no larger than ``MAX_ACCOUNT_ID``
    """
    if not raw_id or not (raw_id.isascii() and raw_id.isdigit()):
        raise ClientInputError("invalid id given", detail=f"invalid id given {raw_id}")
    account_id = int(raw_id)
    if account_id > MAX_ACCOUNT_ID:
        raise ClientInputError("invalid id given", detail=f"id out of range {raw_id}")
    return account_id


class AuthorizationGate:
    """
    Guards routes that act on one specific account.

    Every call runs three steps from scratch and nothing is remembered
    between calls:

    1. Verify the presented token (signature, HMAC algorithm, expiry).
    2. Parse the target identifier from the path.
    3. Load the target account and require its number to equal the
       number asserted by the token.

    Failures in step 1 or 3 raise ``AuthorizationError`` with the same
    public message; a malformed identifier raises ``ClientInputError``
    before the store is touched; store errors propagate unchanged.
    """

    def __init__(self, store: AccountStore, issuer: TokenIssuer):
        self.store = store
        self.issuer = issuer

    def authorize(self, token: Optional[str], raw_id: str) -> Account:
        """
        Decide whether the token holder may act on the account at ``raw_id``.

        Args:
            token: Token string from the request header (may be missing)
            raw_id: Account identifier exactly as it appeared in the path

        Returns:
            The target account, when the token's account number owns it
        """
        try:
            claims = self.issuer.verify(token)
        except InvalidToken as e:
            metrics.record_authorization("invalid_token")
            log_authorization(logger, "denied", reason="invalid_token")
            logger.debug("token_rejected", error=str(e))
            raise AuthorizationError() from e

        set_account_context(claims.account_number)

        try:
            account_id = parse_account_id(raw_id)
        except ClientInputError:
            metrics.record_authorization("bad_request")
            raise

        account = self.store.get_account_by_id(account_id)

        if account.number != claims.account_number:
            metrics.record_authorization("owner_mismatch")
            log_authorization(logger, "denied", account_id=account_id, reason="owner_mismatch")
            raise AuthorizationError()

        metrics.record_authorization("allowed")
        log_authorization(logger, "allowed", account_id=account_id)
        return account
