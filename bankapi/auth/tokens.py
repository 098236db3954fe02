"""Functions and classes for issuing and verifying login tokens."""
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bankapi.domain import Account
from bankapi.errors import InvalidToken, SigningError

# Only symmetric HMAC algorithms are ever accepted on verification
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")

ACCOUNT_NUMBER_CLAIM = "accountNumber"


class TokenClaims(BaseModel):
    """Validated contents of a login token."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    account_number: int = Field(..., alias=ACCOUNT_NUMBER_CLAIM, strict=True)
    expires_at: datetime = Field(..., alias="exp")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """
    Signs and verifies account tokens with a shared secret.

    The secret is handed in at construction and never re-read, so an
    issuer built in a test with a fixed secret behaves deterministically.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        algorithm: str = "HS256",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("token secret must not be empty")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self.ttl = timedelta(seconds=ttl_seconds)
        self.algorithm = algorithm
        self._clock = clock or _utcnow

    def issue(self, account: Account) -> str:
        """
        Produce a signed token asserting the account's number.

        Args:
            account: An account whose password has already been verified

        Returns:
            Compact JWT string

        Raises:
            SigningError: If the token could not be signed
        """
        claims = {
            ACCOUNT_NUMBER_CLAIM: account.number,
            "exp": self._clock() + self.ttl,
        }
        try:
            return jwt.encode(claims, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise SigningError(f"failed to sign token: {e}") from e

    def verify(self, token: Optional[str]) -> TokenClaims:
        """
        Decode a token and return its typed claims.

        Raises:
            InvalidToken: If the token is missing, malformed, signed with a
                non-HMAC algorithm, carries a bad signature, is expired, or
                has missing/ill-typed claims
        """
        if not token:
            raise InvalidToken("no token presented")
        try:
            data: dict = jwt.decode(
                token,
                self._secret,
                algorithms=list(HMAC_ALGORITHMS),
                # Expiry is checked below against the issuer's clock
                options={"require": ["exp", ACCOUNT_NUMBER_CLAIM], "verify_exp": False},
            )
        except jwt.PyJWTError as e:
            raise InvalidToken("not a valid token") from e

        try:
            claims = TokenClaims.model_validate(data)
        except ValidationError as e:
            raise InvalidToken("token claims are malformed") from e

        if claims.expires_at <= self._clock():
            raise InvalidToken("token has expired")
        return claims
