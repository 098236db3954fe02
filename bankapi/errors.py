"""Error taxonomy for the Bank API.

Every error carries the HTTP status it maps to and a public message. The
message is the only thing returned to clients (as ``{"error": message}``);
diagnostic detail goes to the logs.
"""


class ApiError(Exception):
    """Base class for errors surfaced to the HTTP layer."""

    status_code = 500
    message = "internal server error"

    def __init__(self, detail: str = ""):
        self.detail = detail or self.message
        super().__init__(self.detail)


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class ClientInputError(ApiError):
    """Malformed identifier or request body."""

    status_code = 400
    message = "invalid request body"

    def __init__(self, message: str = "", detail: str = ""):
        if message:
            self.message = message
        super().__init__(detail)


class AuthenticationError(ApiError):
    """Unknown account number or wrong password."""

    status_code = 401
    message = "authentication failed"


class AuthorizationError(ApiError):
    """Invalid credential or account-number mismatch."""

    status_code = 403
    message = "permission denied"


class NotFoundError(ApiError):
    status_code = 404
    message = "not found"


class AccountNotFound(NotFoundError):
    message = "account not found"


class InternalError(ApiError):
    status_code = 500
    message = "internal server error"


class StoreError(InternalError):
    """The account store failed to complete an operation."""


class DuplicateAccountNumber(StoreError):
    """An account with the same number already exists."""


class SigningError(InternalError):
    """The token could not be signed."""


class InvalidToken(Exception):
    """A credential failed parsing, signature or claim validation.

    Callers convert it to ``AuthorizationError``; the reason is logged,
    never returned.
    """
