"""Token issuing and the account authorization gate."""
from bankapi.auth.gate import AuthorizationGate, parse_account_id
from bankapi.auth.tokens import TokenClaims, TokenIssuer

__all__ = ["AuthorizationGate", "TokenClaims", "TokenIssuer", "parse_account_id"]
