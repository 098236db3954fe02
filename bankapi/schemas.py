"""Pydantic schemas for request/response validation."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from bankapi.domain import Account, MAX_ACCOUNT_NUMBER, MAX_PASSWORD_BYTES


class CamelModel(BaseModel):
    """Base model using camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateAccountRequest(CamelModel):
    """Request body for POST /account."""
    first_name: str = Field(..., min_length=1, description="Account holder's first name")
    last_name: str = Field(..., min_length=1, description="Account holder's last name")
    password: str = Field(..., min_length=1, description="Plaintext password")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class AccountResponse(CamelModel):
    """Public view of an account; the password hash is never included."""
    id: int
    first_name: str
    last_name: str
    number: int
    balance: int
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            first_name=account.first_name,
            last_name=account.last_name,
            number=account.number,
            balance=account.balance,
            created_at=account.created_at,
        )


class DeleteAccountResponse(BaseModel):
    """Response body for DELETE /account/{id}."""
    deleted: int


class LoginRequest(BaseModel):
    """Request body for POST /login."""
    number: int = Field(..., ge=0, le=MAX_ACCOUNT_NUMBER, description="Account number")
    password: str


class LoginResponse(BaseModel):
    """Response body for POST /login."""
    token: str
    number: int


class TransferRequest(CamelModel):
    """Request body for POST /transfer (echoed back unchanged)."""
    to_account: int
    amount: int


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
