"""API route handlers for the Bank API service."""
from typing import List

from fastapi import APIRouter, Depends, Request

from bankapi.auth import AuthorizationGate, parse_account_id
from bankapi.domain import Account
from bankapi.logging import get_logger
from bankapi.schemas import (
    AccountResponse, CreateAccountRequest, DeleteAccountResponse,
    LoginRequest, LoginResponse,
    TransferRequest,
)
from bankapi.services import AccountService

logger = get_logger(__name__)

router = APIRouter(tags=["accounts"])


def get_account_service(request: Request) -> AccountService:
    """Dependency that provides the app's account service."""
    return request.app.state.account_service


def get_authorization_gate(request: Request) -> AuthorizationGate:
    """Dependency that provides the app's authorization gate."""
    return request.app.state.authorization_gate


def authorized_account(
    id: str,
    request: Request,
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> Account:
    """Dependency running the authorization gate for ``/account/{id}``."""
    token = request.headers.get(request.app.state.settings.auth_header)
    return gate.authorize(token, id)


@router.get("/account", response_model=List[AccountResponse])
def list_accounts(service: AccountService = Depends(get_account_service)):
    """List every account."""
    accounts = service.list_accounts()
    logger.info("accounts_listed", account_count=len(accounts))
    return [AccountResponse.from_account(a) for a in accounts]


@router.get("/account/{id}", response_model=AccountResponse)
def get_account(account: Account = Depends(authorized_account)):
    """
    Fetch a single account.

    Requires a token in the auth header whose account number matches the
    account at ``id``; anything else is answered with 403.
    """
    return AccountResponse.from_account(account)


@router.post("/account", response_model=AccountResponse)
def create_account(
    request_body: CreateAccountRequest,
    service: AccountService = Depends(get_account_service),
):
    """Create an account; the number is assigned by the service."""
    account = service.create_account(request_body)
    return AccountResponse.from_account(account)


@router.delete("/account/{id}", response_model=DeleteAccountResponse)
def delete_account(id: str, service: AccountService = Depends(get_account_service)):
    """Delete an account by identifier."""
    account_id = parse_account_id(id)
    return DeleteAccountResponse(deleted=service.delete_account(account_id))


@router.post("/login", response_model=LoginResponse)
def login(
    request_body: LoginRequest,
    service: AccountService = Depends(get_account_service),
):
    """Exchange an account number and password for a signed token."""
    return service.login(request_body)


@router.post("/transfer", response_model=TransferRequest)
async def transfer(request_body: TransferRequest):
    """Echo the transfer request; no funds are moved."""
    logger.info("transfer_received", to_account=request_body.to_account, amount=request_body.amount)
    return request_body
