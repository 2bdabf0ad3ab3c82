"""
User Endpoints
==============

Registration, login, and profile retrieval.

    POST /register  - create an account, returns {token}
    POST /login     - exchange credentials for {token}
    GET  /          - profile of the account behind the token
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from api.dependencies import get_account_service, get_current_user
from api.middleware.rate_limiter import limiter, auth_rate_limit
from api.models.user import (
    AccountPublic,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from api.services.account_service import AccountService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Register a new user",
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(auth_rate_limit)
async def register(
    request: Request,
    body: RegisterRequest,
    service: AccountService = Depends(get_account_service)
) -> TokenResponse:
    """
    Register a new account.

    Fails with 400 "User already exists" if the email is taken.
    """
    token = await service.register(body.name, body.email, body.password)
    return TokenResponse(token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in an existing user",
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(auth_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    service: AccountService = Depends(get_account_service)
) -> TokenResponse:
    """
    Exchange email and password for a token.

    Unknown email and wrong password both yield 400 "Invalid Credentials".
    """
    token = await service.login(body.email, body.password)
    return TokenResponse(token=token)


@router.get(
    "/",
    response_model=AccountPublic,
    summary="Get the current user",
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_me(
    account_id: str = Depends(get_current_user),
    service: AccountService = Depends(get_account_service)
) -> AccountPublic:
    """Return the authenticated account, without its password."""
    logger.debug(f"Profile fetch for account {account_id}")
    return await service.get_profile(account_id)
