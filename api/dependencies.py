"""
Dependency Injection Functions
==============================

FastAPI dependency injection for the account repository, the account
service and authentication.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, HTTPBearer, HTTPAuthorizationCredentials

from api.services.account_repository import AccountRepository, MongoAccountRepository
from api.services.account_service import AccountService
from api.utils.security import get_account_id, verify_token
from config import get_settings
from exceptions import AuthenticationRequiredError

# Security schemes: Bearer header, or the legacy x-auth-token header
security = HTTPBearer(auto_error=False)
auth_token_header = APIKeyHeader(name="x-auth-token", auto_error=False)


def get_account_repository() -> AccountRepository:
    """
    Dependency to get the account repository.

    The MongoDB client is created once during application startup
    (lifespan) and stored in app_state.

    Returns:
        AccountRepository: Repository bound to the users collection

    Raises:
        HTTPException: If the database client is not initialized
    """
    from api.main import app_state

    client = app_state.get("mongo_client")
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not initialized. Service is starting up."
        )
    return MongoAccountRepository.from_client(client, get_settings())


def get_account_service(
    repository: AccountRepository = Depends(get_account_repository)
) -> AccountService:
    """Dependency to get an AccountService bound to the current repository."""
    return AccountService(repository)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_token: Optional[str] = Depends(auth_token_header)
) -> str:
    """
    Dependency to get the current account id from the request token.

    Accepts `Authorization: Bearer <token>` or `x-auth-token: <token>`.
    Use this dependency for routes that REQUIRE authentication.

    Returns:
        str: The authenticated account id

    Raises:
        AuthenticationRequiredError: 401 if no token was sent
        InvalidTokenError: 401 if the token is invalid or expired
    """
    token = credentials.credentials if credentials is not None else auth_token
    if not token:
        raise AuthenticationRequiredError()

    payload = verify_token(token)
    return get_account_id(payload)
